"""
Per-file import scope and binding resolution.

A FileImportContext is built once per file from its package declaration and
import statements. The resolver uses it to decide whether a bare simple name
refers to the rename source, to some other same-named type, or cannot be
decided (in which case it fails closed).
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from rehome.identifier import Identifier, RenameRequest
from rehome.refactor.classifier import DECLARATION_RE, IMPORT_RE, PACKAGE_RE, normalize_dotted
from rehome.refactor.lexical import SourceText
from rehome.refactor.types import Binding, Occurrence, Role


@dataclass(frozen=True)
class ImportEntry:
    """One import statement."""

    path: str
    line: int
    wildcard: bool = False
    static: bool = False
    alias: Optional[str] = None

    @property
    def identifier(self) -> Optional[Identifier]:
        """The imported type, for single-type imports with a package."""
        if self.wildcard or "." not in self.path:
            return None
        *package, simple_name = self.path.split(".")
        return Identifier(package=tuple(package), simple_name=simple_name)

    @property
    def binds_type_name(self) -> bool:
        return not self.wildcard and not self.static

    @property
    def binding_name(self) -> str:
        """Simple name this import brings into scope."""
        return self.alias or self.path.rsplit(".", 1)[-1]


@dataclass
class FileImportContext:
    """Import-implied scope of one file."""

    declared_package: tuple[str, ...] = ()
    package_line: Optional[int] = None
    package_span: Optional[tuple[int, int]] = None
    imports: list[ImportEntry] = field(default_factory=list)
    declared_types: set[str] = field(default_factory=set)

    @property
    def explicit_imports(self) -> set[Identifier]:
        return {
            ident
            for entry in self.imports
            if entry.binds_type_name and (ident := entry.identifier) is not None
        }

    @property
    def wildcard_import_packages(self) -> set[tuple[str, ...]]:
        return {tuple(e.path.split(".")) for e in self.imports if e.wildcard and not e.static}

    @property
    def last_import_line(self) -> Optional[int]:
        return max((e.line for e in self.imports), default=None)

    def imports_for_name(self, simple_name: str) -> set[Identifier]:
        """Distinct types imported under ``simple_name`` by single-type imports."""
        found = set()
        for entry in self.imports:
            if entry.binds_type_name and entry.binding_name == simple_name:
                ident = entry.identifier
                if ident is not None:
                    found.add(ident)
        return found

    def imports_exactly(self, identifier: Identifier) -> bool:
        """Whether a single-type, unaliased import of ``identifier`` exists."""
        return any(
            e.binds_type_name and e.alias is None and e.identifier == identifier
            for e in self.imports
        )


def build_import_context(source: SourceText) -> FileImportContext:
    """Parse the package declaration, imports and declared type names."""
    ctx = FileImportContext()

    for line_num, text in source.code_lines():
        if ctx.package_line is None:
            package_match = PACKAGE_RE.match(text)
            if package_match:
                ctx.declared_package = tuple(normalize_dotted(package_match.group("path")).split("."))
                ctx.package_line = line_num
                ctx.package_span = package_match.span("path")
                continue

        import_match = IMPORT_RE.match(text)
        if import_match:
            ctx.imports.append(
                ImportEntry(
                    path=normalize_dotted(import_match.group("path")),
                    line=line_num,
                    wildcard=import_match.group("wildcard") is not None,
                    static=import_match.group("static") is not None,
                    alias=import_match.group("alias"),
                )
            )
            continue

        for decl in DECLARATION_RE.finditer(text):
            if not source.in_literal(line_num, decl.start("name")):
                ctx.declared_types.add(decl.group("name"))

    return ctx


def simple_name_binding(ctx: FileImportContext, source: Identifier) -> tuple[Binding, str]:
    """
    Resolve what an unqualified ``source.simple_name`` refers to in a file.

    Precedence: single-type imports, then the file's own declarations, then
    same-package visibility, then wildcard imports. An explicit import of a
    different same-named type alongside a wildcard that covers the source
    package is treated as ambiguous rather than guessing precedence.
    """
    name = source.simple_name
    explicit = ctx.imports_for_name(name)

    if len(explicit) > 1:
        listed = ", ".join(sorted(i.fqn for i in explicit))
        return Binding.AMBIGUOUS, f"multiple imports bind '{name}': {listed}"

    if explicit:
        (imported,) = explicit
        if imported == source:
            return Binding.BOUND, "explicit import"
        if source.package in ctx.wildcard_import_packages:
            return (
                Binding.AMBIGUOUS,
                f"import of {imported.fqn} conflicts with wildcard import {source.package_name}.*",
            )
        return Binding.NOT_BOUND, f"bound to {imported.fqn} by explicit import"

    if name in ctx.declared_types and ctx.declared_package != source.package:
        return Binding.NOT_BOUND, f"file declares its own '{name}'"

    if ctx.declared_package == source.package:
        return Binding.BOUND, "same package"

    if source.package in ctx.wildcard_import_packages:
        return Binding.BOUND, "wildcard import"

    return Binding.NOT_BOUND, f"no import brings {source.fqn} into scope"


def resolve_binding(occurrence: Occurrence, ctx: FileImportContext, request: RenameRequest) -> tuple[Binding, str]:
    source = request.source

    if occurrence.in_literal:
        return Binding.NOT_BOUND, "inside comment or string literal"

    role = occurrence.role
    if role is Role.IMPORT:
        return Binding.BOUND, "import statement"
    if role is Role.QUALIFIED_USAGE:
        return Binding.BOUND, "fully-qualified reference"
    if role is Role.PACKAGE_DECL:
        return Binding.NOT_BOUND, "package declaration"
    if role is Role.DECLARATION_SITE:
        if ctx.declared_package == source.package:
            return Binding.BOUND, "declaration"
        declared = ".".join(ctx.declared_package) or "<default>"
        return Binding.NOT_BOUND, f"declares a different '{source.simple_name}' in package {declared}"

    if occurrence.qualifier:
        return Binding.NOT_BOUND, f"qualified by '{occurrence.qualifier}'"
    return simple_name_binding(ctx, source)


def resolve(occurrence: Occurrence, ctx: FileImportContext, request: RenameRequest) -> Occurrence:
    """Return the occurrence with its binding set."""
    binding, reason = resolve_binding(occurrence, ctx, request)
    return replace(occurrence, binding=binding, reason=reason)
