"""
Edit planning.

Turns one file's resolved occurrences into a FilePlan: the ordered text
edits, an optional relocation for the declaring file, and the per-line diff
shown to the reviewer. Files that would end up with an unresolvable name
clash are skipped here, before anything is written.
"""

import logging
from pathlib import Path
from typing import Optional

from rehome.identifier import RenameRequest
from rehome.refactor.analysis import FileAnalysis
from rehome.refactor.edits import REMOVE_LINE, line_diffs, order_edits
from rehome.refactor.scope import FileImportContext
from rehome.refactor.types import Binding, FilePlan, Occurrence, Role, SkipReason, TextEdit

logger = logging.getLogger("rehome.planner")


def _replacement_for(occurrence: Occurrence, request: RenameRequest) -> Optional[str]:
    """New text for a bound occurrence, or None if it stays as is."""
    role = occurrence.role
    if role in (Role.IMPORT, Role.QUALIFIED_USAGE):
        # Never shorten a qualified reference to the simple name
        return request.target.fqn
    if role in (Role.SIMPLE_NAME_USAGE, Role.DECLARATION_SITE):
        return request.target.simple_name if request.renames_type else None
    return None


def _find_conflict(
    analysis: FileAnalysis,
    request: RenameRequest,
    declaring: bool,
) -> Optional[tuple[SkipReason, str]]:
    ctx = analysis.context
    target = request.target

    clashing = ctx.imports_for_name(target.simple_name) - {target, request.source}
    if clashing:
        listed = ", ".join(sorted(i.fqn for i in clashing))
        return SkipReason.IMPORT_CONFLICT, f"already imports {listed}"

    introduces_simple_name = any(o.role is not Role.QUALIFIED_USAGE for o in analysis.bound)
    if (
        request.renames_type
        and introduces_simple_name
        and target.simple_name in ctx.declared_types
    ):
        where = "the renamed file" if declaring else "this file"
        return SkipReason.DECLARATION_CONFLICT, f"{where} already declares '{target.simple_name}'"

    return None


def _needs_target_import(analysis: FileAnalysis, request: RenameRequest, declaring: bool) -> bool:
    """
    Whether simple-name usages lose their binding after the move.

    Usages bound by same-package visibility or a wildcard import stop
    resolving once the type leaves that package, unless the file ends up in
    the target package itself.
    """
    ctx = analysis.context
    if not request.moves_package:
        return False
    if not any(o.role is Role.SIMPLE_NAME_USAGE for o in analysis.bound):
        return False
    if ctx.imports_exactly(request.source) or ctx.imports_exactly(request.target):
        return False
    package_after = request.target.package if declaring else ctx.declared_package
    return package_after != request.target.package


def _is_redundant_target_import(
    occurrence: Occurrence,
    ctx: FileImportContext,
    request: RenameRequest,
    package_after: tuple[str, ...],
) -> bool:
    """
    Whether the rewritten import would name a type the file already sees.

    That is the case when the target lands in the file's own package or in
    a package the file wildcard-imports, while the source did not. Such an
    import is dropped instead of rewritten, which undoes the import a move
    in the other direction adds. An import that was already redundant for
    the source is rewritten as usual.
    """
    if occurrence.role is not Role.IMPORT:
        return False
    entry = next((e for e in ctx.imports if e.line == occurrence.line), None)
    if entry is None or not entry.binds_type_name or entry.alias is not None:
        return False
    if entry.identifier != request.source:
        return False
    wildcards = ctx.wildcard_import_packages
    if request.source.package == ctx.declared_package or request.source.package in wildcards:
        return False
    return request.target.package == package_after or request.target.package in wildcards


def _import_insertion(analysis: FileAnalysis, request: RenameRequest) -> Optional[TextEdit]:
    ctx = analysis.context
    anchor = ctx.last_import_line or ctx.package_line
    if anchor is None:
        return None

    anchor_text = analysis.source.line_text(anchor)
    newline = "\r\n" if b"\r\n" in (analysis.snapshot or b"") else "\n"
    terminator = ";" if anchor_text.rstrip().endswith(";") else ""
    column = len(anchor_text)

    return TextEdit(
        line=anchor,
        start=column,
        end=column,
        replacement=f"{newline}import {request.target.fqn}{terminator}",
        kind="import_insert",
    )


def _package_edit(ctx: FileImportContext, request: RenameRequest) -> Optional[TextEdit]:
    if ctx.package_line is None or ctx.package_span is None:
        return None
    start, end = ctx.package_span
    return TextEdit(
        line=ctx.package_line,
        start=start,
        end=end,
        replacement=request.target.package_name,
        kind=Role.PACKAGE_DECL.value,
    )


def relocation_for(
    file: Path,
    root: Path,
    request: RenameRequest,
    declared_types: set[str],
) -> tuple[Optional[Path], Optional[tuple[SkipReason, str]]]:
    """
    Where the declaring file moves to.

    The trailing directories that mirror the source package are swapped for
    the target package; a file outside such a layout stays in its
    directory. The file name follows the type name only when it matched the
    source simple name to begin with.

    Returns:
        (new_path or None, skip or None)
    """
    source, target = request.source, request.target
    named_after_type = file.stem == source.simple_name

    if request.moves_package and not named_after_type and declared_types - {source.simple_name}:
        return None, (
            SkipReason.SHARED_DECLARATION_FILE,
            f"{file.name} declares other types; changing its package would move them too",
        )

    new_dir = file.parent
    if request.moves_package:
        depth = len(source.package)
        parent_parts = file.parent.parts
        if len(parent_parts) >= depth and tuple(parent_parts[-depth:]) == source.package:
            base = file.parent
            for _ in range(depth):
                base = base.parent
            candidate = base.joinpath(*target.package)
            if base == root or root in base.parents:
                new_dir = candidate
            else:
                logger.warning(f"Package root of {file} lies outside {root}; keeping directory")
        else:
            logger.warning(f"{file} does not sit in a directory mirroring {source.package_name}; keeping directory")

    new_name = f"{target.simple_name}{file.suffix}" if named_after_type else file.name
    new_path = new_dir / new_name

    if new_path == file:
        return None, None
    if new_path.exists():
        return None, (SkipReason.RELOCATION_CONFLICT, f"{new_path} already exists")
    return new_path, None


def plan_file(analysis: FileAnalysis, request: RenameRequest, root: Path) -> FilePlan:
    """
    Build the FilePlan for one analysed file.

    A plan with no edits and no relocation means the file held nothing bound
    to the source; the engine reports its occurrences as irrelevant.
    """
    plan = FilePlan(file=analysis.file, occurrences=analysis.occurrences, snapshot=analysis.snapshot)

    if analysis.skip_reason is not None:
        return plan.skip(analysis.skip_reason, analysis.skip_detail)

    if analysis.has_ambiguity:
        first = next(o for o in analysis.occurrences if o.binding is Binding.AMBIGUOUS)
        return plan.skip(SkipReason.SCOPE_AMBIGUOUS, f"line {first.line}: {first.reason}")

    bound = analysis.bound
    if not bound:
        return plan

    declaring = any(o.role is Role.DECLARATION_SITE for o in bound)

    conflict = _find_conflict(analysis, request, declaring)
    if conflict:
        return plan.skip(*conflict)

    package_after = request.target.package if declaring else analysis.context.declared_package

    edits: list[TextEdit] = []
    for occurrence in bound:
        if _is_redundant_target_import(occurrence, analysis.context, request, package_after):
            line_text = analysis.source.line_text(occurrence.line)
            edits.append(TextEdit(occurrence.line, 0, len(line_text), "", kind=REMOVE_LINE))
            continue
        replacement = _replacement_for(occurrence, request)
        if replacement is not None and replacement != occurrence.raw_text:
            edits.append(
                TextEdit(
                    line=occurrence.line,
                    start=occurrence.start,
                    end=occurrence.end,
                    replacement=replacement,
                    kind=occurrence.role.value,
                )
            )

    if declaring:
        if request.moves_package:
            package_edit = _package_edit(analysis.context, request)
            if package_edit is not None:
                edits.append(package_edit)
        if request.moves_package or request.renames_type:
            relocate_to, skip = relocation_for(analysis.file, root, request, analysis.context.declared_types)
            if skip:
                return plan.skip(*skip)
            plan.relocate_to = relocate_to

    if _needs_target_import(analysis, request, declaring):
        insertion = _import_insertion(analysis, request)
        if insertion is not None:
            edits.append(insertion)

    plan.edits = order_edits(edits)
    plan.diff = line_diffs(analysis.source.lines, plan.edits)
    return plan
