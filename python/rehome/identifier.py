"""
Fully-qualified type identifiers and rename requests.

An Identifier is a package path plus a simple name, e.g. ``com.foo.Bar`` is
package ``("com", "foo")`` and simple name ``Bar``. Validation follows the
Java/Kotlin identifier rules closely enough to reject anything a compiler
would reject in an import statement.
"""

import re
from dataclasses import dataclass

from rehome.errors import InvalidIdentifier

_SEGMENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Hard keywords of Java and Kotlin that can never appear as a path segment
RESERVED_WORDS = frozenset(
    {
        "abstract", "as", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double", "else",
        "enum", "extends", "false", "final", "finally", "float", "for", "fun",
        "goto", "if", "implements", "import", "in", "instanceof", "int",
        "interface", "is", "long", "native", "new", "null", "object", "package",
        "private", "protected", "public", "return", "short", "static",
        "strictfp", "super", "switch", "synchronized", "this", "throw",
        "throws", "transient", "true", "try", "typealias", "typeof", "val",
        "var", "void", "volatile", "when", "while",
    }
)


def validate_fqn(value: str) -> tuple[bool, str]:
    """
    Check if a string is a valid fully-qualified type name.

    Returns (is_valid, error_message).
    """
    if not value:
        return False, "FQN cannot be empty"

    if value != value.strip():
        return False, "FQN cannot contain surrounding whitespace"

    segments = value.split(".")
    if len(segments) < 2:
        return False, "FQN needs at least one package segment (e.g. com.foo.Bar)"

    for segment in segments:
        if not segment:
            return False, "FQN contains an empty segment"
        if not _SEGMENT_RE.match(segment):
            if segment[0].isdigit():
                return False, f"segment '{segment}' cannot start with a number"
            return False, f"segment '{segment}' contains invalid characters"
        if segment in RESERVED_WORDS:
            return False, f"segment '{segment}' is a reserved keyword"

    for segment in segments[:-1]:
        if segment[0].isupper():
            return False, f"nested type paths are not supported (package segment '{segment}')"

    return True, ""


@dataclass(frozen=True)
class Identifier:
    """A package-level type identifier."""

    package: tuple[str, ...]
    simple_name: str

    @classmethod
    def parse(cls, value: str) -> "Identifier":
        """Parse a dotted FQN, raising InvalidIdentifier if malformed."""
        is_valid, error = validate_fqn(value)
        if not is_valid:
            raise InvalidIdentifier(value, error)
        *package, simple_name = value.split(".")
        return cls(package=tuple(package), simple_name=simple_name)

    @property
    def package_name(self) -> str:
        return ".".join(self.package)

    @property
    def fqn(self) -> str:
        return f"{self.package_name}.{self.simple_name}"

    def __str__(self) -> str:
        return self.fqn


@dataclass(frozen=True)
class RenameRequest:
    """Rename ``source`` to ``target`` everywhere under a root."""

    source: Identifier
    target: Identifier

    def __post_init__(self):
        if self.source == self.target:
            raise InvalidIdentifier(self.target.fqn, "target must differ from source")

    @classmethod
    def parse(cls, source_fqn: str, target_fqn: str) -> "RenameRequest":
        return cls(source=Identifier.parse(source_fqn), target=Identifier.parse(target_fqn))

    @property
    def moves_package(self) -> bool:
        return self.source.package != self.target.package

    @property
    def renames_type(self) -> bool:
        return self.source.simple_name != self.target.simple_name
