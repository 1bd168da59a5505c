"""
Occurrence classification.

Assigns each raw match a syntactic role from its line content, in priority
order: import, package declaration, declaration site, qualified usage,
simple-name usage. Matches inside comments or string literals are always
simple-name usages flagged ``in_literal``; the scope resolver never binds
them.
"""

import re
from typing import Optional

from rehome.identifier import Identifier
from rehome.refactor.lexical import SourceText
from rehome.refactor.types import Occurrence, Role
from rehome.search.types import RawMatch

_DOTTED = r"[\w$]+(?:\s*\.\s*[\w$]+)*"

IMPORT_RE = re.compile(
    rf"^\s*import\s+(?P<static>static\s+)?(?P<path>{_DOTTED})"
    r"(?P<wildcard>\s*\.\s*\*)?(?:\s+as\s+(?P<alias>[\w$]+))?\s*;?"
)
PACKAGE_RE = re.compile(rf"^\s*package\s+(?P<path>{_DOTTED})\s*;?")

# Keyword directly before a defining name; covers "data class", "enum class",
# "sealed interface" and "@interface" through the trailing keyword
DECLARATION_KEYWORD_RE = re.compile(r"(?<![\w$])(?:class|interface|enum|object|record)\s+$")
_TYPE_KEYWORD = r"(?:class|interface|enum|object|record)"
# Keywords repeat in Kotlin ("enum class", "annotation class"); the name is
# whatever follows the last one
DECLARATION_RE = re.compile(
    rf"(?<![\w$])(?:(?:annotation|{_TYPE_KEYWORD})\s+)+(?!{_TYPE_KEYWORD}(?![\w$]))(?P<name>[A-Za-z_$][\w$]*)"
)

_QUALIFIER_RE = re.compile(rf"(?P<qualifier>{_DOTTED})\s*\.\s*$")


def normalize_dotted(path: str) -> str:
    """Drop whitespace around dots ("com . foo" -> "com.foo")."""
    return re.sub(r"\s+", "", path)


def qualifier_of(line_text: str, start: int) -> str:
    """
    Dotted qualifier directly before column ``start``.

    Returns "" for an unqualified token and "<expr>" when the token follows a
    dot that is not preceded by a plain name (e.g. ``foo().Bar``).
    """
    before = line_text[:start]
    if not before.rstrip().endswith("."):
        return ""
    m = _QUALIFIER_RE.search(before)
    if m is None:
        return "<expr>"
    return normalize_dotted(m.group("qualifier"))


def classify_role(
    line_text: str,
    start: int,
    end: int,
    matched_text: str,
    identifier: Identifier,
    in_literal: bool = False,
) -> Role:
    """Role of the match at [start, end) on ``line_text``."""
    if in_literal:
        return Role.SIMPLE_NAME_USAGE

    is_fqn = matched_text == identifier.fqn

    if is_fqn:
        import_match = IMPORT_RE.match(line_text)
        if import_match:
            path_start, path_end = import_match.span("path")
            if path_start <= start and end <= path_end:
                return Role.IMPORT

    if PACKAGE_RE.match(line_text):
        return Role.PACKAGE_DECL

    if not is_fqn and DECLARATION_KEYWORD_RE.search(line_text[:start]):
        return Role.DECLARATION_SITE

    if is_fqn:
        return Role.QUALIFIED_USAGE

    return Role.SIMPLE_NAME_USAGE


def classify(raw: RawMatch, identifier: Identifier, source: Optional[SourceText] = None) -> Occurrence:
    """
    Build an unresolved Occurrence for a raw match.

    Without ``source`` (file could not be read) the literal check is skipped.
    """
    in_literal = source.in_literal(raw.line, raw.start) if source is not None else False
    role = classify_role(raw.line_text, raw.start, raw.end, raw.text, identifier, in_literal)
    qualifier = qualifier_of(raw.line_text, raw.start) if role is Role.SIMPLE_NAME_USAGE else ""

    return Occurrence(
        file=raw.file,
        line=raw.line,
        start=raw.start,
        end=raw.end,
        raw_text=raw.text,
        line_text=raw.line_text,
        role=role,
        qualifier=qualifier,
        in_literal=in_literal,
    )
