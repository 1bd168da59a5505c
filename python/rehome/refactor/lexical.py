"""
Lightweight lexical pass over Java/Kotlin/Groovy source.

Finds the spans covered by comments and string/char literals so the
classifier can tell code from prose. This is deliberately not a tokenizer:
it only has to know where literals begin and end.
"""

from bisect import bisect_right
from dataclasses import dataclass


def _scan_block_comment(content: str, i: int, nested: bool) -> int:
    """Return the end offset of the block comment starting at i."""
    n = len(content)
    depth = 1
    j = i + 2
    while j < n:
        if content.startswith("*/", j):
            depth -= 1
            j += 2
            if depth == 0 or not nested:
                return j
            continue
        if nested and content.startswith("/*", j):
            depth += 1
            j += 2
            continue
        j += 1
    return n


def _scan_quoted(content: str, i: int, quote: str) -> int:
    """Return the end offset of a single-line quoted literal starting at i."""
    n = len(content)
    j = i + 1
    while j < n:
        ch = content[j]
        if ch == "\\":
            j += 2
            continue
        if ch == quote:
            return j + 1
        if ch == "\n":
            # Unterminated literal: stop at end of line
            return j
        j += 1
    return n


def literal_spans(content: str, nested_comments: bool = False) -> list[tuple[int, int]]:
    """
    Find comment and literal spans as absolute [start, end) offsets.

    Args:
        content: Full file text
        nested_comments: Kotlin allows nested block comments

    Returns:
        Sorted, non-overlapping spans
    """
    spans: list[tuple[int, int]] = []
    n = len(content)
    i = 0

    while i < n:
        ch = content[i]

        if ch == "/" and content.startswith("//", i):
            end = content.find("\n", i)
            end = n if end == -1 else end
        elif ch == "/" and content.startswith("/*", i):
            end = _scan_block_comment(content, i, nested_comments)
        elif ch == '"' and content.startswith('"""', i):
            # Java text blocks, Kotlin/Groovy raw strings
            close = content.find('"""', i + 3)
            end = n if close == -1 else close + 3
        elif ch == '"' or ch == "'":
            end = _scan_quoted(content, i, ch)
        else:
            i += 1
            continue

        spans.append((i, end))
        i = end

    return spans


@dataclass
class SourceText:
    """
    Decoded file content with line and literal lookup tables.

    Lines are split on "\\n" only; a trailing "\\r" is not part of the line
    text, so CRLF files keep their terminators untouched.
    """

    content: str
    nested_comments: bool = False

    def __post_init__(self):
        self.lines = [line[:-1] if line.endswith("\r") else line for line in self.content.split("\n")]
        self._line_starts: list[int] = []
        offset = 0
        for raw in self.content.split("\n"):
            self._line_starts.append(offset)
            offset += len(raw) + 1
        self._spans = literal_spans(self.content, self.nested_comments)
        self._span_starts = [s for s, _ in self._spans]

    def line_text(self, line: int) -> str:
        """Text of a 1-based line, without terminator."""
        return self.lines[line - 1]

    def offset(self, line: int, column: int) -> int:
        return self._line_starts[line - 1] + column

    def in_literal(self, line: int, column: int) -> bool:
        """Whether (line, column) falls inside a comment or literal."""
        pos = self.offset(line, column)
        idx = bisect_right(self._span_starts, pos) - 1
        if idx < 0:
            return False
        start, end = self._spans[idx]
        return start <= pos < end

    def code_lines(self):
        """Yield (line_number, text) for lines that do not start inside a literal."""
        for num, text in enumerate(self.lines, start=1):
            stripped = len(text) - len(text.lstrip())
            if stripped < len(text) and not self.in_literal(num, stripped):
                yield num, text
