"""
Search provider type definitions and protocol.

The search provider is the external text-search collaborator: it is handed a
root and a regex and returns every match with its line and column. The
scanner never cares how the provider finds them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from pathspec import PathSpec

from rehome.ignore_defaults import DEFAULT_MAX_FILE_SIZE, DEFAULT_SOURCE_EXTENSIONS


@dataclass(frozen=True)
class RawMatch:
    """
    A single textual match.

    ``start``/``end`` are 0-based character columns into ``line_text``
    (end-exclusive). ``line`` is 1-based. ``line_text`` has its line
    terminator stripped.
    """

    file: Path
    line: int
    start: int
    end: int
    text: str
    line_text: str


@dataclass
class SearchScope:
    """Which files a search covers."""

    extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    ignore_spec: Optional[PathSpec] = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    # Providers that fan out over files respect this bound
    max_concurrency: int = 16


class SearchProvider(Protocol):
    """
    Protocol for text-search collaborators.

    Expected Behavior:
    ------------------
    - Return every match of ``pattern`` (Python/Rust regex syntax, no
      lookaround) in the files under ``root`` that ``scope`` admits
    - Return an empty list, not an error, when nothing matches
    - Never modify files

    Error Conditions:
    -----------------
    - Raise SearchProviderError when the search itself cannot run
    """

    name: str

    async def search(self, root: Path, pattern: str, scope: SearchScope) -> list[RawMatch]:
        ...
