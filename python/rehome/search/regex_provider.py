"""
In-process search provider.

Walks the tree with directory pruning and runs Python's ``re`` over each
file. File reads fan out over worker threads, bounded by the scope's
max_concurrency; results are appended to one list and sorted at the end.
"""

import asyncio
import logging
import re
from pathlib import Path

from pathspec import PathSpec

from rehome.discovery import discover_source_files
from rehome.search.types import RawMatch, SearchScope

logger = logging.getLogger("rehome.search")


def _search_file(file_path: Path, regex: re.Pattern) -> list[RawMatch]:
    """Search one file. Unreadable or non-UTF-8 files yield no matches."""
    try:
        content = file_path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable file {file_path}: {e}")
        return []

    matches: list[RawMatch] = []
    # Split on \n only so line numbers agree with ripgrep and the applier
    for line_num, line in enumerate(content.split("\n"), start=1):
        line_text = line[:-1] if line.endswith("\r") else line
        for m in regex.finditer(line_text):
            matches.append(
                RawMatch(
                    file=file_path,
                    line=line_num,
                    start=m.start(),
                    end=m.end(),
                    text=m.group(0),
                    line_text=line_text,
                )
            )
    return matches


class RegexSearchProvider:
    """Search provider backed by Python's re module."""

    name = "regex"

    async def search(self, root: Path, pattern: str, scope: SearchScope) -> list[RawMatch]:
        regex = re.compile(pattern)
        spec = scope.ignore_spec or PathSpec.from_lines("gitwildmatch", [])

        files = await asyncio.to_thread(
            discover_source_files, root, spec, scope.extensions, scope.max_file_size
        )

        semaphore = asyncio.Semaphore(max(1, scope.max_concurrency))

        async def _bounded(file_path: Path) -> list[RawMatch]:
            async with semaphore:
                return await asyncio.to_thread(_search_file, file_path, regex)

        per_file = await asyncio.gather(*(_bounded(f) for f in files))

        results = [m for file_matches in per_file for m in file_matches]
        logger.debug(f"regex search {pattern!r}: {len(results)} matches in {len(files)} files")
        return results
