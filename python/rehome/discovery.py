"""
Source-file discovery for rename scans.

Performance: Uses os.walk() with directory pruning to skip ignored directories
BEFORE descending into them. Walking into build/ or node_modules/ and then
filtering is many times slower than skipping them entirely.
"""

import logging
import os
from pathlib import Path
from typing import Iterator

from pathspec import PathSpec

from rehome.ignore_patterns import is_file_too_large

logger = logging.getLogger("rehome.discovery")


def _optimized_walk(root: Path, ignore_spec: PathSpec) -> Iterator[tuple[Path, str]]:
    """
    Walk the tree using os.walk() with directory pruning.

    Prunes ignored directories IN-PLACE before descending, so ignored subtrees
    are never listed.

    Yields:
        Tuple of (file_path: Path, rel_str: str) for each non-ignored file
    """
    root_str = str(root)

    for current, dirs, files in os.walk(root):
        if current == root_str:
            rel_root = ""
        else:
            rel_root = os.path.relpath(current, root).replace("\\", "/")

        # Prune ignored directories in place (trailing slash for pathspec)
        dirs[:] = sorted(
            d for d in dirs
            if not ignore_spec.match_file(f"{rel_root}/{d}/" if rel_root else f"{d}/")
        )

        for f in sorted(files):
            rel_str = f"{rel_root}/{f}" if rel_root else f
            if ignore_spec.match_file(rel_str):
                continue
            yield Path(current) / f, rel_str


def discover_source_files(
    root: Path,
    ignore_spec: PathSpec,
    extensions: tuple[str, ...],
    max_file_size: int,
) -> list[Path]:
    """
    List every source file under root that a rename may touch.

    Args:
        root: Root directory of the rename
        ignore_spec: Combined ignore spec (see load_all_ignores)
        extensions: Source extensions to keep (e.g. ".java")
        max_file_size: Skip files larger than this (bytes)

    Returns:
        Sorted list of absolute file paths
    """
    wanted = {ext.lower() for ext in extensions}
    found: list[Path] = []

    for file_path, rel_str in _optimized_walk(root, ignore_spec):
        # Skip symlinks: a rename must not write through them
        if file_path.is_symlink():
            continue
        if file_path.suffix.lower() not in wanted:
            continue
        if is_file_too_large(file_path, max_file_size):
            logger.debug(f"📏 Skipping oversized file: {rel_str}")
            continue
        found.append(file_path)

    logger.debug(f"Discovered {len(found)} source files under {root}")
    return found
