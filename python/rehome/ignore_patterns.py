"""
.gitignore pattern matching and file filtering.

Uses pathspec library for GitIgnore-compliant pattern matching. The combined
spec is defaults + .gitignore + .rehomeignore + caller-supplied patterns.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from pathspec import PathSpec

from rehome.ignore_defaults import DEFAULT_IGNORES, DEFAULT_MAX_FILE_SIZE, IGNORE_FILE_NAME

# Get logger instance
logger = logging.getLogger("rehome.ignore_patterns")


def _read_pattern_file(path: Path) -> list[str]:
    """Read a gitignore-syntax file, dropping blank lines and comments."""
    if not path.exists():
        return []

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        # If the file is unreadable, just use the other patterns
        logger.warning(f"Could not read {path.name}: {e}")
        return []

    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def load_gitignore(root: Path) -> list[str]:
    """Load .gitignore patterns from the root directory."""
    return _read_pattern_file(root / ".gitignore")


def load_rehomeignore(root: Path) -> list[str]:
    """
    Load custom ignore patterns from .rehomeignore.

    Args:
        root: Root directory of the rename

    Returns:
        List of pattern strings (empty if file doesn't exist)
    """
    patterns = _read_pattern_file(root / IGNORE_FILE_NAME)
    if patterns:
        logger.info(f"📋 Loaded {len(patterns)} custom patterns from {IGNORE_FILE_NAME}")
    return patterns


def load_all_ignores(
    root: Path,
    extra_patterns: Optional[Iterable[str]] = None,
    use_gitignore: bool = True,
) -> PathSpec:
    """
    Load all ignore patterns: defaults + .gitignore + .rehomeignore + extras.

    Args:
        root: Root directory of the rename
        extra_patterns: Additional gitignore-style patterns from the caller
        use_gitignore: Whether to honour the root's .gitignore

    Returns:
        PathSpec object combining all patterns
    """
    patterns = DEFAULT_IGNORES.copy()

    if use_gitignore:
        patterns.extend(load_gitignore(root))

    patterns.extend(load_rehomeignore(root))

    if extra_patterns:
        patterns.extend(p for p in extra_patterns if p and p.strip())

    return PathSpec.from_lines("gitwildmatch", patterns)


def is_file_too_large(file_path: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> bool:
    """
    Check if a file exceeds the size limit.

    Returns False when the file cannot be stat'ed, so the caller's read
    reports the real problem.
    """
    try:
        return file_path.stat().st_size > max_size
    except OSError:
        return False


def relative_posix(file_path: Path, root: Path) -> Optional[str]:
    """Relative path with forward slashes, or None if outside root."""
    try:
        return file_path.relative_to(root).as_posix()
    except ValueError:
        return None


def should_ignore(
    file_path: Path,
    root: Path,
    spec: PathSpec,
    extensions: Iterable[str],
    max_size: Optional[int] = None,
) -> bool:
    """
    Check if a file is outside the rename's search scope.

    Args:
        file_path: Absolute path to file
        root: Absolute path to the rename root
        spec: Combined ignore spec (see load_all_ignores)
        extensions: Source extensions to keep (e.g. ".java")
        max_size: Optional size limit in bytes

    Returns:
        True if file should be ignored, False otherwise
    """
    relative_path = relative_posix(file_path, root)
    if relative_path is None:
        # File is not under the root, ignore it
        return True

    if file_path.suffix.lower() not in {ext.lower() for ext in extensions}:
        return True

    if spec.match_file(relative_path):
        return True

    if max_size is not None and is_file_too_large(file_path, max_size):
        logger.debug(f"📏 Skipping oversized file: {relative_path}")
        return True

    return False
