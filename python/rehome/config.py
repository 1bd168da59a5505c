"""
Rename options and environment overrides.

Environment Variables:
- REHOME_EXTENSIONS: Comma-separated source extensions (default: .java,.kt,.kts,.groovy)
- REHOME_EXCLUDE: Comma-separated extra gitignore-style exclude patterns
- REHOME_MAX_CONCURRENCY: Parallel file reads during scanning (default: 16)
- REHOME_MAX_FILE_SIZE: Skip source files larger than this many bytes (default: 2MB)
- REHOME_SEARCH: Search provider, "regex" (default) or "ripgrep"
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from rehome.ignore_defaults import DEFAULT_MAX_FILE_SIZE, DEFAULT_SOURCE_EXTENSIONS

logger = logging.getLogger("rehome.config")


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _normalize_extension(ext: str) -> str:
    ext = ext.lower()
    return ext if ext.startswith(".") else f".{ext}"


@dataclass
class RenameOptions:
    """Knobs for one rename operation."""

    dry_run: bool = False
    extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    exclude_patterns: list[str] = field(default_factory=list)
    use_gitignore: bool = True
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_concurrency: int = 16
    prune_empty_dirs: bool = True
    search_provider: str = "regex"
    # Commit only these files (paths relative to root or absolute). None = all.
    selected_files: Optional[list[str]] = None

    def __post_init__(self):
        self.extensions = tuple(_normalize_extension(e) for e in self.extensions)
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.max_file_size < 1:
            raise ValueError("max_file_size must be positive")

    @classmethod
    def from_env(cls, **overrides) -> "RenameOptions":
        """Build options from REHOME_* environment variables, then apply overrides."""
        env: dict = {}

        if value := os.environ.get("REHOME_EXTENSIONS"):
            env["extensions"] = tuple(_split_list(value))
        if value := os.environ.get("REHOME_EXCLUDE"):
            env["exclude_patterns"] = _split_list(value)
        if value := os.environ.get("REHOME_SEARCH"):
            env["search_provider"] = value.strip().lower()

        for var, key in (
            ("REHOME_MAX_CONCURRENCY", "max_concurrency"),
            ("REHOME_MAX_FILE_SIZE", "max_file_size"),
        ):
            if value := os.environ.get(var):
                try:
                    env[key] = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-integer {var}={value!r}")

        env.update(overrides)
        return cls(**env)

    def with_overrides(self, **changes) -> "RenameOptions":
        return replace(self, **changes)

    def is_selected(self, file_path: Path, root: Path) -> bool:
        """Whether a file is part of the committed subset."""
        if self.selected_files is None:
            return True
        wanted = set()
        for entry in self.selected_files:
            p = Path(entry)
            wanted.add((p if p.is_absolute() else root / p).resolve())
        return file_path.resolve() in wanted
