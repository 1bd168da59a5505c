"""
In-memory commit journal.

Records the original bytes of every touched file (before it is written),
every relocation and every directory created for one. Rollback replays the
journal in reverse. It is discarded once the whole operation has committed.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger("rehome.journal")


@dataclass
class JournalEntry:
    path: Path
    original: bytes
    written: bool = False
    relocated_to: Optional[Path] = None


@dataclass
class Journal:
    entries: list[JournalEntry] = field(default_factory=list)
    created_dirs: list[Path] = field(default_factory=list)

    def record(self, path: Path, original: bytes) -> JournalEntry:
        entry = JournalEntry(path=path, original=original)
        self.entries.append(entry)
        return entry

    def record_dir(self, path: Path) -> None:
        self.created_dirs.append(path)

    def rollback(
        self,
        write: Callable[[Path, bytes], None],
        on_restored: Optional[Callable[[Path], None]] = None,
    ) -> tuple[list[str], list[str]]:
        """
        Undo every recorded change, newest first.

        Keeps going past individual failures so that as much as possible is
        restored.

        Returns:
            (restored file paths, error messages)
        """
        restored: list[str] = []
        errors: list[str] = []

        for entry in reversed(self.entries):
            try:
                if entry.relocated_to is not None and entry.relocated_to.exists():
                    os.replace(entry.relocated_to, entry.path)
                if entry.written or entry.relocated_to is not None:
                    write(entry.path, entry.original)
                restored.append(str(entry.path))
                if on_restored is not None:
                    on_restored(entry.path)
            except OSError as e:
                logger.error(f"Rollback failed for {entry.path}: {e}")
                errors.append(f"{entry.path}: {e}")

        for directory in reversed(self.created_dirs):
            try:
                directory.rmdir()
            except OSError as e:
                logger.warning(f"Could not remove created directory {directory}: {e}")

        return restored, errors
