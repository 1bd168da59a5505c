"""
Transaction applier: the only component that mutates the filesystem.

Applies every accepted FilePlan with all-or-nothing semantics. Original
bytes go into the journal before a file is touched; any I/O failure rolls
the whole operation back before the error reaches the caller. Within one
file, text edits are written first and the relocation follows.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rehome.errors import IoFailure, StaleSnapshotError
from rehome.events import EventKind, EventLog
from rehome.refactor.cancel import CancelToken
from rehome.refactor.edits import apply_text_edits
from rehome.refactor.journal import Journal
from rehome.refactor.types import FilePlan

logger = logging.getLogger("rehome.applier")


@dataclass
class ApplyReport:
    files_changed: list[str] = field(default_factory=list)
    relocations: list[tuple[str, str]] = field(default_factory=list)
    pruned_dirs: list[str] = field(default_factory=list)


def _write_atomic(path: Path, data: bytes) -> None:
    """Write via a sibling temp file and os.replace, keeping permissions."""
    tmp = path.with_name(f".{path.name}.rehome-tmp")
    try:
        with open(tmp, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


def _make_dirs(directory: Path, journal: Journal) -> None:
    """mkdir -p, journaling each directory actually created (outermost first)."""
    missing = []
    current = directory
    while not current.exists():
        missing.append(current)
        current = current.parent
    for d in reversed(missing):
        d.mkdir()
        journal.record_dir(d)


def _move(src: Path, dst: Path) -> None:
    if dst.exists():
        raise FileExistsError(f"Relocation target exists: {dst}")
    os.rename(src, dst)


def _commit_file(plan: FilePlan, journal: Journal) -> None:
    current = plan.file.read_bytes()
    if plan.snapshot is not None and current != plan.snapshot:
        raise StaleSnapshotError(f"{plan.file} changed since it was planned", path=str(plan.file))

    entry = journal.record(plan.file, current)

    if plan.edits:
        new_text = apply_text_edits(current.decode("utf-8"), plan.edits)
        _write_atomic(plan.file, new_text.encode("utf-8"))
        entry.written = True

    if plan.relocate_to is not None:
        _make_dirs(plan.relocate_to.parent, journal)
        _move(plan.file, plan.relocate_to)
        entry.relocated_to = plan.relocate_to


def _prune_empty_dirs(start: Path, root: Path) -> list[str]:
    """Remove empty directories from ``start`` upward, stopping at root."""
    pruned = []
    current = start
    while current != root and root in current.parents:
        try:
            if any(current.iterdir()):
                break
            current.rmdir()
        except OSError as e:
            logger.warning(f"Could not prune {current}: {e}")
            break
        pruned.append(str(current))
        current = current.parent
    return pruned


def apply_plans(
    plans: list[FilePlan],
    root: Path,
    events: Optional[EventLog] = None,
    cancel: Optional[CancelToken] = None,
    prune_empty_dirs: bool = True,
) -> ApplyReport:
    """
    Commit plans atomically.

    Skipped plans and plans without changes are ignored; the caller filters
    and reports those.

    Raises:
        OperationCancelled: if cancelled before the first write
        IoFailure: after rolling back, if any write or move fails
    """
    events = events or EventLog()
    journal = Journal()
    report = ApplyReport()

    to_commit = [p for p in plans if not p.skipped and p.has_changes]

    if cancel is not None:
        cancel.raise_if_cancelled()

    current: Optional[FilePlan] = None
    try:
        for current in to_commit:
            _commit_file(current, journal)
            report.files_changed.append(str(current.file))
            if current.relocate_to is not None:
                report.relocations.append((str(current.file), str(current.relocate_to)))
            events.emit(
                EventKind.FILE_COMMITTED,
                f"committed {current.file}",
                path=str(current.file),
                relocated_to=str(current.relocate_to) if current.relocate_to else None,
                edits=len(current.edits),
            )
    except (OSError, IoFailure, ValueError, UnicodeDecodeError) as e:
        failed_path = str(current.file) if current is not None else None
        logger.error(f"❌ Commit failed at {failed_path}: {e}; rolling back {len(journal.entries)} files")

        restored, errors = journal.rollback(
            _write_atomic,
            on_restored=lambda p: events.emit(EventKind.FILE_ROLLED_BACK, f"rolled back {p}", path=str(p)),
        )

        message = f"Commit failed at {failed_path}: {e}"
        if errors:
            message += f" ({len(errors)} files could not be restored)"
        failure_cls = type(e) if isinstance(e, IoFailure) else IoFailure
        raise failure_cls(message, path=failed_path, rolled_back=restored, rollback_errors=errors) from e

    if prune_empty_dirs:
        for old, _new in report.relocations:
            report.pruned_dirs.extend(_prune_empty_dirs(Path(old).parent, root))

    logger.info(f"✅ Committed {len(report.files_changed)} files ({len(report.relocations)} relocated)")
    return report
