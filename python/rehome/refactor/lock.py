"""
Advisory lock over a rename root.

Two layers: a process-wide registry of locked roots (nested roots count as
overlapping) and, where fcntl exists, an flock on a lock file keyed by the
resolved root so separate processes exclude each other too. Acquisition
never waits: contention raises ConcurrentOperationConflict.
"""

import hashlib
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from rehome.errors import ConcurrentOperationConflict

try:
    import fcntl
except ImportError:  # Windows
    fcntl = None  # type: ignore

logger = logging.getLogger("rehome.lock")

_registry_lock = threading.Lock()
_held_roots: set[Path] = set()


def _overlaps(a: Path, b: Path) -> bool:
    return a == b or a in b.parents or b in a.parents


class RootLock:
    """Non-blocking exclusive lock for one rename root."""

    def __init__(self, root: Path, lock_dir: Optional[Path] = None):
        self.root = Path(root).resolve()
        self.lock_dir = Path(lock_dir) if lock_dir else Path(tempfile.gettempdir())
        self._fd: Optional[int] = None
        self._held = False

    @property
    def lock_path(self) -> Path:
        digest = hashlib.sha1(str(self.root).encode("utf-8")).hexdigest()[:16]
        return self.lock_dir / f"rehome-{digest}.lock"

    def acquire(self) -> None:
        with _registry_lock:
            for held in _held_roots:
                if _overlaps(held, self.root):
                    raise ConcurrentOperationConflict(str(self.root), str(held))
            _held_roots.add(self.root)

        try:
            self._acquire_file_lock()
        except BaseException:
            with _registry_lock:
                _held_roots.discard(self.root)
            raise

        self._held = True
        logger.debug(f"🔒 Locked {self.root}")

    def _acquire_file_lock(self) -> None:
        if fcntl is None:
            return

        self.lock_dir.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.lock_path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            os.close(fd)
            raise ConcurrentOperationConflict(str(self.root), "another process")
        except OSError:
            os.close(fd)
            raise
        self._fd = fd

    def release(self) -> None:
        if not self._held:
            return
        if self._fd is not None:
            try:
                fcntl.flock(self._fd, fcntl.LOCK_UN)
            finally:
                os.close(self._fd)
                self._fd = None
        with _registry_lock:
            _held_roots.discard(self.root)
        self._held = False
        logger.debug(f"🔓 Released {self.root}")

    def __enter__(self) -> "RootLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
