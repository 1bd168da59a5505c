"""
Exception taxonomy for rename operations.

Only operation-level failures are exceptions. Per-file and per-occurrence
problems (ambiguous scope, import conflicts, ...) are reported as
SkipReason values on the CommitResult and never abort the rest of the tree.
"""

from typing import Optional


class RehomeError(Exception):
    """Base class for all rename engine errors."""


class InvalidIdentifier(RehomeError, ValueError):
    """Malformed FQN input. Raised before any filesystem access."""

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid identifier '{value}': {reason}")


class SearchProviderError(RehomeError):
    """The text-search collaborator could not run."""


class IoFailure(RehomeError):
    """
    I/O error during the commit phase.

    By the time this reaches the caller every change made by the operation
    has already been rolled back. ``rolled_back`` lists the restored files,
    ``rollback_errors`` anything that could not be restored.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        rolled_back: Optional[list[str]] = None,
        rollback_errors: Optional[list[str]] = None,
    ):
        self.path = path
        self.rolled_back = rolled_back or []
        self.rollback_errors = rollback_errors or []
        super().__init__(message)


class StaleSnapshotError(IoFailure):
    """A file changed on disk between planning and commit."""


class ConcurrentOperationConflict(RehomeError):
    """Another rename operation holds the lock for an overlapping root."""

    retryable = True

    def __init__(self, root: str, holder: Optional[str] = None):
        self.root = root
        self.holder = holder
        detail = f" (held for {holder})" if holder and holder != root else ""
        super().__init__(f"Another rename operation is in progress for {root}{detail}")


class OperationCancelled(RehomeError):
    """The caller cancelled the operation before the commit phase."""


class InvalidRoot(RehomeError, ValueError):
    """The rename root is missing or not a directory."""
