"""Cooperative cancellation for rename operations."""

import threading

from rehome.errors import OperationCancelled


class CancelToken:
    """
    Set by the caller (e.g. a UI abort key), checked by the engine.

    The engine checks before taking the commit lock and again right before
    the first write; once a file's commit has started it finishes or rolls
    back.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Rename cancelled before commit")
