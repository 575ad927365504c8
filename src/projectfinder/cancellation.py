"""
Cooperative cancellation for long-running searches.
"""

import threading


class SearchCancelled(Exception):
    """Raised when a search is abandoned through its CancellationToken."""
    pass


class CancellationToken:
    """
    Thread-safe flag checked between traversal steps.

    A host typically creates one token per keystroke and cancels the previous
    one when a newer query arrives.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise SearchCancelled if cancellation was requested."""
        if self._event.is_set():
            raise SearchCancelled("Search cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
