"""Exceptions raised by the progress console."""
from __future__ import annotations


class ProgressProtocolError(RuntimeError):
    """
    Raised when the progress event stream breaks its contract: unknown or
    duplicate operation ids, completing an operation that still has active
    children, or events arriving after the end of output.
    """

    def __init__(self, message: str, event: object | None = None) -> None:
        super().__init__(message)
        self.event = event


class TerminalWriteError(OSError):
    """The terminal rejected a write. Not retried."""
