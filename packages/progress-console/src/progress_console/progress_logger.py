"""
Producer-side helpers that turn progress reporting calls into events.

Usage::

    factory = ProgressLoggerFactory(renderer)
    with factory.start("Build", "INITIALIZING") as build:
        with factory.start(":app:compile", parent=build) as task:
            task.progress("3 files")
    factory.end()
"""
from __future__ import annotations

import itertools
import threading

from .events import (
    EndOutputEvent,
    LogEvent,
    OutputEventListener,
    ProgressCompleteEvent,
    ProgressEvent,
    ProgressStartEvent,
)
from .style import Style


class ProgressLogger:
    def __init__(
        self,
        listener: OutputEventListener,
        operation_id: int,
        short_description: str,
        parent: "ProgressLogger | None",
    ) -> None:
        self._listener = listener
        self.operation_id = operation_id
        self.short_description = short_description
        self.parent = parent
        self._completed = False

    @property
    def completed_already(self) -> bool:
        return self._completed

    def progress(self, status: str) -> None:
        if self._completed:
            raise RuntimeError(f"Operation {self.short_description!r} has already completed")
        self._listener.on_output(ProgressEvent(self.operation_id, status))

    def completed(self, status: str = "") -> None:
        if self._completed:
            raise RuntimeError(f"Operation {self.short_description!r} has already completed")
        self._completed = True
        self._listener.on_output(ProgressCompleteEvent(self.operation_id, status))

    def __enter__(self) -> "ProgressLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._completed:
            self.completed("FAILED" if exc_type is not None else "")


class ProgressLoggerFactory:
    """Allocates operation ids and emits the start events."""

    def __init__(self, listener: OutputEventListener) -> None:
        self._listener = listener
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def start(
        self,
        short_description: str,
        status: str = "",
        parent: ProgressLogger | None = None,
    ) -> ProgressLogger:
        with self._lock:
            operation_id = next(self._ids)
        progress_logger = ProgressLogger(self._listener, operation_id, short_description, parent)
        self._listener.on_output(
            ProgressStartEvent(
                operation_id,
                parent.operation_id if parent is not None else None,
                short_description,
                status,
            )
        )
        return progress_logger

    def log(self, message: str, style: Style = Style.NORMAL) -> None:
        self._listener.on_output(LogEvent(message, style))

    def end(self) -> None:
        self._listener.on_output(EndOutputEvent())
