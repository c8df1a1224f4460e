"""
Text formatting for status lines.

Provides:
- DefaultStatusBarFormatter: worker line text of an operation
- ProgressBar: ``<=====--------> 38% EXECUTING`` style overall status text
"""
from __future__ import annotations

import threading
from typing import Protocol

from .operations import ProgressOperation
from .style import Span, Style


class StatusBarFormatter(Protocol):
    def format(self, operation: ProgressOperation) -> list[Span]:
        ...


class DefaultStatusBarFormatter:
    def __init__(self, prefix: str = "> ", style: Style = Style.PROGRESS_STATUS) -> None:
        self._prefix = prefix
        self._style = style

    def format(self, operation: ProgressOperation) -> list[Span]:
        text = f"{self._prefix}{operation.short_description}"
        if operation.status:
            text = f"{text} {operation.status}"
        return [Span(text, self._style)]


class ProgressBar:
    """Fixed-width textual progress bar. Safe to advance from several threads."""

    def __init__(
        self,
        total: int,
        status_suffix: str = "",
        prefix: str = "<",
        width: int = 13,
        suffix: str = ">",
        complete_char: str = "=",
        incomplete_char: str = "-",
    ) -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self._total = max(total, 0)
        self._status_suffix = status_suffix
        self._prefix = prefix
        self._width = width
        self._suffix = suffix
        self._complete_char = complete_char
        self._incomplete_char = incomplete_char
        self._current = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._current

    def update(self, completed: int) -> str:
        with self._lock:
            self._current = max(0, min(completed, self._total))
            return self._render()

    def increment_and_get_progress(self) -> str:
        with self._lock:
            if self._current < self._total:
                self._current += 1
            return self._render()

    @property
    def progress(self) -> str:
        with self._lock:
            return self._render()

    def _render(self) -> str:
        # An empty phase counts as finished
        ratio = self._current / self._total if self._total else 1.0
        filled = int(self._width * ratio)
        bar = self._complete_char * filled + self._incomplete_char * (self._width - filled)
        text = f"{self._prefix}{bar}{self._suffix} {int(ratio * 100)}%"
        if self._status_suffix:
            text = f"{text} {self._status_suffix}"
        return text
