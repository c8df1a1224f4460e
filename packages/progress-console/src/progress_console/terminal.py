"""
Terminal abstraction.

Provides:
- Terminal: abstract base class (interface)
- ProcessTerminal: real terminal backed by a text stream (sys.stdout by default)
"""
from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from typing import TextIO

from .errors import TerminalWriteError

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Terminal ABC
# ─────────────────────────────────────────────────────────────────────────────

class Terminal(ABC):
    """
    Minimal terminal interface for the progress console.

    Writes may be buffered; nothing is guaranteed to reach the screen before
    flush().
    """

    @abstractmethod
    def write(self, data: str) -> None:
        """Write output to the terminal."""

    @abstractmethod
    def flush(self) -> None:
        """Push buffered output to the screen."""

    @property
    @abstractmethod
    def columns(self) -> int:
        """Terminal width in columns."""

    @property
    @abstractmethod
    def rows(self) -> int:
        """Terminal height in rows."""

    @property
    @abstractmethod
    def is_interactive(self) -> bool:
        """Whether the output is an interactive terminal that understands ANSI."""


# ─────────────────────────────────────────────────────────────────────────────
# ProcessTerminal
# ─────────────────────────────────────────────────────────────────────────────

class ProcessTerminal(Terminal):
    """
    Terminal writing to a process stream.

    Set PROGRESS_CONSOLE_WRITE_LOG to a file path to append every write to it,
    which is handy when debugging escape output.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._write_log_path = os.environ.get("PROGRESS_CONSOLE_WRITE_LOG", "")

    def write(self, data: str) -> None:
        try:
            self._stream.write(data)
        except OSError as exc:
            raise TerminalWriteError(exc.errno, f"Unable to write to terminal: {exc}") from exc
        if self._write_log_path:
            with open(self._write_log_path, "a", encoding="utf-8") as f:
                f.write(data)

    def flush(self) -> None:
        try:
            self._stream.flush()
        except OSError as exc:
            raise TerminalWriteError(exc.errno, f"Unable to flush terminal: {exc}") from exc

    def _size(self) -> os.terminal_size | None:
        try:
            return os.get_terminal_size(self._stream.fileno())
        except (OSError, ValueError, AttributeError):
            return None

    @property
    def columns(self) -> int:
        size = self._size()
        if size is not None and size.columns > 0:
            return size.columns
        return _env_size("COLUMNS", 80)

    @property
    def rows(self) -> int:
        size = self._size()
        if size is not None and size.lines > 0:
            return size.lines
        return _env_size("LINES", 24)

    @property
    def is_interactive(self) -> bool:
        if os.environ.get("TERM") == "dumb":
            return False
        isatty = getattr(self._stream, "isatty", None)
        return bool(isatty and isatty())


def _env_size(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value
