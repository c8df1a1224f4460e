"""
ANSI writer with a single tracked cursor.

Provides:
- AnsiContext: accumulates escape output for one write and keeps the tracked
  cursor in step with every character, newline and motion it emits
- AnsiExecutor: the only component that writes escape sequences to the
  terminal; every screen region goes through write_at()
- NewLineListener: callback run before each newline is emitted

The executor knows where the real cursor is. Regions hand it their own Cursor;
after the write the region's cursor is updated from the tracked one, so the
region learns the column its output ended on. A newline on the bottom row
scrolls the terminal; the listener is told first so every region can shift its
rows before the next position is computed.
"""
from __future__ import annotations

import threading
from typing import Callable

from .cursor import Cursor
from .style import Color, ColorMap, Span, Style
from .terminal import Terminal
from .width import visible_width

NewLineListener = Callable[["AnsiContext", Cursor], None]

CSI = "\x1b["
ERASE_TO_END_OF_LINE = f"{CSI}K"
NEWLINE = "\r\n"


class AnsiContext:
    """Escape output of one write_at() call."""

    def __init__(
        self,
        color_map: ColorMap,
        write_cursor: Cursor,
        new_line_listener: NewLineListener | None = None,
    ) -> None:
        self._color_map = color_map
        self._write_cursor = write_cursor
        self._listener = new_line_listener
        self._parts: list[str] = []

    @property
    def write_cursor(self) -> Cursor:
        return self._write_cursor

    def getvalue(self) -> str:
        return "".join(self._parts)

    def a(self, text: str) -> "AnsiContext":
        """Append plain text; the cursor advances by its visible width."""
        if text:
            self._parts.append(text)
            self._write_cursor.col += visible_width(text)
        return self

    def with_color(self, color: Color, text: str) -> "AnsiContext":
        self._parts.append(color.on)
        self.a(text)
        self._parts.append(color.off)
        return self

    def with_style(self, style: Style, text: str) -> "AnsiContext":
        return self.with_color(self._color_map.color_for(style), text)

    def spans(self, spans: tuple[Span, ...] | list[Span]) -> "AnsiContext":
        for span in spans:
            self.with_style(span.style, span.text)
        return self

    def erase_forward(self) -> "AnsiContext":
        self._parts.append(ERASE_TO_END_OF_LINE)
        return self

    def new_line(self) -> "AnsiContext":
        if self._listener is not None:
            self._listener(self, self._write_cursor)
        self._parts.append(NEWLINE)
        self._write_cursor.col = 0
        # Any row but the bottom one: the cursor moves down one row. On the
        # bottom row the terminal scrolls and the cursor stays put.
        if self._write_cursor.row > 0:
            self._write_cursor.row -= 1
        else:
            self._write_cursor.row = 0
        return self

    def cursor_at(self, position: Cursor) -> "AnsiContext":
        """Move the real cursor to position using relative motions."""
        current = self._write_cursor
        if current.row == position.row:
            if current.col == position.col:
                return self
            if current.col < position.col:
                self._parts.append(f"{CSI}{position.col - current.col}C")
            else:
                self._parts.append(f"{CSI}{current.col - position.col}D")
        else:
            if current.col > 0:
                self._parts.append(f"{CSI}{current.col}D")
            if current.row < position.row:
                self._parts.append(f"{CSI}{position.row - current.row}A")
            else:
                self._parts.append(f"{CSI}{current.row - position.row}B")
            if position.col > 0:
                self._parts.append(f"{CSI}{position.col}C")
        current.copy_from(position)
        return self


class AnsiExecutor:
    """Serialises all screen writes through one tracked cursor."""

    def __init__(
        self,
        terminal: Terminal,
        color_map: ColorMap,
        new_line_listener: NewLineListener | None = None,
    ) -> None:
        self._terminal = terminal
        self._color_map = color_map
        self._listener = new_line_listener
        self._write_cursor = Cursor.new_bottom_left()
        self._lock = threading.RLock()

    @property
    def terminal(self) -> Terminal:
        return self._terminal

    @property
    def write_cursor(self) -> Cursor:
        """Where the executor believes the real cursor is."""
        return self._write_cursor

    def set_new_line_listener(self, listener: NewLineListener | None) -> None:
        self._listener = listener

    def write_at(self, position: Cursor, action: Callable[[AnsiContext], object]) -> None:
        """
        Move to position, run action against a fresh context and write its
        output in one terminal write. position is updated to where the write
        ended.

        The tracked cursor only moves once the terminal accepted the write; a
        failed write leaves it where the real cursor still is.
        """
        with self._lock:
            cursor = self._pending_cursor()
            ansi = AnsiContext(self._color_map, cursor, self._listener)
            ansi.cursor_at(position)
            action(ansi)
            self._write(ansi)
            self._write_cursor.copy_from(cursor)
            position.copy_from(cursor)

    def position_cursor_at(self, position: Cursor) -> None:
        with self._lock:
            cursor = self._pending_cursor()
            ansi = AnsiContext(self._color_map, cursor, self._listener)
            ansi.cursor_at(position)
            self._write(ansi)
            self._write_cursor.copy_from(cursor)

    def _pending_cursor(self) -> Cursor:
        return Cursor.at(self._write_cursor.row, self._write_cursor.col)

    def _write(self, ansi: AnsiContext) -> None:
        data = ansi.getvalue()
        if data:
            self._terminal.write(data)
