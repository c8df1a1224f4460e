"""
The scrolling text region above the status area.

Text is chopped into lines; tabs expand to 8-column stops and lines longer
than the terminal are wrapped here, so the tracked cursor always agrees with
where the terminal actually put the text.
"""
from __future__ import annotations

from typing import Callable

from .ansi import AnsiContext, AnsiExecutor
from .cursor import Cursor
from .style import Style
from .width import split_at_width, visible_width

CHARS_PER_TAB_STOP = 8


class TextArea:
    def __init__(
        self,
        executor: AnsiExecutor,
        before_line_text: Callable[[], None] | None = None,
    ) -> None:
        self._executor = executor
        self._before_line_text = before_line_text
        self._write_pos = Cursor.new_bottom_left()

    @property
    def write_position(self) -> Cursor:
        return self._write_pos

    def new_line_adjustment(self) -> None:
        self._write_pos.row += 1

    # ── output ───────────────────────────────────────────────────────────────

    def text(self, text: str, style: Style = Style.NORMAL) -> None:
        """Write text; each ``\\n`` (or ``\\r\\n``) ends the current line."""
        lines = text.replace("\r\n", "\n").split("\n")
        for i, line in enumerate(lines):
            if i > 0:
                self.end_line()
            if line:
                self._line_text(line.replace("\r", ""), style)

    def println(self, text: str = "", style: Style = Style.NORMAL) -> None:
        self.text(text, style)
        self.end_line()

    def end_line(self) -> None:
        self._make_room()

        def action(ansi: AnsiContext) -> None:
            self._erase_rest_of_line(ansi)
            ansi.new_line()

        self._executor.write_at(self._write_pos, action)

    # ── line chopping ────────────────────────────────────────────────────────

    def _line_text(self, text: str, style: Style) -> None:
        pending = self._expand_tabs(text)
        while pending:
            room = self._executor.terminal.columns - self._write_pos.col
            if room <= 0:
                self.end_line()
                continue
            head, pending, _ = split_at_width(pending, room)
            if not head:
                if self._write_pos.col == 0:
                    # Terminal narrower than a single character
                    head, pending = pending[0], pending[1:]
                else:
                    # A wide character does not fit in the remaining columns
                    self.end_line()
                    continue
            self._write_chunk(head, style)

    def _make_room(self) -> None:
        if self._before_line_text is not None:
            self._before_line_text()

    def _write_chunk(self, chunk: str, style: Style) -> None:
        self._make_room()

        def action(ansi: AnsiContext) -> None:
            ansi.with_style(style, chunk)
            self._erase_rest_of_line(ansi)

        self._executor.write_at(self._write_pos, action)

    def _erase_rest_of_line(self, ansi: AnsiContext) -> None:
        # Nothing to the right of the text cursor belongs to this line. At the
        # last column the terminal is about to wrap and erasing would remove
        # the final character.
        if ansi.write_cursor.col < self._executor.terminal.columns:
            ansi.erase_forward()

    def _expand_tabs(self, text: str) -> str:
        if "\t" not in text:
            return text
        col = self._write_pos.col
        out: list[str] = []
        for part_index, part in enumerate(text.split("\t")):
            if part_index > 0:
                spaces = CHARS_PER_TAB_STOP - (col % CHARS_PER_TAB_STOP)
                out.append(" " * spaces)
                col += spaces
            out.append(part)
            col += visible_width(part)
        return "".join(out)
