"""
ANSI console: a scrolling text area above a pinned build progress area,
sharing one terminal cursor.
"""
from __future__ import annotations

import logging

from .ansi import AnsiContext, AnsiExecutor
from .cursor import Cursor
from .label import RedrawableLabel, StyledLabel
from .status_area import DEFAULT_WORKER_LINES, BuildProgressArea
from .style import ColorMap
from .terminal import Terminal
from .text_area import TextArea

logger = logging.getLogger(__name__)


class AnsiConsole:
    def __init__(
        self,
        terminal: Terminal,
        color_map: ColorMap,
        worker_lines: int = DEFAULT_WORKER_LINES,
    ) -> None:
        self._terminal = terminal
        self._executor = AnsiExecutor(terminal, color_map, self._before_new_line_written)
        self._text_area = TextArea(self._executor, self._make_room_for_text)
        self._build_progress_area = BuildProgressArea(self._executor, worker_lines)

    @property
    def terminal(self) -> Terminal:
        return self._terminal

    @property
    def executor(self) -> AnsiExecutor:
        return self._executor

    @property
    def main_area(self) -> TextArea:
        return self._text_area

    @property
    def build_progress_area(self) -> BuildProgressArea:
        return self._build_progress_area

    @property
    def status_bar(self) -> RedrawableLabel:
        return self._build_progress_area.progress_bar

    def get_build_progress_labels(self) -> list[StyledLabel]:
        return self._build_progress_area.get_build_progress_labels()

    def flush(self) -> None:
        self._redraw()
        self._terminal.flush()

    def close(self) -> None:
        """Retire the status area and leave the cursor where it began."""
        self._build_progress_area.close()
        self._terminal.flush()

    # ── region coordination ──────────────────────────────────────────────────

    def _overlapping_rows(self, text_pending: bool = False) -> int:
        text_pos = self._text_area.write_position
        overlap = self._build_progress_area.write_position.row - text_pos.row
        # A text cursor at column 0 sits on a line nothing has been written to
        # yet; the status area may keep using it until text is about to land.
        if text_pending or text_pos.col > 0:
            overlap += 1
        return overlap

    def _scroll_clear_of_text(self, text_pending: bool = False) -> bool:
        if not self._build_progress_area.visible:
            return False
        overlap = self._overlapping_rows(text_pending)
        if overlap <= 0:
            return False
        self._build_progress_area.scroll_down_by(overlap)
        return True

    def _make_room_for_text(self) -> None:
        if self._scroll_clear_of_text(text_pending=True):
            self._build_progress_area.redraw()

    def _redraw(self) -> None:
        self._scroll_clear_of_text()
        self._build_progress_area.redraw()

    def _before_new_line_written(self, ansi: AnsiContext, write_cursor: Cursor) -> None:
        if self._build_progress_area.is_overlapping_with(write_cursor):
            ansi.erase_forward()
        if write_cursor.row == 0:
            self._text_area.new_line_adjustment()
            self._build_progress_area.new_line_adjustment()
