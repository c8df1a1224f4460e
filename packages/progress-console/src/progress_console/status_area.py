"""
The pinned status area at the bottom of the terminal.

Layout, top to bottom: the overall build status line, one line per worker,
and an empty line where the cursor is parked between redraws. The area is
created below the bottom row; its first redraw scrolls it onto the screen.
"""
from __future__ import annotations

import logging

from .ansi import AnsiContext, AnsiExecutor
from .cursor import Cursor
from .label import RedrawableLabel, StyledLabel

logger = logging.getLogger(__name__)

DEFAULT_WORKER_LINES = 4
MAXIMUM_WORKER_LINES = 8


def calculate_num_worker_lines(preferred: int) -> int:
    if preferred < 0:
        raise ValueError(f"worker line count must not be negative, got {preferred}")
    return min(preferred, MAXIMUM_WORKER_LINES)


def calculate_total_height(num_worker_lines: int) -> int:
    # Build status line + worker lines + cursor parking line
    return num_worker_lines + 2


class BuildProgressArea:
    """Fixed-height block of labels pinned below the scrolling text."""

    def __init__(self, executor: AnsiExecutor, worker_lines: int = DEFAULT_WORKER_LINES) -> None:
        self._executor = executor
        num_workers = calculate_num_worker_lines(worker_lines)
        self._height = calculate_total_height(num_workers)
        # Top row of the area; labels sit at and below it
        self._area_pos = Cursor.at(0)
        self._visible = True

        row = 0
        self._progress_bar = RedrawableLabel(executor, Cursor.at(row))
        self._entries: list[RedrawableLabel] = [self._progress_bar]
        self._worker_labels: list[RedrawableLabel] = []
        for _ in range(num_workers):
            row -= 1
            label = RedrawableLabel(executor, Cursor.at(row))
            self._entries.append(label)
            self._worker_labels.append(label)
        row -= 1
        self._entries.append(RedrawableLabel(executor, Cursor.at(row)))

    # ── collaborator surface ─────────────────────────────────────────────────

    def get_build_progress_labels(self) -> list[StyledLabel]:
        return list(self._worker_labels)

    @property
    def progress_bar(self) -> RedrawableLabel:
        return self._progress_bar

    @property
    def entries(self) -> tuple[RedrawableLabel, ...]:
        return tuple(self._entries)

    @property
    def write_position(self) -> Cursor:
        return self._area_pos

    @property
    def height(self) -> int:
        return self._height

    @property
    def visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        self._visible = visible
        for label in self._entries:
            label.set_visible(visible)

    def close(self) -> None:
        self.set_visible(False)
        self.redraw()

    # ── row bookkeeping ──────────────────────────────────────────────────────

    def is_overlapping_with(self, cursor: Cursor) -> bool:
        return any(label.is_overlapping_with(cursor) for label in self._entries)

    def new_line_adjustment(self) -> None:
        self._area_pos.row += 1
        for label in self._entries:
            label.new_line_adjustment()

    def scroll_by(self, rows: int) -> None:
        """Move the whole area down (positive) or up (negative) by rows."""
        self._area_pos.row -= rows
        for label in self._entries:
            label.scroll_by(rows)

    def scroll_up_by(self, rows: int) -> None:
        self.scroll_by(-rows)

    def scroll_down_by(self, rows: int) -> None:
        self.scroll_by(rows)

    # ── drawing ──────────────────────────────────────────────────────────────

    def redraw(self) -> None:
        if self._visible:
            new_lines = self._height - 1 - self._area_pos.row
            if new_lines > 0:
                logger.debug("Scrolling terminal by %d row(s) to make room for the status area", new_lines)
                self._executor.write_at(Cursor.new_bottom_left(), _new_lines(new_lines))

        for label in self._entries:
            label.redraw()

        self._park_cursor()

    def _park_cursor(self) -> None:
        if self._visible:
            self._executor.position_cursor_at(Cursor.new_bottom_left())
        else:
            self._executor.position_cursor_at(Cursor.at(max(self._area_pos.row, 0)))


def _new_lines(count: int):
    def action(ansi: AnsiContext) -> None:
        for _ in range(count):
            ansi.new_line()
    return action
