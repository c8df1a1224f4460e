"""
Single-line labels of the status area.

Provides:
- StyledLabel: the text-setting contract exposed to collaborators
- single_line(): label text reduced to what fits on one row
- RedrawableLabel: a label bound to a screen row that only writes when its
  content or row changed
"""
from __future__ import annotations

import logging
from typing import Protocol, Sequence, Union

from .ansi import AnsiContext, AnsiExecutor
from .cursor import Cursor
from .style import Span
from .width import split_at_width

logger = logging.getLogger(__name__)

LabelText = Union[str, Span, Sequence[Span]]


class StyledLabel(Protocol):
    def set_text(self, text: LabelText) -> None:
        """Replace the label content. No I/O happens until the next redraw."""
        ...


# Tab and carriage return become spaces, other C0 controls are dropped. ESC is
# kept so embedded SGR sequences survive.
_LABEL_CONTROLS = {code: None for code in range(0x20) if code != 0x1B}
_LABEL_CONTROLS.update({ord("\t"): " ", ord("\r"): " ", 0x7F: None})


def single_line(text: str) -> str:
    """First line of text, stripped of characters that move the cursor."""
    return text.partition("\n")[0].translate(_LABEL_CONTROLS)


def to_spans(text: LabelText) -> tuple[Span, ...]:
    if isinstance(text, str):
        spans: Sequence[Span] = (Span(text),) if text else ()
    elif isinstance(text, Span):
        spans = (text,)
    else:
        spans = text
    result: list[Span] = []
    for span in spans:
        line = single_line(span.text)
        if line == span.text:
            result.append(span)
        elif line:
            result.append(Span(line, span.style))
        if "\n" in span.text:
            break
    return tuple(result)


def fit_spans(spans: tuple[Span, ...], max_width: int) -> tuple[Span, ...]:
    """Cut spans so their combined width stays within max_width columns."""
    result: list[Span] = []
    remaining = max_width
    for span in spans:
        if remaining <= 0:
            break
        head, tail, width = split_at_width(span.text, remaining)
        if head:
            result.append(span if not tail else Span(head, span.style))
        remaining -= width
        if tail:
            break
    return tuple(result)


class RedrawableLabel:
    """
    One status line. ``write_position.row`` is the line it owns;
    ``write_position.col`` is where its last drawn content ended.
    """

    def __init__(self, executor: AnsiExecutor, write_pos: Cursor) -> None:
        self._executor = executor
        self._write_pos = write_pos
        self._spans: tuple[Span, ...] = ()
        self._written_spans: tuple[Span, ...] = ()
        self._previous_write_row: int | None = None
        self._visible = True

    # ── content ──────────────────────────────────────────────────────────────

    def set_text(self, text: LabelText) -> None:
        self._spans = to_spans(text)

    @property
    def spans(self) -> tuple[Span, ...]:
        return self._spans

    @property
    def text(self) -> str:
        return "".join(span.text for span in self._spans)

    @property
    def write_position(self) -> Cursor:
        return self._write_pos

    @property
    def visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        self._visible = visible

    # ── drawing ──────────────────────────────────────────────────────────────

    def redraw(self) -> None:
        row = self._write_pos.row
        if row < 0:
            # Not scrolled onto the screen yet
            return

        if not self._visible:
            if self._previous_write_row != row or self._written_spans or self._write_pos.col > 0:
                self.clear()
            return

        if self._previous_write_row == row and self._written_spans == self._spans:
            return

        spans = fit_spans(self._spans, self._executor.terminal.columns - 1)

        def draw(ansi: AnsiContext) -> None:
            ansi.spans(spans)
            # Remove whatever a previous, longer line left behind
            ansi.erase_forward()

        self._write_pos.col = 0
        self._executor.write_at(self._write_pos, draw)
        self._written_spans = self._spans
        self._previous_write_row = row

    def clear(self) -> None:
        """Erase this label's line without drawing anything."""
        if self._write_pos.row < 0:
            return
        self._write_pos.col = 0
        self._executor.write_at(self._write_pos, lambda ansi: ansi.erase_forward())
        self._written_spans = ()
        self._previous_write_row = self._write_pos.row

    # ── row bookkeeping ──────────────────────────────────────────────────────

    def new_line_adjustment(self) -> None:
        """The terminal scrolled up one row; the drawn content moved with it."""
        self._write_pos.row += 1
        if self._previous_write_row is not None:
            self._previous_write_row += 1

    def scroll_by(self, rows: int) -> None:
        """Move this label down (positive) or up (negative) by rows."""
        self._write_pos.row -= rows

    def is_overlapping_with(self, cursor: Cursor) -> bool:
        """Whether drawn content on cursor's row extends to the right of it."""
        return cursor.row == self._write_pos.row and self._write_pos.col > cursor.col
