"""Tests for progress_console.label — RedrawableLabel"""
import pytest

from progress_console.ansi import AnsiExecutor
from progress_console.cursor import Cursor
from progress_console.label import RedrawableLabel, fit_spans, single_line, to_spans
from progress_console.style import Span, Style


@pytest.fixture
def executor(terminal, plain_colors):
    return AnsiExecutor(terminal, plain_colors)


def _label(executor, row=1):
    return RedrawableLabel(executor, Cursor.at(row))


class TestSpanHelpers:
    def test_plain_string(self):
        assert to_spans("abc") == (Span("abc"),)

    def test_empty_string(self):
        assert to_spans("") == ()

    def test_span_list(self):
        spans = [Span("a"), Span("b", Style.HEADER)]
        assert to_spans(spans) == tuple(spans)

    def test_only_first_line_is_kept(self):
        assert to_spans("w1\nboom") == (Span("w1"),)

    def test_line_break_drops_later_spans(self):
        spans = [Span("a\tb"), Span("c\nd", Style.HEADER), Span("e")]
        assert to_spans(spans) == (Span("a b"), Span("c", Style.HEADER))

    def test_cursor_moving_controls_removed(self):
        assert single_line("\x07ring\rback\x08") == "ring back"
        assert single_line("\x1b[1mbold\x1b[0m") == "\x1b[1mbold\x1b[0m"

    def test_fit_cuts_across_spans(self):
        spans = (Span("abc"), Span("def", Style.HEADER))
        assert fit_spans(spans, 4) == (Span("abc"), Span("d", Style.HEADER))

    def test_fit_keeps_short(self):
        spans = (Span("ab"),)
        assert fit_spans(spans, 10) == spans


class TestRedrawableLabel:
    def test_draws_on_its_row(self, terminal, executor):
        label = _label(executor, row=1)
        label.set_text("abc")
        label.redraw()
        assert terminal.line(terminal.rows - 2) == "abc"
        assert label.write_position == Cursor.at(1, 3)

    def test_offscreen_row_is_skipped(self, terminal, executor):
        label = _label(executor, row=-1)
        label.set_text("abc")
        label.redraw()
        assert terminal.writes == []

    def test_unchanged_label_writes_nothing(self, terminal, executor):
        label = _label(executor)
        label.set_text("abc")
        label.redraw()
        terminal.clear_writes()
        label.set_text("abc")
        label.redraw()
        assert terminal.writes == []

    def test_shorter_text_erases_the_rest(self, terminal, executor):
        label = _label(executor)
        label.set_text("abcdef")
        label.redraw()
        label.set_text("xy")
        label.redraw()
        assert terminal.line(terminal.rows - 2) == "xy"

    def test_truncated_to_leave_last_column_free(self, terminal, executor):
        label = _label(executor)
        label.set_text("x" * 40)
        label.redraw()
        assert terminal.line(terminal.rows - 2) == "x" * (terminal.columns - 1)

    def test_text_property_joins_spans(self, executor):
        label = _label(executor)
        label.set_text([Span("> "), Span("task", Style.HEADER)])
        assert label.text == "> task"

    def test_hidden_label_is_cleared_once(self, terminal, executor):
        label = _label(executor)
        label.set_text("abc")
        label.redraw()
        label.set_visible(False)
        label.redraw()
        assert terminal.line(terminal.rows - 2) == ""
        terminal.clear_writes()
        label.redraw()
        assert terminal.writes == []

    def test_scrolled_with_terminal_needs_no_redraw(self, terminal, executor):
        label = _label(executor)
        label.set_text("abc")
        label.redraw()
        terminal.clear_writes()
        label.new_line_adjustment()
        label.redraw()
        assert terminal.writes == []
        assert label.write_position.row == 2

    def test_moved_label_redraws(self, terminal, executor):
        label = _label(executor, row=2)
        label.set_text("abc")
        label.redraw()
        label.scroll_by(1)
        label.redraw()
        assert label.write_position.row == 1
        assert terminal.line(terminal.rows - 2) == "abc"

    def test_overlap_only_right_of_cursor(self, executor):
        label = _label(executor, row=1)
        label.set_text("abcdef")
        label.redraw()
        assert label.is_overlapping_with(Cursor.at(1, 2))
        assert not label.is_overlapping_with(Cursor.at(1, 6))
        assert not label.is_overlapping_with(Cursor.at(0, 2))

    def test_multi_line_text_stays_on_its_row(self, terminal, executor):
        label = _label(executor, row=1)
        label.set_text("w1\nboom")
        label.redraw()
        assert terminal.line(terminal.rows - 2) == "w1"
        assert terminal.line(terminal.rows - 1) == ""
        assert label.write_position == Cursor.at(1, 2)
