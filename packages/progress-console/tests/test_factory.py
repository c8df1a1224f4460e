"""Tests for progress_console.factory"""
from unittest.mock import MagicMock

from progress_console.events import LogEvent, ProgressStartEvent
from progress_console.factory import create_progress_renderer
from progress_console.progress_renderer import ConsoleBackedProgressRenderer
from progress_console.settings import ConsoleSettings
from progress_console.status_area import MAXIMUM_WORKER_LINES


class TestCreateProgressRenderer:
    def test_non_interactive_terminal_gets_none(self, make_terminal):
        terminal = make_terminal(interactive=False)
        assert create_progress_renderer(terminal, ConsoleSettings()) is None
        assert terminal.writes == []

    def test_forced_on_non_interactive_terminal(self, make_terminal):
        terminal = make_terminal(interactive=False)
        renderer = create_progress_renderer(terminal, ConsoleSettings(force_interactive=True))
        assert isinstance(renderer, ConsoleBackedProgressRenderer)

    def test_worker_lines_from_settings(self, terminal):
        renderer = create_progress_renderer(terminal, ConsoleSettings(worker_lines=3))
        assert len(renderer.console.get_build_progress_labels()) == 3

    def test_worker_lines_capped(self, terminal):
        renderer = create_progress_renderer(terminal, ConsoleSettings(worker_lines=50))
        assert len(renderer.console.get_build_progress_labels()) == MAXIMUM_WORKER_LINES

    def test_default_listener_writes_log_lines(self, terminal):
        renderer = create_progress_renderer(terminal, ConsoleSettings(worker_lines=2, throttle_ms=0))
        renderer.on_output(ProgressStartEvent(1, None, "Build"))
        renderer.on_output(LogEvent("compiling"))
        assert terminal.bottom_lines(5) == ["compiling", "Build", "> Build", "", ""]

    def test_custom_listener(self, terminal):
        listener = MagicMock()
        renderer = create_progress_renderer(terminal, ConsoleSettings(throttle_ms=0), listener=listener)
        renderer.on_output(LogEvent("x"))
        listener.on_output.assert_called_once_with(LogEvent("x"))
        assert "x" not in terminal.lines()

    def test_colors_follow_settings(self, terminal):
        renderer = create_progress_renderer(terminal, ConsoleSettings(color=False, throttle_ms=0))
        renderer.on_output(ProgressStartEvent(1, None, "Build"))
        assert "\x1b[1m" not in terminal.output()
