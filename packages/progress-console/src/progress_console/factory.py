"""Wires a terminal, console and renderer together from settings."""
from __future__ import annotations

import logging

from .console import AnsiConsole
from .events import OutputEventListener
from .formatting import DefaultStatusBarFormatter, StatusBarFormatter
from .progress_renderer import ConsoleBackedProgressRenderer
from .settings import ConsoleSettings
from .status_area import calculate_num_worker_lines
from .style import ColorMap, DefaultColorMap
from .terminal import ProcessTerminal, Terminal
from .text_renderer import StyledTextOutputRenderer

logger = logging.getLogger(__name__)


def create_progress_renderer(
    terminal: Terminal | None = None,
    settings: ConsoleSettings | None = None,
    color_map: ColorMap | None = None,
    formatter: StatusBarFormatter | None = None,
    listener: OutputEventListener | None = None,
) -> ConsoleBackedProgressRenderer | None:
    """
    Build a renderer for the given terminal (stdout by default).

    Returns None when the terminal cannot show a live status area, in which
    case the caller should fall back to plain output. Without an explicit
    listener, log events are written to the console's text area.
    """
    terminal = terminal or ProcessTerminal()
    settings = settings or ConsoleSettings.from_env()

    if not terminal.is_interactive and not settings.force_interactive:
        logger.debug("Terminal is not interactive, live progress disabled")
        return None

    console = AnsiConsole(
        terminal,
        color_map or DefaultColorMap(use_color=settings.color),
        calculate_num_worker_lines(settings.worker_lines),
    )
    return ConsoleBackedProgressRenderer(
        listener or StyledTextOutputRenderer(console.main_area),
        console,
        formatter or DefaultStatusBarFormatter(),
        throttle_ms=settings.throttle_ms,
    )
