"""
progress_console — live build progress for ANSI terminals.

A scrolling text area for build output sits above a pinned status area: one
overall status line plus a fixed number of worker lines that show the
operations currently in progress.
"""
from .ansi import AnsiContext, AnsiExecutor
from .console import AnsiConsole
from .cursor import Cursor
from .errors import ProgressProtocolError, TerminalWriteError
from .events import (
    EndOutputEvent,
    LogEvent,
    OutputEvent,
    OutputEventListener,
    ProgressCompleteEvent,
    ProgressEvent,
    ProgressStartEvent,
)
from .factory import create_progress_renderer
from .formatting import DefaultStatusBarFormatter, ProgressBar, StatusBarFormatter
from .label import RedrawableLabel, StyledLabel
from .operations import ProgressOperation, ProgressOperations
from .progress_logger import ProgressLogger, ProgressLoggerFactory
from .progress_renderer import (
    BuildStatusRenderer,
    ConsoleBackedProgressRenderer,
    LabelState,
    ProgressLabelAllocator,
)
from .settings import ConsoleSettings
from .status_area import BuildProgressArea, calculate_num_worker_lines, calculate_total_height
from .style import Color, ColorMap, DefaultColorMap, Span, Style
from .terminal import ProcessTerminal, Terminal
from .text_area import TextArea
from .text_renderer import StyledTextOutputRenderer
from .width import split_at_width, truncate_to_width, visible_width

__all__ = [
    # ANSI
    "AnsiContext",
    "AnsiExecutor",
    "AnsiConsole",
    "Cursor",
    # Errors
    "ProgressProtocolError",
    "TerminalWriteError",
    # Events
    "EndOutputEvent",
    "LogEvent",
    "OutputEvent",
    "OutputEventListener",
    "ProgressCompleteEvent",
    "ProgressEvent",
    "ProgressStartEvent",
    # Rendering
    "create_progress_renderer",
    "DefaultStatusBarFormatter",
    "ProgressBar",
    "StatusBarFormatter",
    "RedrawableLabel",
    "StyledLabel",
    "ProgressOperation",
    "ProgressOperations",
    "ProgressLogger",
    "ProgressLoggerFactory",
    "BuildStatusRenderer",
    "ConsoleBackedProgressRenderer",
    "LabelState",
    "ProgressLabelAllocator",
    "ConsoleSettings",
    "BuildProgressArea",
    "calculate_num_worker_lines",
    "calculate_total_height",
    "TextArea",
    "StyledTextOutputRenderer",
    # Styles
    "Color",
    "ColorMap",
    "DefaultColorMap",
    "Span",
    "Style",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Width
    "split_at_width",
    "truncate_to_width",
    "visible_width",
]
