"""
Logical text styles and their terminal colours.

Provides:
- Style: logical style of a piece of output
- Span: a run of text in one style
- Color: SGR sequences that switch a style on and off
- ColorMap: protocol resolving a Style to a Color
- DefaultColorMap: built-in theme with environment overrides
"""
from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Protocol

logger = logging.getLogger(__name__)


class Style(enum.Enum):
    NORMAL = "normal"
    HEADER = "header"
    USER_INPUT = "user-input"
    IDENTIFIER = "identifier"
    DESCRIPTION = "description"
    PROGRESS_STATUS = "progress-status"
    SUCCESS = "success"
    SUCCESS_HEADER = "success-header"
    FAILURE = "failure"
    FAILURE_HEADER = "failure-header"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = Style.NORMAL


@dataclass(frozen=True)
class Color:
    on: str = ""
    off: str = ""


NO_COLOR = Color()


class ColorMap(Protocol):
    def color_for(self, style: Style) -> Color:
        ...


# ─────────────────────────────────────────────────────────────────────────────
# SGR parameters
# ─────────────────────────────────────────────────────────────────────────────

_RESET = "\x1b[0m"

_ATTRIBUTES = {
    "bold": 1,
    "faint": 2,
    "italic": 3,
    "reverse": 7,
}

_COLORS = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}

_DEFAULT_SPECS: dict[Style, str] = {
    Style.NORMAL: "",
    Style.HEADER: "bold",
    Style.USER_INPUT: "bold",
    Style.IDENTIFIER: "green",
    Style.DESCRIPTION: "yellow",
    Style.PROGRESS_STATUS: "yellow",
    Style.SUCCESS: "green",
    Style.SUCCESS_HEADER: "bold,green",
    Style.FAILURE: "red",
    Style.FAILURE_HEADER: "bold,red",
    Style.INFO: "yellow",
    Style.ERROR: "red",
}

ENV_COLOR_PREFIX = "PROGRESS_CONSOLE_COLOR_"


def parse_color_spec(spec: str) -> Color:
    """
    Parse a comma-separated colour spec such as ``"bold,red"`` or
    ``"bright-cyan"`` into SGR on/off sequences. An empty spec yields no colour.
    """
    codes: list[int] = []
    for raw in spec.split(","):
        name = raw.strip().lower()
        if not name:
            continue
        if name in _ATTRIBUTES:
            codes.append(_ATTRIBUTES[name])
        elif name in _COLORS:
            codes.append(_COLORS[name])
        elif name.startswith("bright-") and name[7:] in _COLORS:
            codes.append(_COLORS[name[7:]] + 60)
        else:
            raise ValueError(f"Unknown colour or attribute {raw.strip()!r}")
    if not codes:
        return NO_COLOR
    return Color(on="".join(f"\x1b[{c}m" for c in codes), off=_RESET)


class DefaultColorMap:
    """
    Built-in theme. Each style may be overridden with
    ``PROGRESS_CONSOLE_COLOR_<STYLE>`` (the Style member name, e.g.
    ``PROGRESS_CONSOLE_COLOR_PROGRESS_STATUS``); ``NO_COLOR`` turns every colour off.
    """

    def __init__(
        self,
        use_color: bool = True,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        env = os.environ if environ is None else environ
        self._use_color = use_color and "NO_COLOR" not in env
        self._colors: dict[Style, Color] = {}
        for style, default_spec in _DEFAULT_SPECS.items():
            key = ENV_COLOR_PREFIX + style.name
            spec = env.get(key, default_spec)
            try:
                self._colors[style] = parse_color_spec(spec)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", key, spec)
                self._colors[style] = parse_color_spec(default_spec)

    @property
    def use_color(self) -> bool:
        return self._use_color

    def color_for(self, style: Style) -> Color:
        if not self._use_color:
            return NO_COLOR
        return self._colors.get(style, NO_COLOR)
