"""
Console settings.

Environment variables:
- PROGRESS_CONSOLE_THROTTLE_MS: minimum interval between redraws (default 85)
- PROGRESS_CONSOLE_WORKERS: number of worker lines (default 4, at most 8)
- PROGRESS_CONSOLE_FORCE: render even when stdout is not a terminal
- NO_COLOR: disable colours
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .progress_renderer import DEFAULT_THROTTLE_MS
from .status_area import DEFAULT_WORKER_LINES

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROGRESS_CONSOLE_"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ConsoleSettings:
    throttle_ms: int = DEFAULT_THROTTLE_MS
    worker_lines: int = DEFAULT_WORKER_LINES
    color: bool = True
    force_interactive: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConsoleSettings":
        env = os.environ if environ is None else environ
        settings = cls()
        settings.throttle_ms = _int_setting(env, "THROTTLE_MS", settings.throttle_ms)
        settings.worker_lines = _int_setting(env, "WORKERS", settings.worker_lines)
        settings.force_interactive = env.get(ENV_PREFIX + "FORCE", "").lower() in _TRUE_VALUES
        settings.color = "NO_COLOR" not in env
        return settings


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    key = ENV_PREFIX + name
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", key, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", key, raw)
        return default
    return value
