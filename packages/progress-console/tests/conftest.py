"""Shared fixtures: a virtual terminal screen and a manually driven scheduler."""
from __future__ import annotations

import re
from typing import Callable

import pytest

from progress_console.console import AnsiConsole
from progress_console.style import DefaultColorMap
from progress_console.terminal import Terminal

_ESCAPE = re.compile(r"\x1b\[([0-9;]*)([A-Za-z])")


class VirtualTerminal(Terminal):
    """
    Fixed-size screen that interprets the escape sequences the console emits:
    relative cursor motion (A/B/C/D), erase to end of line (K), SGR (ignored),
    carriage return and line feed with scrolling. Printing in the last column
    leaves the cursor pending a wrap, like xterm.

    The cursor starts on the bottom row, as it would under a shell prompt.
    """

    def __init__(self, columns: int = 20, rows: int = 10, interactive: bool = True) -> None:
        self._columns = columns
        self._rows = rows
        self._interactive = interactive
        self.screen: list[list[str]] = [[" "] * columns for _ in range(rows)]
        self.y = rows - 1
        self.x = 0
        self.writes: list[str] = []
        self.flush_count = 0
        self.scrolled = 0

    # ── Terminal ─────────────────────────────────────────────────────────────

    def write(self, data: str) -> None:
        self.writes.append(data)
        pos = 0
        while pos < len(data):
            match = _ESCAPE.match(data, pos)
            if match:
                self._escape(match.group(1), match.group(2))
                pos = match.end()
                continue
            self._char(data[pos])
            pos += 1

    def flush(self) -> None:
        self.flush_count += 1

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def is_interactive(self) -> bool:
        return self._interactive

    # ── inspection ───────────────────────────────────────────────────────────

    def line(self, y: int) -> str:
        return "".join(self.screen[y]).rstrip()

    def lines(self) -> list[str]:
        return [self.line(y) for y in range(self._rows)]

    def bottom_lines(self, count: int) -> list[str]:
        return self.lines()[-count:]

    def output(self) -> str:
        return "".join(self.writes)

    def clear_writes(self) -> None:
        self.writes.clear()

    # ── interpretation ───────────────────────────────────────────────────────

    def _escape(self, params: str, final: str) -> None:
        n = int(params) if params.isdigit() else 1
        if final == "m":
            return
        if self.x >= self._columns:
            self.x = self._columns - 1
        if final == "A":
            self.y = max(0, self.y - n)
        elif final == "B":
            self.y = min(self._rows - 1, self.y + n)
        elif final == "C":
            self.x = min(self._columns - 1, self.x + n)
        elif final == "D":
            self.x = max(0, self.x - n)
        elif final == "K":
            for x in range(self.x, self._columns):
                self.screen[self.y][x] = " "
        else:
            raise AssertionError(f"Unexpected escape sequence {final!r}")

    def _char(self, ch: str) -> None:
        if ch == "\r":
            self.x = 0
        elif ch == "\n":
            self._line_feed()
        else:
            if self.x >= self._columns:
                self.x = 0
                self._line_feed()
            self.screen[self.y][self.x] = ch
            self.x += 1

    def _line_feed(self) -> None:
        if self.y == self._rows - 1:
            self.screen.pop(0)
            self.screen.append([" "] * self._columns)
            self.scrolled += 1
        else:
            self.y += 1


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire(self) -> None:
        for timer in self.pending:
            timer.fired = True
            timer.callback()


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def terminal() -> VirtualTerminal:
    return VirtualTerminal()


@pytest.fixture
def plain_colors() -> DefaultColorMap:
    return DefaultColorMap(use_color=False, environ={})


@pytest.fixture
def console(terminal: VirtualTerminal, plain_colors: DefaultColorMap) -> AnsiConsole:
    return AnsiConsole(terminal, plain_colors, worker_lines=2)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_terminal() -> Callable[..., VirtualTerminal]:
    return VirtualTerminal
