"""
Output events consumed by the progress console.

Operation ids are opaque hashable tokens chosen by the producer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Protocol

from .style import Style


@dataclass(frozen=True)
class OutputEvent:
    pass


@dataclass(frozen=True)
class ProgressStartEvent(OutputEvent):
    operation_id: Hashable
    parent_id: Hashable | None
    short_description: str
    status: str = ""


@dataclass(frozen=True)
class ProgressEvent(OutputEvent):
    operation_id: Hashable
    status: str


@dataclass(frozen=True)
class ProgressCompleteEvent(OutputEvent):
    operation_id: Hashable
    status: str = ""


@dataclass(frozen=True)
class EndOutputEvent(OutputEvent):
    pass


@dataclass(frozen=True)
class LogEvent(OutputEvent):
    """One line of build output for the text area."""
    message: str
    style: Style = Style.NORMAL


class OutputEventListener(Protocol):
    def on_output(self, event: OutputEvent) -> None:
        ...
