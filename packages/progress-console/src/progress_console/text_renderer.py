"""Writes log events into the console's text area."""
from __future__ import annotations

from .events import LogEvent, OutputEvent
from .text_area import TextArea


class StyledTextOutputRenderer:
    def __init__(self, text_area: TextArea) -> None:
        self._text_area = text_area

    def on_output(self, event: OutputEvent) -> None:
        if isinstance(event, LogEvent):
            self._text_area.println(event.message, event.style)
