"""
Screen positions counted from the bottom-left corner of the terminal.

Row 0 is the bottom-most line and rows grow upward; column 0 is the left-most
column. A row below zero is a line that has not been scrolled onto the screen
yet.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cursor:
    row: int = 0
    col: int = 0

    @classmethod
    def at(cls, row: int, col: int = 0) -> "Cursor":
        return cls(row=row, col=col)

    @classmethod
    def new_bottom_left(cls) -> "Cursor":
        return cls(row=0, col=0)

    def copy_from(self, other: "Cursor") -> None:
        if other is self:
            return
        self.row = other.row
        self.col = other.col
