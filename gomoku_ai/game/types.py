from __future__ import annotations

import enum
from typing import NamedTuple


class Player(enum.Enum):
    BLACK = 1
    WHITE = 2

    @property
    def other(self) -> Player:
        return Player.WHITE if self is Player.BLACK else Player.BLACK

    @property
    def symbol(self) -> str:
        return "X" if self is Player.BLACK else "O"

    def __str__(self) -> str:
        return self.name.capitalize()


class Point(NamedTuple):
    row: int  # 0-indexed, 0 = top
    col: int  # 0-indexed, 0 = left


class Outcome(enum.Enum):
    """Result of placing a stone."""

    WIN = "win"
    DRAW = "draw"
    CONTINUE = "continue"
