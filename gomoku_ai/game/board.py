from __future__ import annotations

import string
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ItemsView, Iterator, Optional

from .types import Outcome, Player, Point

BOARD_SIZE = 15
WIN_LENGTH = 5

# Column labels: A, B, C, ... (boards up to 26 columns)
COL_LABELS = string.ascii_uppercase

DIRECTIONS = [(0, 1), (1, 0), (1, 1), (1, -1)]


class IllegalMoveError(ValueError):
    """Raised when a move is off the grid or targets an occupied cell."""


class GameOverError(RuntimeError):
    """Raised when a move is requested for a game that has already ended."""


def parse_coordinate(text: str, size: int = BOARD_SIZE) -> Optional[Point]:
    """Parse a coordinate string like 'E5' or 'H12' into a Point.

    Column is a letter, row is a number 1..size counted from the top.
    Returns None if the string is invalid.
    """
    text = text.strip().upper()
    if len(text) < 2 or len(text) > 3:
        return None
    col_char = text[0]
    row_str = text[1:]
    if col_char not in COL_LABELS[:size]:
        return None
    try:
        row = int(row_str)
    except ValueError:
        return None
    if not (1 <= row <= size):
        return None
    return Point(row - 1, COL_LABELS.index(col_char))


def format_point(point: Point) -> str:
    """Format a Point as a coordinate string like 'E5'."""
    return f"{COL_LABELS[point.col]}{point.row + 1}"


def format_pair(point: Point) -> str:
    """Format a Point as 1-indexed 'row,col' (tournament logs)."""
    return f"{point.row + 1},{point.col + 1}"


@dataclass(frozen=True)
class Move:
    point: Point
    player: Player
    elapsed: Optional[float] = None  # seconds spent choosing the move

    def __str__(self) -> str:
        return f"{self.player}: {format_point(self.point)}"


class Board:
    """Square Gomoku board. Empty cells are simply absent from the grid."""

    def __init__(self, size: int = BOARD_SIZE) -> None:
        if size < 1:
            raise ValueError(f"Board size must be positive, got {size}")
        self._size = size
        self._grid: dict[Point, Player] = {}

    @property
    def size(self) -> int:
        return self._size

    def place(self, point: Point, player: Player) -> None:
        assert self.is_empty(point), f"{format_point(point)} is occupied"
        self._grid[point] = player

    def remove(self, point: Point) -> None:
        del self._grid[point]

    def get(self, point: Point) -> Optional[Player]:
        return self._grid.get(point)

    def is_empty(self, point: Point) -> bool:
        return point not in self._grid

    def is_on_grid(self, point: Point) -> bool:
        return 0 <= point.row < self._size and 0 <= point.col < self._size

    def stones(self) -> ItemsView[Point, Player]:
        return self._grid.items()

    def empty_points(self) -> list[Point]:
        """Every empty cell in raster order."""
        return [
            Point(r, c)
            for r in range(self._size)
            for c in range(self._size)
            if Point(r, c) not in self._grid
        ]

    @property
    def occupied_count(self) -> int:
        return len(self._grid)

    def is_full(self) -> bool:
        return len(self._grid) == self._size * self._size

    def key(self) -> frozenset:
        """Canonical hashable form of the full board contents."""
        return frozenset(self._grid.items())

    def copy(self) -> Board:
        clone = Board(self._size)
        clone._grid = dict(self._grid)
        return clone

    def __str__(self) -> str:
        rows = []
        for r in range(self._size):
            row = ""
            for c in range(self._size):
                player = self._grid.get(Point(r, c))
                row += player.symbol if player is not None else "."
            rows.append(row)
        return "\n".join(rows)


class GomokuGameState:
    """Full game state for Gomoku (N x N, 5-in-a-row)."""

    def __init__(self, size: int = BOARD_SIZE) -> None:
        self.board = Board(size)
        self.current_player = Player.BLACK
        self.moves: list[Move] = []
        self._winner: Optional[Player] = None
        self._is_over = False

    @property
    def size(self) -> int:
        return self.board.size

    @property
    def is_over(self) -> bool:
        return self._is_over

    @property
    def winner(self) -> Optional[Player]:
        return self._winner

    @property
    def is_draw(self) -> bool:
        return self._is_over and self._winner is None

    def legal_moves(self) -> list[Point]:
        if self._is_over:
            return []
        return self.board.empty_points()

    def is_full(self) -> bool:
        return self.board.is_full()

    def apply_move(self, point: Point, elapsed: Optional[float] = None) -> Outcome:
        """Place a stone for the current player.

        The turn only passes to the opponent when the game continues; after a
        win or draw `current_player` is left on the player who moved last.
        """
        if self._is_over:
            raise GameOverError("Game is already over")
        if not self.board.is_on_grid(point):
            raise IllegalMoveError(f"Point {point} is off the grid")
        if not self.board.is_empty(point):
            raise IllegalMoveError(f"Point {format_point(point)} is occupied")

        player = self.current_player
        self.board.place(point, player)
        self.moves.append(Move(point=point, player=player, elapsed=elapsed))

        # Win takes priority over a full board
        if self._check_win(point, player):
            self._winner = player
            self._is_over = True
            return Outcome.WIN
        if self.board.is_full():
            self._is_over = True
            return Outcome.DRAW

        self.current_player = player.other
        return Outcome.CONTINUE

    def resign(self) -> None:
        """The player to move concedes; the opponent is recorded as winner."""
        if self._is_over:
            raise GameOverError("Game is already over")
        self._winner = self.current_player.other
        self._is_over = True

    def undo_move(self) -> Optional[Move]:
        """Undo the last move. Returns the undone Move, or None if no moves."""
        if not self.moves:
            return None
        move = self.moves.pop()
        self.board.remove(move.point)
        self.current_player = move.player
        self._winner = None
        self._is_over = False
        return move

    @contextmanager
    def trial_move(self, point: Point) -> Iterator[Outcome]:
        """Apply `point` for the duration of the block, then undo it."""
        outcome = self.apply_move(point)
        try:
            yield outcome
        finally:
            self.undo_move()

    def is_win(self, row: int = -1, col: int = -1, player: Optional[Player] = None) -> bool:
        """Check for five-in-a-row without mutating anything.

        With coordinates, checks the line through (row, col) for the stone
        there (or for `player`, as if it stood there). With the (-1, -1)
        sentinel, scans every stone of `player` (default: the player to
        move) on the whole board.
        """
        if row < 0 or col < 0:
            target = player if player is not None else self.current_player
            return any(
                self._check_win(pt, target)
                for pt, owner in list(self.board.stones())
                if owner is target
            )
        point = Point(row, col)
        target = player if player is not None else self.board.get(point)
        if target is None:
            return False
        return self._check_win(point, target)

    def copy(self) -> GomokuGameState:
        """Independent snapshot sharing no mutable state with this one."""
        clone = GomokuGameState(self.size)
        clone.board = self.board.copy()
        clone.current_player = self.current_player
        clone.moves = list(self.moves)
        clone._winner = self._winner
        clone._is_over = self._is_over
        return clone

    def _check_win(self, point: Point, player: Player) -> bool:
        """Check if `player` at `point` lies on a line of 5 or more."""
        for dr, dc in DIRECTIONS:
            count = 1
            # Count forward
            for step in range(1, WIN_LENGTH):
                p = Point(point.row + dr * step, point.col + dc * step)
                if not self.board.is_on_grid(p) or self.board.get(p) is not player:
                    break
                count += 1
            # Count backward
            for step in range(1, WIN_LENGTH):
                p = Point(point.row - dr * step, point.col - dc * step)
                if not self.board.is_on_grid(p) or self.board.get(p) is not player:
                    break
                count += 1
            if count >= WIN_LENGTH:
                return True
        return False
