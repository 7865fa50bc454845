from __future__ import annotations

import abc

from gomoku_ai.game.board import GameOverError, GomokuGameState
from gomoku_ai.game.types import Player, Point


class Agent(abc.ABC):
    @abc.abstractmethod
    def select_move(self, game_state: GomokuGameState) -> Point:
        """Return the point where this agent wants to play."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


def ensure_playable(game_state: GomokuGameState) -> None:
    """Raise GameOverError unless a move can still be made.

    Uses the exhaustive win scan so that snapshots built outside the rules
    engine are validated too.
    """
    if game_state.is_over or game_state.is_full():
        raise GameOverError("No move can be selected: the game is already over")
    for player in Player:
        if game_state.is_win(player=player):
            raise GameOverError(f"No move can be selected: {player} has already won")
