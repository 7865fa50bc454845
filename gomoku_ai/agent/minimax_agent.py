"""Minimax agent: exhaustive fixed-depth search over every empty cell.

No pruning and no move generator; this is the reference the alpha-beta agent
is checked against, so it shares its leaf scoring with it.
"""

from __future__ import annotations

import math
from typing import Optional

from gomoku_ai.agent.base import Agent, ensure_playable
from gomoku_ai.agent.heuristics import ALPHA_BETA_PROFILE, ScoringProfile, static_score
from gomoku_ai.game.board import GomokuGameState
from gomoku_ai.game.types import Player, Point


class MinimaxAgent(Agent):
    """Plain minimax. `depth` counts plies including the move being chosen."""

    def __init__(self, depth: int = 2, profile: ScoringProfile = ALPHA_BETA_PROFILE) -> None:
        self.depth = max(1, depth)
        self.profile = profile

    @property
    def name(self) -> str:
        return f"MinimaxAgent(d={self.depth})"

    def select_move(self, game_state: GomokuGameState) -> Point:
        return self.best_move_with_score(game_state)[1]

    def best_move_with_score(self, game_state: GomokuGameState) -> tuple[float, Point]:
        ensure_playable(game_state)
        root = game_state.current_player
        best_score = -math.inf
        best_move: Optional[Point] = None

        for move in game_state.legal_moves():
            with game_state.trial_move(move):
                score = self._minimax(game_state, self.depth - 1, False, root)
            if score > best_score:
                best_score = score
                best_move = move

        assert best_move is not None, "No legal moves available"
        return best_score, best_move

    def _minimax(
        self,
        game_state: GomokuGameState,
        depth: int,
        maximizing: bool,
        root: Player,
    ) -> float:
        if depth == 0 or game_state.is_over:
            return static_score(game_state, root, self.profile, depth)

        scores = []
        for move in game_state.legal_moves():
            with game_state.trial_move(move):
                scores.append(self._minimax(game_state, depth - 1, not maximizing, root))
        return max(scores) if maximizing else min(scores)
