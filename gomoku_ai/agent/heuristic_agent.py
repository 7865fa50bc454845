"""Heuristic agent: no look-ahead, plays the best-scoring candidate."""

from __future__ import annotations

from gomoku_ai.agent.base import Agent, ensure_playable
from gomoku_ai.agent.candidates import candidate_moves
from gomoku_ai.agent.heuristics import ALPHA_BETA_PROFILE, ScoringProfile
from gomoku_ai.game.board import GomokuGameState
from gomoku_ai.game.types import Point


class HeuristicAgent(Agent):
    def __init__(self, profile: ScoringProfile = ALPHA_BETA_PROFILE) -> None:
        self.profile = profile

    def select_move(self, game_state: GomokuGameState) -> Point:
        ensure_playable(game_state)
        return candidate_moves(game_state, self.profile)[0]
