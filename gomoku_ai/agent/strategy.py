"""Strategy dispatch: the one entry point the UI and tournament layers use."""

from __future__ import annotations

import enum
import random
from typing import Optional, Union

from gomoku_ai.agent.alphabeta_agent import AlphaBetaAgent
from gomoku_ai.agent.base import Agent
from gomoku_ai.agent.heuristic_agent import HeuristicAgent
from gomoku_ai.agent.mcts_agent import MCTSAgent
from gomoku_ai.agent.minimax_agent import MinimaxAgent
from gomoku_ai.game.board import GomokuGameState, IllegalMoveError, format_point
from gomoku_ai.game.types import Outcome, Point


class StrategyLevel(enum.IntEnum):
    HEURISTIC = 1
    MINIMAX = 2
    ALPHA_BETA = 3
    MCTS = 4

    @property
    def label(self) -> str:
        return LEVEL_LABELS[self]


LEVEL_LABELS: dict[StrategyLevel, str] = {
    StrategyLevel.HEURISTIC: "Heuristic",
    StrategyLevel.MINIMAX: "Minimax",
    StrategyLevel.ALPHA_BETA: "Alpha-Beta",
    StrategyLevel.MCTS: "MCTS",
}

# Depth in plies for the tree searches, milliseconds for MCTS
DEFAULT_BUDGETS: dict[StrategyLevel, Optional[int]] = {
    StrategyLevel.HEURISTIC: None,
    StrategyLevel.MINIMAX: 2,
    StrategyLevel.ALPHA_BETA: 4,
    StrategyLevel.MCTS: 3_000,
}


def make_agent(
    level: Union[StrategyLevel, int],
    budget: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Agent:
    """Build the agent for a difficulty level.

    Raises ValueError for an unknown level rather than picking a default.
    """
    level = StrategyLevel(level)
    if budget is None:
        budget = DEFAULT_BUDGETS[level]

    if level is StrategyLevel.HEURISTIC:
        return HeuristicAgent()
    if level is StrategyLevel.MINIMAX:
        return MinimaxAgent(depth=budget)
    if level is StrategyLevel.ALPHA_BETA:
        return AlphaBetaAgent(depth=budget, rng=rng)
    return MCTSAgent(time_budget_ms=budget, rng=rng)


def select_move(
    game_state: GomokuGameState,
    level: Union[StrategyLevel, int],
    budget: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Point:
    """Choose a move for the player to move using the given strategy."""
    return make_agent(level, budget, rng).select_move(game_state)


def apply_move(
    game_state: GomokuGameState,
    point: Point,
    elapsed: Optional[float] = None,
) -> Outcome:
    """Validate `point` and play it for the player to move."""
    if not game_state.board.is_on_grid(point):
        raise IllegalMoveError(f"Point {point} is off the grid")
    if not game_state.board.is_empty(point):
        raise IllegalMoveError(f"Point {format_point(point)} is occupied")
    return game_state.apply_move(point, elapsed=elapsed)
