"""Alpha-beta agent: minimax with pruning, iterative deepening, an evaluation
cache and a wall-clock budget.

Search runs on the caller's state through `trial_move`, so every stone placed
during the search is removed again before `select_move` returns.

Per top-level call:
  1. Clear the evaluation caches and restart the clock.
  2. Empty board: play a random near-centre opening, no search.
  3. Order candidates by move score.
  4. Deepen from 2 plies to min(depth, max_depth). A score >= WIN_SCORE is
     returned at once; otherwise the depth's best move is promoted to the
     front of the list for the next pass. A pass interrupted by the clock
     is discarded.
"""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Optional

from gomoku_ai.agent.base import Agent, ensure_playable
from gomoku_ai.agent.candidates import generate_candidates, opening_move, order_moves
from gomoku_ai.agent.heuristics import (
    ALPHA_BETA_PROFILE,
    WIN_SCORE,
    ScoringProfile,
    evaluate_board,
    move_score,
    static_score,
)
from gomoku_ai.game.board import GameOverError, GomokuGameState
from gomoku_ai.game.types import Player, Point

logger = logging.getLogger(__name__)

INF = math.inf

MAX_SEARCH_DEPTH = 4
TIME_BUDGET_S = 9.0
# Inner nodes keep only this many best-scoring children
MAX_BRANCHING = 15


class AlphaBetaAgent(Agent):
    """Iterative-deepening alpha-beta. `depth` counts plies including the move
    being chosen and is clamped to `max_depth`.

    Inner nodes only look at the `max_branching` best-scoring replies, so a
    search can score a position differently from plain minimax. With the cap
    lifted above the number of legal moves the two agree exactly.
    """

    def __init__(
        self,
        depth: int = MAX_SEARCH_DEPTH,
        max_depth: int = MAX_SEARCH_DEPTH,
        time_budget: float = TIME_BUDGET_S,
        max_branching: int = MAX_BRANCHING,
        profile: ScoringProfile = ALPHA_BETA_PROFILE,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.depth = max(1, depth)
        self.max_depth = max(1, max_depth)
        self.time_budget = time_budget
        self.max_branching = max_branching
        self.profile = profile
        self.rng = rng if rng is not None else random.Random()
        self._clock = clock

        self._eval_cache: dict = {}
        self._move_cache: dict = {}
        self._start = 0.0
        self._timed_out = False

    @property
    def name(self) -> str:
        return f"AlphaBetaAgent(d={self.depth})"

    @property
    def timed_out(self) -> bool:
        """Whether the last search ran out of time."""
        return self._timed_out

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def select_move(self, game_state: GomokuGameState) -> Point:
        ensure_playable(game_state)
        self._reset()

        if game_state.board.occupied_count == 0:
            move = opening_move(game_state.size, self.rng)
            logger.debug("Alpha-beta: opening move %s", move)
            return move

        root = game_state.current_player
        candidates = self._ordered_candidates(game_state)
        target = min(self.depth, self.max_depth)
        best_move: Optional[Point] = None
        best_score = -INF
        reached = 0

        for cur_depth in range(min(2, target), target + 1):
            score, move = self._root_pass(game_state, candidates, cur_depth, root)

            if move is not None and score >= WIN_SCORE:
                logger.info("Alpha-beta: winning move %s found at depth %d", move, cur_depth)
                return move

            if self._timed_out:
                logger.info("Alpha-beta: timeout during depth %d", cur_depth)
                break

            if move is not None:
                best_move, best_score, reached = move, score, cur_depth
                # Shallower result orders the next, deeper pass
                candidates.remove(move)
                candidates.insert(0, move)

        logger.debug(
            "Alpha-beta: %.0f ms, depth %d, score %s",
            (self._clock() - self._start) * 1000, reached, best_score,
        )

        if best_move is not None:
            return best_move
        if candidates:
            return candidates[0]
        empty = game_state.board.empty_points()
        if not empty:
            raise GameOverError("No legal move available")
        return empty[0]

    def search_root(self, game_state: GomokuGameState, depth: int) -> tuple[float, Optional[Point]]:
        """Run a single fixed-depth pass and return (score, move).

        Skips the opening shortcut and iterative deepening.
        """
        ensure_playable(game_state)
        self._reset()
        candidates = self._ordered_candidates(game_state)
        return self._root_pass(game_state, candidates, max(1, depth), game_state.current_player)

    def _reset(self) -> None:
        self._eval_cache.clear()
        self._move_cache.clear()
        self._start = self._clock()
        self._timed_out = False

    def _root_pass(
        self,
        game_state: GomokuGameState,
        candidates: list[Point],
        depth: int,
        root: Player,
    ) -> tuple[float, Optional[Point]]:
        alpha = -INF
        best_score = -INF
        best_move: Optional[Point] = None

        for move in candidates:
            with game_state.trial_move(move):
                score = self._search(game_state, depth - 1, alpha, INF, False, root)
            if self._timed_out:
                break
            if score > best_score:
                best_score = score
                best_move = move
                alpha = max(alpha, score)
            if score >= WIN_SCORE:
                break

        return best_score, best_move

    # ------------------------------------------------------------------
    # Recursive search
    # ------------------------------------------------------------------

    def _search(
        self,
        game_state: GomokuGameState,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
        root: Player,
    ) -> float:
        if self._clock() - self._start > self.time_budget:
            self._timed_out = True
            return 0

        # The rules engine already checked the stone that led here
        if game_state.winner is not None:
            return static_score(game_state, root, self.profile, depth)

        if depth == 0 or game_state.is_over:
            return self._evaluate(game_state, root)

        moves = self._children(game_state)

        if maximizing:
            value = -INF
            for move in moves:
                with game_state.trial_move(move):
                    value = max(value, self._search(game_state, depth - 1, alpha, beta, False, root))
                alpha = max(alpha, value)
                if beta <= alpha or self._timed_out:
                    break
            return value

        value = INF
        for move in moves:
            with game_state.trial_move(move):
                value = min(value, self._search(game_state, depth - 1, alpha, beta, True, root))
            beta = min(beta, value)
            if beta <= alpha or self._timed_out:
                break
        return value

    def _children(self, game_state: GomokuGameState) -> list[Point]:
        """Candidates for the side to move, best first, capped to max_branching."""
        moves = self._ordered_candidates(game_state)
        if len(moves) > self.max_branching:
            moves = moves[:self.max_branching]
        return moves

    def _ordered_candidates(self, game_state: GomokuGameState) -> list[Point]:
        """Move generator output for the side to move, ordered by cached move score."""
        key = game_state.board.key()
        player = game_state.current_player
        return order_moves(
            generate_candidates(game_state),
            lambda m: self._move_score(game_state, key, m, player),
        )

    # ------------------------------------------------------------------
    # Cached scoring
    # ------------------------------------------------------------------

    def _evaluate(self, game_state: GomokuGameState, root: Player) -> int:
        key = game_state.board.key()
        score = self._eval_cache.get(key)
        if score is None:
            score = evaluate_board(game_state.board, root, self.profile)
            self._eval_cache[key] = score
        return score

    def _move_score(self, game_state: GomokuGameState, key: frozenset, move: Point, player: Player) -> int:
        cache_key = (key, move, player)
        score = self._move_cache.get(cache_key)
        if score is None:
            score = move_score(game_state.board, move, player, self.profile)
            self._move_cache[cache_key] = score
        return score
