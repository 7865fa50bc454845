"""Monte Carlo Tree Search agent with heuristic-guided rollouts.

Each iteration runs the four classic phases:
  1. Selection:       descend by UCT while the node is fully expanded
  2. Expansion:       add one child, for the best-scoring untried move
  3. Simulation:      semi-greedy rollout on a private copy of the state
  4. Backpropagation: update visits and win scores up to the root

Every node owns its own state snapshot, so the tree never needs undo.
"""

from __future__ import annotations

import logging
import math
import random
import time
import weakref
from typing import Callable, Optional

from gomoku_ai.agent.base import Agent, ensure_playable
from gomoku_ai.agent.candidates import candidate_moves, opening_move
from gomoku_ai.agent.heuristics import MCTS_PROFILE, ScoringProfile, evaluate_board
from gomoku_ai.game.board import GomokuGameState
from gomoku_ai.game.types import Outcome, Player, Point

logger = logging.getLogger(__name__)

UCT_CONSTANT = 1.414
MAX_SIMULATIONS = 10_000
TIME_BUDGET_MS = 3_000

# Rollout policy
ROLLOUT_STEPS = 50
GREEDY_PROBABILITY = 0.8   # otherwise pick randomly among the TOP_K best moves
TOP_K = 3
DRAW_MARGIN = 100          # |evaluation| below this at the step cap counts as a draw

CENTRE_BONUS = 0.1


class SearchNode:
    """A node of the search tree.

    Owns its state snapshot and its children; the parent link is weak so a
    child never keeps its parent alive.
    """

    def __init__(
        self,
        state: GomokuGameState,
        mover: Player,
        parent: Optional[SearchNode] = None,
        move: Optional[Point] = None,
    ) -> None:
        self.state = state
        self.mover = mover  # player who made `move` (for the root: who moved last)
        self._parent = weakref.ref(parent) if parent is not None else None
        self.move = move
        self.children: list[SearchNode] = []
        self.visits = 0
        self.win_score = 0.0
        self._untried: Optional[list[Point]] = None

    @property
    def parent(self) -> Optional[SearchNode]:
        return self._parent() if self._parent is not None else None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_over

    @property
    def win_rate(self) -> float:
        return self.win_score / self.visits if self.visits else 0.0

    def untried_moves(self, profile: ScoringProfile) -> list[Point]:
        """Heuristically ordered moves that have no child yet."""
        if self._untried is None:
            self._untried = [] if self.is_terminal else candidate_moves(self.state, profile)
        return self._untried

    def uct(self, exploration: float) -> float:
        if self.visits == 0:
            return math.inf
        parent = self.parent
        parent_visits = parent.visits if parent is not None else self.visits
        exploitation = self.win_score / self.visits
        explore = exploration * math.sqrt(math.log(parent_visits) / self.visits)
        return exploitation + explore + self._centre_bonus()

    def _centre_bonus(self) -> float:
        if self.move is None:
            return 0.0
        size = self.state.size
        centre = size // 2
        distance = abs(self.move.row - centre) + abs(self.move.col - centre)
        return CENTRE_BONUS * (1.0 - distance / max(1, size - 1))


class MCTSAgent(Agent):
    """UCT search bounded by a simulation ceiling and a time budget in ms."""

    def __init__(
        self,
        time_budget_ms: int = TIME_BUDGET_MS,
        max_simulations: int = MAX_SIMULATIONS,
        exploration: float = UCT_CONSTANT,
        rollout_steps: int = ROLLOUT_STEPS,
        profile: ScoringProfile = MCTS_PROFILE,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.time_budget_ms = time_budget_ms
        self.max_simulations = max_simulations
        self.exploration = exploration
        self.rollout_steps = rollout_steps
        self.profile = profile
        self.rng = rng if rng is not None else random.Random()
        self._clock = clock

    @property
    def name(self) -> str:
        return f"MCTSAgent({self.time_budget_ms}ms)"

    def select_move(self, game_state: GomokuGameState) -> Point:
        ensure_playable(game_state)

        if game_state.board.occupied_count == 0:
            move = opening_move(game_state.size, self.rng)
            logger.debug("MCTS: opening move %s", move)
            return move

        root = self.search(game_state)
        best = self._best_child(root)
        if best is None:
            # Budget ran out before the first expansion
            return candidate_moves(game_state, self.profile)[0]
        logger.debug(
            "MCTS: %d simulations, move %s, win rate %.2f",
            root.visits, best.move, best.win_rate,
        )
        return best.move

    def search(self, game_state: GomokuGameState) -> SearchNode:
        """Grow a tree from a snapshot of `game_state` and return its root."""
        start = self._clock()
        deadline = start + self.time_budget_ms / 1000.0
        root = SearchNode(game_state.copy(), mover=game_state.current_player.other)

        simulations = 0
        while simulations < self.max_simulations and self._clock() < deadline:
            node = self._select(root)
            child = self._expand(node)
            leaf = child if child is not None else node
            winner = self._rollout(leaf)
            self._backpropagate(leaf, winner)
            simulations += 1

        logger.debug(
            "MCTS search: %.0f ms, %d simulations",
            (self._clock() - start) * 1000, simulations,
        )
        return root

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _select(self, root: SearchNode) -> SearchNode:
        node = root
        while node.children and not node.is_terminal and not node.untried_moves(self.profile):
            node = max(node.children, key=lambda c: c.uct(self.exploration))
        return node

    def _expand(self, node: SearchNode) -> Optional[SearchNode]:
        untried = node.untried_moves(self.profile)
        if node.is_terminal or not untried:
            return None
        move = untried.pop(0)
        state = node.state.copy()
        state.apply_move(move)
        child = SearchNode(state, mover=node.state.current_player, parent=node, move=move)
        node.children.append(child)
        return child

    def _rollout(self, node: SearchNode) -> Optional[Player]:
        """Play on from `node` and return the winner, or None for a draw."""
        if node.state.is_over:
            return node.state.winner

        scratch = node.state.copy()
        for _ in range(self.rollout_steps):
            moves = candidate_moves(scratch, self.profile)
            if not moves:
                return None
            if self.rng.random() < GREEDY_PROBABILITY:
                move = moves[0]
            else:
                move = moves[self.rng.randrange(min(TOP_K, len(moves)))]

            mover = scratch.current_player
            outcome = scratch.apply_move(move)
            if outcome is Outcome.WIN:
                return mover
            if outcome is Outcome.DRAW:
                return None

        # Step cap reached: let the static evaluation decide
        to_move = scratch.current_player
        score = evaluate_board(scratch.board, to_move, self.profile)
        if abs(score) < DRAW_MARGIN:
            return None
        return to_move if score > 0 else to_move.other

    def _backpropagate(self, node: Optional[SearchNode], winner: Optional[Player]) -> None:
        while node is not None:
            node.visits += 1
            if winner is None:
                node.win_score += 0.5
            elif node.mover is winner:
                node.win_score += 1.0
            node = node.parent

    def _best_child(self, root: SearchNode) -> Optional[SearchNode]:
        visited = [c for c in root.children if c.visits > 0]
        if visited:
            return max(visited, key=lambda c: c.win_rate)
        if root.children:
            return max(root.children, key=lambda c: c.visits)
        return None
