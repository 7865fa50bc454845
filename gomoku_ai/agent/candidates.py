"""Move generation: the bounded neighbourhood every search strategy draws from."""

from __future__ import annotations

import random
from typing import Callable, Optional

from gomoku_ai.agent.heuristics import ALPHA_BETA_PROFILE, ScoringProfile, move_score
from gomoku_ai.game.board import GomokuGameState
from gomoku_ai.game.types import Point

# Empty cells further than this (Chebyshev distance) from every stone are ignored
NEIGHBOUR_RADIUS = 3


def _centre_block(size: int) -> list[Point]:
    """The 3x3 block around the centre cell, clipped to the board."""
    centre = size // 2
    return [
        Point(r, c)
        for r in range(centre - 1, centre + 2)
        for c in range(centre - 1, centre + 2)
        if 0 <= r < size and 0 <= c < size
    ]


def generate_candidates(game_state: GomokuGameState) -> list[Point]:
    """Return empty cells within NEIGHBOUR_RADIUS of an existing stone.

    On an empty board, returns the block around the centre instead. Falls back
    to every empty cell if the neighbourhood turns out empty.
    """
    board = game_state.board
    if board.occupied_count == 0:
        return _centre_block(board.size)

    candidates: set[Point] = set()
    for pt, _ in board.stones():
        for dr in range(-NEIGHBOUR_RADIUS, NEIGHBOUR_RADIUS + 1):
            for dc in range(-NEIGHBOUR_RADIUS, NEIGHBOUR_RADIUS + 1):
                np_ = Point(pt.row + dr, pt.col + dc)
                if board.is_on_grid(np_) and board.is_empty(np_):
                    candidates.add(np_)

    if not candidates:
        return board.empty_points()
    return list(candidates)


def order_moves(candidates: list[Point], key: Callable[[Point], int]) -> list[Point]:
    """Sort by descending score; ties go to the lower row, then the lower column."""
    return sorted(candidates, key=lambda m: (-key(m), m.row, m.col))


def candidate_moves(
    game_state: GomokuGameState,
    profile: ScoringProfile = ALPHA_BETA_PROFILE,
    score_fn: Optional[Callable[[Point], int]] = None,
) -> list[Point]:
    """Candidates for the player to move, best first.

    `score_fn` replaces the plain move score, e.g. with a cached one.
    """
    if score_fn is None:
        board = game_state.board
        player = game_state.current_player
        score_fn = lambda m: move_score(board, m, player, profile)  # noqa: E731
    return order_moves(generate_candidates(game_state), score_fn)


def opening_move(size: int, rng: random.Random) -> Point:
    """A random cell next to (or on) the centre, for the first stone of a game."""
    return rng.choice(_centre_block(size))
