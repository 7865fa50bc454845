"""Pattern-based static evaluation shared by every search strategy.

A stone (real or hypothetical) is scored per axis by the length of the run it
belongs to and by how many of the run's two ends are open. The alpha-beta and
MCTS families use different magnitudes but the same ordering: longer runs beat
shorter ones and open ends beat blocked ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gomoku_ai.game.board import DIRECTIONS, WIN_LENGTH, Board, GomokuGameState
from gomoku_ai.game.types import Player, Point

# ---------------------------------------------------------------------------
# Pattern scoring tables: (consecutive_count, open_ends) -> score
# ---------------------------------------------------------------------------

PatternTable = dict[tuple[int, int], int]

WIN_SCORE = 1_000_000
DEPTH_BONUS = 100     # per remaining ply: win sooner, lose later
THREAT_SCORE = 20_000

ALPHA_BETA_PATTERNS: PatternTable = {
    (5, 0): WIN_SCORE,
    (4, 2): THREAT_SCORE * 10,  # open four: wins next turn
    (4, 1): THREAT_SCORE,       # half-open four: opponent must answer
    (3, 2): 1_500,              # open three
    (3, 1): 150,
    (2, 2): 70,
    (2, 1): 15,
    (1, 2): 5,
}

MCTS_PATTERNS: PatternTable = {
    (5, 0): 100_000,
    (4, 2): 10_000,
    (4, 1): 1_000,
    (3, 2): 500,
    (3, 1): 100,
    (2, 2): 50,
    (2, 1): 10,
    (1, 2): 1,
}


@dataclass(frozen=True)
class ScoringProfile:
    """Magnitudes and weights used by one search family."""

    patterns: PatternTable
    attack: float = 1.1
    defense: float = 0.9
    center: int = 2
    opponent_weight: float = 1.0


ALPHA_BETA_PROFILE = ScoringProfile(
    ALPHA_BETA_PATTERNS, attack=1.1, defense=0.9, center=2, opponent_weight=0.9,
)
MCTS_PROFILE = ScoringProfile(
    MCTS_PATTERNS, attack=1.1, defense=0.9, center=10, opponent_weight=1.0,
)


def lookup(patterns: PatternTable, count: int, open_ends: int) -> int:
    """Look up score for a consecutive group with given open ends."""
    if count >= WIN_LENGTH:
        return patterns[(WIN_LENGTH, 0)]
    return patterns.get((count, open_ends), 0)


# ---------------------------------------------------------------------------
# Per-cell and per-move scores
# ---------------------------------------------------------------------------

def pattern_score(board: Board, point: Point, player: Player, patterns: PatternTable) -> int:
    """Score the runs `player` would own through `point` on all four axes.

    `point` counts as holding `player` whatever the board says. Each half-line
    is scanned at most four cells out; an empty cell ends it as an open end,
    an opponent stone or the edge ends it as blocked.
    """
    score = 0
    for dr, dc in DIRECTIONS:
        count = 1
        open_ends = 0
        for sign in (1, -1):
            for step in range(1, WIN_LENGTH):
                p = Point(point.row + sign * dr * step, point.col + sign * dc * step)
                if not board.is_on_grid(p):
                    break
                owner = board.get(p)
                if owner is player:
                    count += 1
                    continue
                if owner is None:
                    open_ends += 1
                break
        score += lookup(patterns, count, open_ends)
    return score


def move_score(board: Board, point: Point, player: Player, profile: ScoringProfile) -> int:
    """Attack + defense + centrality value of `player` playing at `point`."""
    attack = pattern_score(board, point, player, profile.patterns)
    defense = pattern_score(board, point, player.other, profile.patterns)
    centre = board.size // 2
    distance = abs(point.row - centre) + abs(point.col - centre)
    return int(
        attack * profile.attack
        + defense * profile.defense
        + profile.center * (board.size - distance)
    )


# ---------------------------------------------------------------------------
# Whole-board evaluation
# ---------------------------------------------------------------------------

def evaluate_board(board: Board, player: Player, profile: ScoringProfile) -> int:
    """Static evaluation from `player`'s point of view.

    Sums the pattern score of every stone, positive for `player`'s own and
    negative (scaled by `opponent_weight`) for the opponent's.
    """
    own = 0
    theirs = 0
    for pt, owner in board.stones():
        ps = pattern_score(board, pt, owner, profile.patterns)
        if owner is player:
            own += ps
        else:
            theirs += ps
    return int(own - theirs * profile.opponent_weight)


def terminal_score(won: bool, depth: int) -> int:
    """Score of a decided position with `depth` plies left to search."""
    if won:
        return WIN_SCORE + depth * DEPTH_BONUS
    return -WIN_SCORE - depth * DEPTH_BONUS


def static_score(
    game_state: GomokuGameState,
    player: Player,
    profile: ScoringProfile,
    depth: int = 0,
    evaluation: Optional[int] = None,
) -> int:
    """Leaf value used by minimax and alpha-beta.

    Won positions get the depth-biased terminal score; anything else (draws
    included) gets the board evaluation, which callers may pass in precomputed.
    """
    if game_state.winner is not None:
        return terminal_score(game_state.winner is player, depth)
    if evaluation is not None:
        return evaluation
    return evaluate_board(game_state.board, player, profile)
