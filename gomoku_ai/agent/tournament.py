"""Strategy-vs-strategy matches with a plain-text results log."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from gomoku_ai.agent.base import Agent
from gomoku_ai.agent.strategy import StrategyLevel, apply_move, make_agent
from gomoku_ai.game.board import BOARD_SIZE, GomokuGameState, format_pair
from gomoku_ai.game.types import Outcome, Player, Point

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 42


@dataclass
class MoveRecord:
    name: str
    player: Player
    point: Point
    elapsed_ms: int

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.player.symbol}) plays "
            f"{format_pair(self.point)} (time: {self.elapsed_ms}ms)"
        )


@dataclass
class GameResult:
    number: int
    moves: list[MoveRecord] = field(default_factory=list)
    winner: Optional[Player] = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def moves_by(self, player: Player) -> list[MoveRecord]:
        return [m for m in self.moves if m.player is player]


@dataclass
class TournamentResult:
    black_level: StrategyLevel
    white_level: StrategyLevel
    games: list[GameResult] = field(default_factory=list)

    @property
    def black_name(self) -> str:
        return self.black_level.label

    @property
    def white_name(self) -> str:
        return self.white_level.label

    def wins(self, player: Player) -> int:
        return sum(1 for g in self.games if g.winner is player)

    @property
    def draws(self) -> int:
        return sum(1 for g in self.games if g.is_draw)

    def average_ms(self, player: Player) -> int:
        """Mean thinking time per move for `player`, truncated to whole ms."""
        records = [m for g in self.games for m in g.moves_by(player)]
        return sum(m.elapsed_ms for m in records) // max(1, len(records))


def play_game(
    black: Agent,
    white: Agent,
    size: int = BOARD_SIZE,
    number: int = 1,
    black_name: Optional[str] = None,
    white_name: Optional[str] = None,
    clock: Callable[[], float] = time.perf_counter,
) -> GameResult:
    """Play one full game, Black moving first, and record every move."""
    names = {
        Player.BLACK: black_name or black.name,
        Player.WHITE: white_name or white.name,
    }
    agents = {Player.BLACK: black, Player.WHITE: white}
    game = GomokuGameState(size)
    result = GameResult(number=number)

    while not game.is_over:
        player = game.current_player
        start = clock()
        point = agents[player].select_move(game)
        elapsed_ms = int((clock() - start) * 1000)

        record = MoveRecord(names[player], player, point, elapsed_ms)
        result.moves.append(record)
        logger.debug("Game %d: %s", number, record)

        if apply_move(game, point) is Outcome.WIN:
            result.winner = player

    logger.info(
        "Game %d over after %d moves: %s",
        number, len(result.moves),
        f"{names[result.winner]} wins" if result.winner else "draw",
    )
    return result


def run_tournament(
    black_level: Union[StrategyLevel, int],
    white_level: Union[StrategyLevel, int],
    games: int,
    size: int = BOARD_SIZE,
    black_budget: Optional[int] = None,
    white_budget: Optional[int] = None,
    rng: Optional[random.Random] = None,
    on_game: Optional[Callable[[GameResult], None]] = None,
) -> TournamentResult:
    """Play `games` games between two strategy levels; the first plays Black.

    Agents are rebuilt for every game so no search state carries over.
    `on_game` is called after each finished game (progress reporting).
    """
    if games < 1:
        raise ValueError(f"Number of games must be positive, got {games}")
    black_level = StrategyLevel(black_level)
    white_level = StrategyLevel(white_level)
    tournament = TournamentResult(black_level, white_level)
    logger.info(
        "Tournament: %s (X) vs %s (O), %d games",
        black_level.label, white_level.label, games,
    )

    for number in range(1, games + 1):
        game = play_game(
            make_agent(black_level, black_budget, rng),
            make_agent(white_level, white_budget, rng),
            size=size,
            number=number,
            black_name=black_level.label,
            white_name=white_level.label,
        )
        tournament.games.append(game)
        if on_game is not None:
            on_game(game)

    return tournament


def format_tournament_log(tournament: TournamentResult) -> str:
    black, white = tournament.black_name, tournament.white_name
    lines = [
        f"Tournament results: {black} (X) vs {white} (O)",
        f"Games: {len(tournament.games)}",
        SEPARATOR,
    ]
    for game in tournament.games:
        lines.append("")
        lines.append(f"Game {game.number}:")
        lines.extend(str(m) for m in game.moves)
        if game.winner is None:
            lines.append("Draw!")
        else:
            winner = black if game.winner is Player.BLACK else white
            lines.append(f"Winner: {winner} ({game.winner.symbol})!")
        lines.append(
            f"Moves: {black}={len(game.moves_by(Player.BLACK))}, "
            f"{white}={len(game.moves_by(Player.WHITE))}"
        )

    lines += [
        "",
        SEPARATOR,
        "Final results:",
        f"{black} (X): {tournament.wins(Player.BLACK)} wins",
        f"{white} (O): {tournament.wins(Player.WHITE)} wins",
        f"Draws: {tournament.draws}",
        f"Average time per move: {black}={tournament.average_ms(Player.BLACK)}ms, "
        f"{white}={tournament.average_ms(Player.WHITE)}ms",
    ]
    return "\n".join(lines) + "\n"


def log_filename(tournament: TournamentResult, when: Optional[datetime] = None) -> str:
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return (
        f"results_{int(tournament.black_level)}_vs_"
        f"{int(tournament.white_level)}_{stamp}.txt"
    )


def write_tournament_log(
    tournament: TournamentResult,
    directory: Union[str, Path] = ".",
    when: Optional[datetime] = None,
) -> Path:
    """Write the log into `directory` and return the file's path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / log_filename(tournament, when)
    path.write_text(format_tournament_log(tournament), encoding="utf-8")
    logger.info("Tournament log written to %s", path)
    return path
