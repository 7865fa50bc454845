import random

import pytest

from gomoku_ai.agent.alphabeta_agent import AlphaBetaAgent
from gomoku_ai.agent.heuristic_agent import HeuristicAgent
from gomoku_ai.agent.mcts_agent import MCTSAgent
from gomoku_ai.agent.minimax_agent import MinimaxAgent
from gomoku_ai.agent.strategy import (
    DEFAULT_BUDGETS,
    StrategyLevel,
    apply_move,
    make_agent,
    select_move,
)
from gomoku_ai.game.board import GameOverError, GomokuGameState, IllegalMoveError
from gomoku_ai.game.types import Outcome, Player, Point


class TestMakeAgent:
    @pytest.mark.parametrize(
        "level,cls",
        [
            (1, HeuristicAgent),
            (2, MinimaxAgent),
            (3, AlphaBetaAgent),
            (4, MCTSAgent),
        ],
    )
    def test_levels(self, level, cls):
        assert isinstance(make_agent(level), cls)

    def test_default_budgets(self):
        assert make_agent(StrategyLevel.MINIMAX).depth == DEFAULT_BUDGETS[StrategyLevel.MINIMAX]
        assert make_agent(StrategyLevel.ALPHA_BETA).depth == 4
        assert make_agent(StrategyLevel.MCTS).time_budget_ms == 3_000

    def test_explicit_budget(self):
        assert make_agent(StrategyLevel.ALPHA_BETA, budget=2).depth == 2
        assert make_agent(StrategyLevel.MCTS, budget=250).time_budget_ms == 250

    @pytest.mark.parametrize("level", [0, 5, -1])
    def test_unknown_level(self, level):
        with pytest.raises(ValueError):
            make_agent(level)

    def test_labels(self):
        assert StrategyLevel.ALPHA_BETA.label == "Alpha-Beta"
        assert StrategyLevel.MCTS.label == "MCTS"


class TestSelectMove:
    def test_opening_uses_centre_block(self):
        g = GomokuGameState()
        move = select_move(g, StrategyLevel.ALPHA_BETA, rng=random.Random(1))
        assert max(abs(move.row - 7), abs(move.col - 7)) <= 1

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            select_move(GomokuGameState(), 9)

    def test_finished_game(self):
        g = GomokuGameState()
        for i in range(4):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        g.apply_move(Point(0, 4))
        with pytest.raises(GameOverError):
            select_move(g, StrategyLevel.HEURISTIC)

    def test_small_board_minimax(self):
        g = GomokuGameState(5)
        g.apply_move(Point(2, 2))
        move = select_move(g, StrategyLevel.MINIMAX, budget=1)
        assert g.board.is_empty(move)


class TestApplyMove:
    def test_continue(self):
        g = GomokuGameState()
        assert apply_move(g, Point(7, 7)) is Outcome.CONTINUE
        assert g.current_player is Player.WHITE

    def test_records_elapsed(self):
        g = GomokuGameState()
        apply_move(g, Point(7, 7), elapsed=0.25)
        assert g.moves[-1].elapsed == 0.25

    @pytest.mark.parametrize("point", [Point(-1, 0), Point(0, 15), Point(15, 15)])
    def test_out_of_bounds(self, point):
        g = GomokuGameState()
        with pytest.raises(IllegalMoveError):
            apply_move(g, point)
        assert g.board.occupied_count == 0

    def test_occupied(self):
        g = GomokuGameState()
        apply_move(g, Point(7, 7))
        with pytest.raises(IllegalMoveError):
            apply_move(g, Point(7, 7))
        assert g.current_player is Player.WHITE

    def test_win_scenario(self):
        g = GomokuGameState()
        black = [Point(7, 7), Point(7, 8), Point(7, 9), Point(7, 10)]
        white = [Point(8, 7), Point(8, 8), Point(8, 9), Point(8, 10)]
        for b, w in zip(black, white):
            apply_move(g, b)
            apply_move(g, w)
        assert apply_move(g, Point(7, 11)) is Outcome.WIN
        assert g.winner is Player.BLACK
        with pytest.raises(GameOverError):
            apply_move(g, Point(0, 0))
