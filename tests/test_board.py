import dataclasses

import pytest

from gomoku_ai.game.board import (
    BOARD_SIZE,
    Board,
    GameOverError,
    GomokuGameState,
    IllegalMoveError,
    format_pair,
    format_point,
    parse_coordinate,
)
from gomoku_ai.game.types import Outcome, Player, Point


def draw_fill_points(size: int = BOARD_SIZE) -> tuple[list[Point], list[Point]]:
    """Split the board into Black and White cells with no run longer than 2.

    Black gets one more cell than White on a 15x15 board, so interleaving the
    two lists fills the board with Black playing last.
    """
    black, white = [], []
    for r in range(size):
        for c in range(size):
            (black if ((c + 2 * r) // 2) % 2 == 0 else white).append(Point(r, c))
    return black, white


def play(g: GomokuGameState, points: list[Point]) -> Outcome:
    outcome = Outcome.CONTINUE
    for p in points:
        outcome = g.apply_move(p)
    return outcome


class TestParseCoordinate:
    def test_valid(self):
        assert parse_coordinate("A1") == Point(0, 0)
        assert parse_coordinate("H8") == Point(7, 7)
        assert parse_coordinate("O15") == Point(14, 14)
        assert parse_coordinate("h8") == Point(7, 7)  # case insensitive

    def test_invalid(self):
        assert parse_coordinate("") is None
        assert parse_coordinate("Z1") is None
        assert parse_coordinate("A0") is None
        assert parse_coordinate("A16") is None
        assert parse_coordinate("XX") is None

    def test_respects_board_size(self):
        assert parse_coordinate("I9", size=9) == Point(8, 8)
        assert parse_coordinate("J1", size=9) is None


class TestFormatPoint:
    def test_basic(self):
        assert format_point(Point(0, 0)) == "A1"
        assert format_point(Point(7, 7)) == "H8"
        assert format_point(Point(14, 14)) == "O15"

    def test_pair_is_one_indexed(self):
        assert format_pair(Point(0, 0)) == "1,1"
        assert format_pair(Point(6, 10)) == "7,11"


class TestBoard:
    def test_place_and_get(self):
        b = Board()
        p = Point(3, 4)
        b.place(p, Player.BLACK)
        assert b.get(p) is Player.BLACK
        assert not b.is_empty(p)

    def test_remove(self):
        b = Board()
        p = Point(3, 4)
        b.place(p, Player.BLACK)
        b.remove(p)
        assert b.is_empty(p)

    def test_is_on_grid(self):
        b = Board()
        assert b.is_on_grid(Point(0, 0))
        assert b.is_on_grid(Point(14, 14))
        assert not b.is_on_grid(Point(-1, 0))
        assert not b.is_on_grid(Point(0, 15))

    def test_custom_size(self):
        b = Board(7)
        assert b.size == 7
        assert len(b.empty_points()) == 49

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Board(0)

    def test_key_depends_on_contents_only(self):
        a, b = Board(), Board()
        a.place(Point(1, 1), Player.BLACK)
        a.place(Point(2, 2), Player.WHITE)
        b.place(Point(2, 2), Player.WHITE)
        b.place(Point(1, 1), Player.BLACK)
        assert a.key() == b.key()
        b.remove(Point(2, 2))
        assert a.key() != b.key()

    def test_copy_is_independent(self):
        a = Board()
        a.place(Point(1, 1), Player.BLACK)
        b = a.copy()
        b.place(Point(2, 2), Player.WHITE)
        assert a.is_empty(Point(2, 2))
        assert b.get(Point(1, 1)) is Player.BLACK

    def test_str(self):
        b = Board(3)
        b.place(Point(0, 0), Player.BLACK)
        b.place(Point(1, 1), Player.WHITE)
        assert str(b) == "X..\n.O.\n..."


class TestGomokuGameState:
    def test_initial_state(self):
        g = GomokuGameState()
        assert g.current_player is Player.BLACK
        assert not g.is_over
        assert g.winner is None
        assert len(g.legal_moves()) == BOARD_SIZE * BOARD_SIZE

    def test_alternating_turns(self):
        g = GomokuGameState()
        assert g.apply_move(Point(5, 5)) is Outcome.CONTINUE
        assert g.current_player is Player.WHITE
        g.apply_move(Point(5, 6))
        assert g.current_player is Player.BLACK

    def test_horizontal_win(self):
        g = GomokuGameState()
        # Black: row 0, cols 0-4. White: row 1, cols 0-3.
        for i in range(4):
            g.apply_move(Point(0, i))  # Black
            g.apply_move(Point(1, i))  # White
        assert g.apply_move(Point(0, 4)) is Outcome.WIN
        assert g.is_over
        assert g.winner is Player.BLACK
        # Turn is not handed over after the winning stone
        assert g.current_player is Player.BLACK

    def test_vertical_win(self):
        g = GomokuGameState()
        for i in range(4):
            g.apply_move(Point(i, 0))
            g.apply_move(Point(i, 1))
        assert g.apply_move(Point(4, 0)) is Outcome.WIN

    def test_diagonal_win(self):
        g = GomokuGameState()
        for i in range(4):
            g.apply_move(Point(i, i))
            g.apply_move(Point(i, i + 1))
        assert g.apply_move(Point(4, 4)) is Outcome.WIN

    def test_anti_diagonal_win(self):
        g = GomokuGameState()
        for i in range(4):
            g.apply_move(Point(i, 8 - i))
            g.apply_move(Point(i, 0))
        assert g.apply_move(Point(4, 4)) is Outcome.WIN

    def test_win_completed_in_the_middle(self):
        g = GomokuGameState()
        black = [Point(7, 7), Point(7, 8), Point(7, 10), Point(7, 11)]
        white = [Point(0, 0), Point(0, 2), Point(0, 4), Point(0, 6)]
        for b, w in zip(black, white):
            g.apply_move(b)
            g.apply_move(w)
        assert g.apply_move(Point(7, 9)) is Outcome.WIN
        assert g.winner is Player.BLACK

    def test_white_can_win(self):
        g = GomokuGameState()
        g.apply_move(Point(10, 10))
        for i in range(4):
            g.apply_move(Point(0, i))  # White
            g.apply_move(Point(14, i * 2))  # Black, scattered
        assert g.apply_move(Point(0, 4)) is Outcome.WIN
        assert g.winner is Player.WHITE

    def test_four_is_not_a_win(self):
        g = GomokuGameState()
        for i in range(3):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        assert g.apply_move(Point(0, 3)) is Outcome.CONTINUE
        assert not g.is_over

    def test_draw_on_full_board(self):
        g = GomokuGameState()
        black, white = draw_fill_points()
        assert len(black) == len(white) + 1
        for b, w in zip(black, white):
            assert g.apply_move(b) is Outcome.CONTINUE
            assert g.apply_move(w) is Outcome.CONTINUE
        assert g.apply_move(black[-1]) is Outcome.DRAW
        assert g.is_over
        assert g.is_draw
        assert g.winner is None
        assert g.is_full()
        assert not g.is_win()
        assert not g.is_win(player=Player.WHITE)

    def test_is_full_does_not_mutate(self):
        g = GomokuGameState()
        g.apply_move(Point(7, 7))
        before = (g.board.key(), g.current_player, len(g.moves))
        assert not g.is_full()
        assert not g.is_full()
        assert (g.board.key(), g.current_player, len(g.moves)) == before

    def test_occupied_move_rejected(self):
        g = GomokuGameState()
        g.apply_move(Point(5, 5))
        with pytest.raises(IllegalMoveError):
            g.apply_move(Point(5, 5))
        assert g.current_player is Player.WHITE

    def test_off_grid_move_rejected(self):
        g = GomokuGameState()
        with pytest.raises(IllegalMoveError):
            g.apply_move(Point(15, 0))
        with pytest.raises(IllegalMoveError):
            g.apply_move(Point(0, -1))

    def test_move_after_game_over_rejected(self):
        g = GomokuGameState()
        for i in range(4):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        g.apply_move(Point(0, 4))
        assert g.legal_moves() == []
        with pytest.raises(GameOverError):
            g.apply_move(Point(5, 5))

    def test_undo(self):
        g = GomokuGameState()
        g.apply_move(Point(5, 5))
        g.apply_move(Point(5, 6))
        undone = g.undo_move()
        assert undone.point == Point(5, 6)
        assert g.current_player is Player.WHITE
        assert g.board.is_empty(Point(5, 6))

    def test_undo_empty(self):
        assert GomokuGameState().undo_move() is None

    def test_undo_clears_win(self):
        g = GomokuGameState()
        for i in range(4):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        g.apply_move(Point(0, 4))
        g.undo_move()
        assert not g.is_over
        assert g.winner is None
        assert g.current_player is Player.BLACK

    def test_trial_move_restores_state(self):
        g = GomokuGameState()
        g.apply_move(Point(7, 7))
        before = (g.board.key(), g.current_player, len(g.moves))
        with g.trial_move(Point(7, 8)) as outcome:
            assert outcome is Outcome.CONTINUE
            assert g.board.get(Point(7, 8)) is Player.WHITE
        assert (g.board.key(), g.current_player, len(g.moves)) == before

    def test_trial_move_restores_after_exception(self):
        g = GomokuGameState()
        with pytest.raises(RuntimeError):
            with g.trial_move(Point(3, 3)):
                raise RuntimeError("boom")
        assert g.board.occupied_count == 0

    def test_resign(self):
        g = GomokuGameState()
        g.apply_move(Point(7, 7))
        g.resign()  # White concedes
        assert g.is_over
        assert g.winner is Player.BLACK
        with pytest.raises(GameOverError):
            g.resign()

    def test_copy_is_independent(self):
        g = GomokuGameState()
        g.apply_move(Point(7, 7))
        clone = g.copy()
        clone.apply_move(Point(7, 8))
        assert len(g.moves) == 1
        assert g.current_player is Player.WHITE
        assert g.board.is_empty(Point(7, 8))

    def test_copied_move_history_cannot_be_altered(self):
        g = GomokuGameState()
        g.apply_move(Point(7, 7), elapsed=0.5)
        clone = g.copy()
        with pytest.raises(dataclasses.FrozenInstanceError):
            clone.moves[0].elapsed = 9.0
        assert g.moves[0].elapsed == 0.5


class TestIsWin:
    def test_empty_board(self):
        g = GomokuGameState()
        assert not g.is_win()
        assert not g.is_win(7, 7)
        assert not g.is_win(player=Player.WHITE)

    @pytest.mark.parametrize("dr,dc", [(0, 1), (1, 0), (1, 1), (1, -1)])
    def test_five_on_every_axis(self, dr, dc):
        g = GomokuGameState()
        for i in range(5):
            g.board.place(Point(7 + dr * i, 5 + dc * i), Player.BLACK)
        assert g.is_win(player=Player.BLACK)
        assert g.is_win(7, 5)
        assert not g.is_win(player=Player.WHITE)

    def test_sentinel_defaults_to_player_to_move(self):
        g = GomokuGameState()
        for i in range(5):
            g.board.place(Point(2, i), Player.WHITE)
        assert g.current_player is Player.BLACK
        assert not g.is_win()
        g.current_player = Player.WHITE
        assert g.is_win()

    def test_hypothetical_stone(self):
        g = GomokuGameState()
        for i in range(4):
            g.board.place(Point(3, i), Player.BLACK)
        # (3, 4) is empty: asking for Black there answers "would it win"
        assert g.is_win(3, 4, Player.BLACK)
        assert not g.is_win(3, 4, Player.WHITE)
        assert not g.is_win(3, 4)
        assert g.board.is_empty(Point(3, 4))

    def test_does_not_mutate(self):
        g = GomokuGameState()
        for i in range(5):
            g.board.place(Point(0, i), Player.BLACK)
        before = (g.board.key(), g.current_player, g.is_over)
        g.is_win(player=Player.BLACK)
        assert (g.board.key(), g.current_player, g.is_over) == before
