"""Play tab: Human vs AI with interactive SVG board."""

from __future__ import annotations

import logging
import random as _random
import time as _time
from dataclasses import dataclass, field
from typing import Optional

import gradio as gr

from gomoku_ai.agent import strategy
from gomoku_ai.agent.heuristics import ALPHA_BETA_PROFILE, evaluate_board
from gomoku_ai.agent.strategy import LEVEL_LABELS, StrategyLevel
from gomoku_ai.game.board import (
    BOARD_SIZE,
    GameOverError,
    GomokuGameState,
    IllegalMoveError,
    format_point,
    parse_coordinate,
)
from gomoku_ai.game.record import load_game, replay, save_game
from gomoku_ai.game.types import Player
from gomoku_ai.ui.board_component import render_board_svg

logger = logging.getLogger(__name__)

LEVEL_CHOICES: dict[str, StrategyLevel] = {label: level for level, label in LEVEL_LABELS.items()}


@dataclass
class GameSession:
    """Per-tab game state held in gr.State."""

    game: GomokuGameState = field(default_factory=GomokuGameState)
    level: StrategyLevel = StrategyLevel.ALPHA_BETA
    human_player: Player = field(default=Player.BLACK)
    _turn_start: float = field(default_factory=_time.time)

    def reset(self, human_player: Optional[Player] = None, size: int = BOARD_SIZE) -> None:
        self.game = GomokuGameState(size)
        self._turn_start = _time.time()
        if human_player is not None:
            self.human_player = human_player

    def mark_turn_start(self) -> None:
        """Record the moment the current player's clock starts."""
        self._turn_start = _time.time()

    def elapsed_since_turn_start(self) -> float:
        return _time.time() - self._turn_start

    def play_ai_move(self) -> None:
        t0 = _time.time()
        point = strategy.select_move(self.game, self.level)
        strategy.apply_move(self.game, point, elapsed=_time.time() - t0)
        logger.info("%s played %s", self.level.label, format_point(point))
        self.mark_turn_start()  # human's clock starts now

    @property
    def game_over_banner(self) -> str:
        """Short text for the SVG overlay banner. Empty if game is not over."""
        g = self.game
        if not g.is_over:
            return ""
        if g.winner is not None:
            if g.winner == self.human_player:
                return "You win!"
            return "AI wins!"
        return "Draw!"

    @property
    def status_text(self) -> str:
        g = self.game
        if g.is_over:
            if g.winner is not None:
                who = "You win!" if g.winner == self.human_player else "AI wins!"
                return f"Game over: {who} ({g.winner} by 5-in-a-row)"
            return "Game over: Draw!"
        if g.current_player == self.human_player:
            return f"Your turn ({g.current_player})"
        return f"AI is thinking... ({g.current_player})"

    @property
    def move_history_table(self) -> list[list[str]]:
        rows: list[list[str]] = []
        for i, move in enumerate(self.game.moves):
            t = f"{move.elapsed:.2f}" if move.elapsed is not None else "-"
            rows.append([str(i + 1), str(move.player), format_point(move.point), t])
        return rows


def _make_board_html(session: GameSession) -> str:
    clickable = (
        not session.game.is_over
        and session.game.current_player == session.human_player
    )
    eval_score = None
    if session.game.moves:
        eval_score = evaluate_board(session.game.board, Player.BLACK, ALPHA_BETA_PROFILE)
    return render_board_svg(
        session.game,
        clickable=clickable,
        game_over_message=session.game_over_banner,
        eval_score=eval_score,
    )


def _board_outputs(session: GameSession, status: Optional[str] = None) -> tuple:
    return (
        _make_board_html(session),
        status if status is not None else session.status_text,
        session.move_history_table,
        session,
    )


def _apply_human_move(coord_text: str, session: GameSession):
    """Process a human move, then let the AI respond."""
    if session.game.is_over:
        return _board_outputs(session) + ("",)

    if session.game.current_player != session.human_player:
        return _board_outputs(session, "Wait, it's the AI's turn.") + ("",)

    point = parse_coordinate(coord_text, session.game.size)
    if point is None:
        return _board_outputs(
            session, f"Invalid coordinate: '{coord_text}'. Use format like H8."
        ) + ("",)

    try:
        strategy.apply_move(session.game, point, elapsed=session.elapsed_since_turn_start())
    except IllegalMoveError:
        return _board_outputs(session, f"{format_point(point)} is already occupied.") + ("",)

    if not session.game.is_over:
        session.play_ai_move()

    return _board_outputs(session) + ("",)


def _new_game_with_color(color_choice: str, level_choice: str, session: GameSession):
    """Start a new game. color_choice is 'Black', 'White', or 'Random'."""
    if color_choice == "Random":
        human = _random.choice([Player.BLACK, Player.WHITE])
    elif color_choice == "White":
        human = Player.WHITE
    else:
        human = Player.BLACK

    session.level = LEVEL_CHOICES[level_choice]
    session.reset(human_player=human)

    # AI (Black) opens when the human plays White
    if human is Player.WHITE:
        session.play_ai_move()

    assigned = "Black" if human is Player.BLACK else "White"
    return _board_outputs(session) + (f"You are {assigned}.",)


def _undo_move(session: GameSession):
    """Undo the last move pair (AI + human)."""
    if not session.game.moves:
        return _board_outputs(session, "Nothing to undo.")

    # If the last move was AI's, undo both AI and human
    last = session.game.moves[-1]
    if last.player != session.human_player:
        session.game.undo_move()
    if session.game.moves and session.game.moves[-1].player == session.human_player:
        session.game.undo_move()
    session.mark_turn_start()

    return _board_outputs(session)


def _resign(session: GameSession):
    if session.game.is_over:
        return _board_outputs(session)
    if session.game.current_player != session.human_player:
        return _board_outputs(session, "Wait, it's the AI's turn.")
    session.game.resign()
    return _board_outputs(session)


def _save_game(session: GameSession) -> str:
    """Save the current game to disk."""
    if not session.game.moves:
        return "No moves to save."
    ai_name = session.level.label
    if session.human_player is Player.BLACK:
        black_name, white_name = "Human_Black", ai_name
    else:
        black_name, white_name = ai_name, "Human_White"
    filename = save_game(session.game, black_name, white_name)
    return f"Saved: {filename}"


def _load_game(filename: str, session: GameSession):
    """Resume a saved game. The human takes the side to move."""
    filename = filename.strip()
    if not filename:
        return _board_outputs(session) + ("Enter a saved game filename.",)
    try:
        game = replay(load_game(filename))
    except (OSError, ValueError, GameOverError) as e:
        logger.warning("Could not load %s: %s", filename, e)
        return _board_outputs(session) + (f"Could not load {filename}: {e}",)

    session.game = game
    session.human_player = game.current_player
    session.mark_turn_start()
    return _board_outputs(session) + (f"Loaded: {filename} ({len(game.moves)} moves)",)


def build_play_tab() -> None:
    """Construct the Play tab UI inside a gr.Blocks context."""

    session_state = gr.State(GameSession())

    with gr.Row():
        # Left: board
        with gr.Column(scale=3):
            board_html = gr.HTML(
                value=render_board_svg(GomokuGameState()),
                label="Board",
            )
        # Right: controls
        with gr.Column(scale=1):
            status_text = gr.Textbox(
                value="Your turn (Black)",
                label="Status",
                interactive=False,
                lines=2,
            )
            color_info = gr.Textbox(
                value="You are Black.",
                label="Color",
                interactive=False,
                lines=1,
            )

            gr.Markdown("### New Game")
            color_choice = gr.Radio(
                choices=["Random", "Black", "White"],
                value="Random",
                label="Play as",
            )
            level_choice = gr.Dropdown(
                choices=list(LEVEL_CHOICES.keys()),
                value=StrategyLevel.ALPHA_BETA.label,
                label="Opponent",
            )
            new_game_btn = gr.Button("New Game", variant="primary")

            with gr.Row():
                undo_btn = gr.Button("Undo")
                resign_btn = gr.Button("Resign", variant="stop")
            save_btn = gr.Button("Save Game")
            save_status = gr.Textbox(label="Save", interactive=False, lines=1)
            load_name = gr.Textbox(label="Saved game file", placeholder="20250101_120000_Human_Black_vs_Heuristic.json", lines=1)
            load_btn = gr.Button("Load Game")

            gr.Markdown("### Enter Move")
            coord_input = gr.Textbox(
                label="Coordinate (e.g. H8)",
                placeholder="H8",
                elem_id="coord-input",
                lines=1,
            )
            coord_submit = gr.Button(
                "Submit Move",
                elem_id="coord-submit",
            )

            gr.Markdown("### Move History")
            move_table = gr.Dataframe(
                headers=["#", "Player", "Move", "Time (s)"],
                datatype=["number", "str", "str", "str"],
                interactive=False,
                column_count=4,
            )

    # Outputs shared by most callbacks
    board_outputs = [board_html, status_text, move_table, session_state]

    coord_submit.click(
        fn=_apply_human_move,
        inputs=[coord_input, session_state],
        outputs=board_outputs + [coord_input],
    )

    new_game_btn.click(
        fn=_new_game_with_color,
        inputs=[color_choice, level_choice, session_state],
        outputs=board_outputs + [color_info],
    )

    undo_btn.click(
        fn=_undo_move,
        inputs=[session_state],
        outputs=board_outputs,
    )

    resign_btn.click(
        fn=_resign,
        inputs=[session_state],
        outputs=board_outputs,
    )

    save_btn.click(
        fn=_save_game,
        inputs=[session_state],
        outputs=[save_status],
    )

    load_btn.click(
        fn=_load_game,
        inputs=[load_name, session_state],
        outputs=board_outputs + [save_status],
    )
