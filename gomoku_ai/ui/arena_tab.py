"""Arena tab: AI vs AI with live board updates, plus multi-game tournaments."""

from __future__ import annotations

import time
from typing import Generator

import gradio as gr

from gomoku_ai.agent import strategy
from gomoku_ai.agent.heuristics import ALPHA_BETA_PROFILE, evaluate_board
from gomoku_ai.agent.strategy import LEVEL_LABELS, StrategyLevel
from gomoku_ai.agent.tournament import (
    format_tournament_log,
    run_tournament,
    write_tournament_log,
)
from gomoku_ai.game.board import BOARD_SIZE, GomokuGameState, format_point
from gomoku_ai.game.record import save_game
from gomoku_ai.game.types import Player
from gomoku_ai.ui.board_component import render_board_svg

ARENA_LEVELS: dict[str, StrategyLevel] = {label: level for level, label in LEVEL_LABELS.items()}

MOVE_DELAY = 0.4  # seconds between moves
RESULTS_DIR = "tournament_results"


def _render_arena_board(game: GomokuGameState, result_msg: str = "") -> str:
    eval_score = None
    if game.moves:
        eval_score = evaluate_board(game.board, Player.BLACK, ALPHA_BETA_PROFILE)
    return render_board_svg(game, clickable=False, game_over_message=result_msg, eval_score=eval_score)


def _result_message(game: GomokuGameState) -> str:
    if not game.is_over:
        return ""
    if game.winner is Player.BLACK:
        return "Black wins!"
    elif game.winner is Player.WHITE:
        return "White wins!"
    return "Draw!"


def _move_table(game: GomokuGameState) -> list[list[str]]:
    rows: list[list[str]] = []
    for i, move in enumerate(game.moves):
        t = f"{move.elapsed:.2f}" if move.elapsed is not None else "-"
        rows.append([str(i + 1), str(move.player), format_point(move.point), t])
    return rows


def _run_arena(
    black_name: str,
    white_name: str,
    delay: float,
    arena_state: dict,
) -> Generator:
    """Generator that yields board updates after each move."""
    levels = {Player.BLACK: ARENA_LEVELS[black_name], Player.WHITE: ARENA_LEVELS[white_name]}
    names = {Player.BLACK: black_name, Player.WHITE: white_name}
    game = GomokuGameState()

    arena_state["game"] = game
    arena_state["black_name"] = black_name
    arena_state["white_name"] = white_name

    yield (
        _render_arena_board(game),
        f"Game started: {black_name} (Black) vs {white_name} (White)",
        _move_table(game),
        arena_state,
    )

    while not game.is_over:
        mover = game.current_player
        t0 = time.time()
        move = strategy.select_move(game, levels[mover])
        strategy.apply_move(game, move, elapsed=time.time() - t0)

        result = _result_message(game)
        if result:
            status = f"Game over: {result} ({len(game.moves)} moves)"
        else:
            status = (
                f"Move {len(game.moves)}: {names[mover]} played {format_point(move)}, "
                f"{names[game.current_player]}'s turn"
            )

        yield (
            _render_arena_board(game, result),
            status,
            _move_table(game),
            arena_state,
        )

        if not game.is_over:
            time.sleep(delay)


def _save_arena_game(arena_state: dict) -> str:
    """Save the most recent arena game."""
    game = arena_state.get("game")
    if game is None or not game.moves:
        return "No game to save. Run a match first."
    filename = save_game(
        game,
        arena_state.get("black_name", "Black"),
        arena_state.get("white_name", "White"),
    )
    return f"Saved: {filename}"


# ---------------------------------------------------------------------------
# Tournament
# ---------------------------------------------------------------------------

def _run_tournament(black_name: str, white_name: str, games: float, size: float) -> Generator:
    """Play the games, write the log file and show its contents."""
    games, size = int(games), int(size)
    yield f"Running {games} game(s): {black_name} (X) vs {white_name} (O) on {size}x{size}..."

    tournament = run_tournament(
        ARENA_LEVELS[black_name],
        ARENA_LEVELS[white_name],
        games,
        size=size,
    )
    path = write_tournament_log(tournament, RESULTS_DIR)
    yield f"Log written to {path}\n\n{format_tournament_log(tournament)}"


def build_arena_tab() -> None:
    """Construct the Arena tab UI inside a gr.Blocks context."""

    arena_state = gr.State({})

    with gr.Row():
        with gr.Column(scale=3):
            board_html = gr.HTML(
                value=_render_arena_board(GomokuGameState()),
                label="Board",
            )
        with gr.Column(scale=1):
            status_text = gr.Textbox(
                value="Select two strategies and click Start.",
                label="Status",
                interactive=False,
                lines=2,
            )

            gr.Markdown("### Setup")
            black_choice = gr.Dropdown(
                choices=list(ARENA_LEVELS.keys()),
                value=StrategyLevel.ALPHA_BETA.label,
                label="Black",
            )
            white_choice = gr.Dropdown(
                choices=list(ARENA_LEVELS.keys()),
                value=StrategyLevel.HEURISTIC.label,
                label="White",
            )
            delay_slider = gr.Slider(
                minimum=0.1,
                maximum=2.0,
                value=MOVE_DELAY,
                step=0.1,
                label="Delay between moves (sec)",
            )
            start_btn = gr.Button("Start", variant="primary")
            save_btn = gr.Button("Save Game")
            save_status = gr.Textbox(label="Save", interactive=False, lines=1)

            gr.Markdown("### Move History")
            move_table = gr.Dataframe(
                headers=["#", "Player", "Move", "Time (s)"],
                datatype=["number", "str", "str", "str"],
                interactive=False,
                column_count=4,
            )

    gr.Markdown("---")
    gr.Markdown("### Tournament")
    gr.Markdown("Black and White above play a series of games; the log is saved to a text file.")
    with gr.Row():
        games_input = gr.Number(value=2, minimum=1, maximum=50, precision=0, label="Games")
        size_input = gr.Number(value=BOARD_SIZE, minimum=5, maximum=19, precision=0, label="Board size")
    tournament_btn = gr.Button("Run Tournament", variant="primary")
    tournament_log = gr.Textbox(
        value="Click 'Run Tournament' to start.",
        label="Tournament Log",
        interactive=False,
        lines=16,
    )

    start_btn.click(
        fn=_run_arena,
        inputs=[black_choice, white_choice, delay_slider, arena_state],
        outputs=[board_html, status_text, move_table, arena_state],
    )

    save_btn.click(
        fn=_save_arena_game,
        inputs=[arena_state],
        outputs=[save_status],
    )

    tournament_btn.click(
        fn=_run_tournament,
        inputs=[black_choice, white_choice, games_input, size_input],
        outputs=[tournament_log],
    )
