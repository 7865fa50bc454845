"""Gomoku AI: Gradio web app entry point."""

import logging

import gradio as gr

from gomoku_ai.ui.arena_tab import build_arena_tab
from gomoku_ai.ui.board_component import BOARD_CLICK_JS
from gomoku_ai.ui.play_tab import build_play_tab

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

with gr.Blocks(title="Gomoku AI") as demo:
    gr.Markdown("# Gomoku AI")
    gr.Markdown(
        "15x15 board, 5 in a row to win. Opponents: heuristic, minimax, "
        "alpha-beta with iterative deepening, and Monte Carlo Tree Search."
    )

    with gr.Tab("Play"):
        build_play_tab()

    with gr.Tab("Arena"):
        build_arena_tab()

    # Bind board click handler JS on page load
    demo.load(fn=None, js=BOARD_CLICK_JS)

if __name__ == "__main__":
    demo.launch(theme=gr.themes.Soft())
