"""SVG board renderer + JavaScript click handler for Gradio."""

from __future__ import annotations

from typing import Optional

from gomoku_ai.game.board import COL_LABELS, GomokuGameState, format_point
from gomoku_ai.game.types import Player, Point

# Layout constants
CELL_SIZE = 40
MARGIN = 40
STONE_RADIUS = 16
CLICK_RADIUS = 18  # Invisible click target radius
EVAL_BAR_HEIGHT = 28

# Colors
BG_COLOR = "#DCB35C"
LINE_COLOR = "#4A3728"
BLACK_STONE = "#1A1A1A"
WHITE_STONE = "#F5F5F5"
WHITE_STROKE = "#888"
BANNER_BG = "rgba(0, 0, 0, 0.65)"
WIN_COLOR = "#4ADE80"
LOSS_COLOR = "#F87171"
DRAW_COLOR = "#FFFFFF"


def board_px(size: int) -> int:
    return MARGIN * 2 + CELL_SIZE * (size - 1)


def _coord(point: Point) -> tuple[int, int]:
    """Convert a 0-indexed Point (row 0 at the top) to SVG pixel coordinates."""
    return MARGIN + point.col * CELL_SIZE, MARGIN + point.row * CELL_SIZE


def _banner_color(message: str) -> str:
    if message.startswith("Draw"):
        return DRAW_COLOR
    if "AI wins" in message:
        return LOSS_COLOR
    return WIN_COLOR


def _label(x: int, y: int, text: str) -> str:
    return (
        f'<text x="{x}" y="{y}" text-anchor="middle" '
        f'font-size="13" font-family="monospace" fill="{LINE_COLOR}">{text}</text>'
    )


def render_board_svg(
    game_state: GomokuGameState,
    clickable: bool = True,
    highlight_last: bool = True,
    game_over_message: str = "",
    eval_score: Optional[int] = None,
) -> str:
    """Render the board as an SVG string.

    `eval_score` (Black's point of view) is shown as a caption under the
    board; `game_over_message` as a banner across it.
    """
    size = game_state.size
    px = board_px(size)
    height = px + (EVAL_BAR_HEIGHT if eval_score is not None else 0)
    parts: list[str] = []

    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{px}" height="{height}" '
        f'viewBox="0 0 {px} {height}" '
        f'id="gomoku-board">'
    )
    parts.append(f'<rect width="{px}" height="{px}" fill="{BG_COLOR}" rx="4"/>')

    # Grid lines
    far = MARGIN + (size - 1) * CELL_SIZE
    for i in range(size):
        pos = MARGIN + i * CELL_SIZE
        parts.append(
            f'<line x1="{pos}" y1="{MARGIN}" x2="{pos}" y2="{far}" '
            f'stroke="{LINE_COLOR}" stroke-width="1"/>'
        )
        parts.append(
            f'<line x1="{MARGIN}" y1="{pos}" x2="{far}" y2="{pos}" '
            f'stroke="{LINE_COLOR}" stroke-width="1"/>'
        )

    # Centre star point
    cx, cy = _coord(Point(size // 2, size // 2))
    parts.append(f'<circle cx="{cx}" cy="{cy}" r="4" fill="{LINE_COLOR}"/>')

    # Column labels (top and bottom), row labels (left and right)
    for i in range(size):
        x, y = _coord(Point(i, i))
        parts.append(_label(x, MARGIN - 15, COL_LABELS[i]))
        parts.append(_label(x, px - 10, COL_LABELS[i]))
        parts.append(_label(MARGIN - 22, y + 5, str(i + 1)))
        parts.append(_label(px - MARGIN + 22, y + 5, str(i + 1)))

    # Stones
    last_point: Optional[Point] = None
    if game_state.moves:
        last_point = game_state.moves[-1].point

    for pt, player in sorted(game_state.board.stones()):
        x, y = _coord(pt)
        fill = BLACK_STONE if player is Player.BLACK else WHITE_STONE
        stroke = "none" if player is Player.BLACK else WHITE_STROKE
        parts.append(
            f'<circle cx="{x}" cy="{y}" r="{STONE_RADIUS}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="1.5"/>'
        )
        if highlight_last and pt == last_point:
            marker_color = WHITE_STONE if player is Player.BLACK else BLACK_STONE
            parts.append(
                f'<circle cx="{x}" cy="{y}" r="5" '
                f'fill="{marker_color}" opacity="0.7"/>'
            )

    # Clickable intersection targets (invisible circles)
    if clickable and not game_state.is_over:
        for pt in game_state.board.empty_points():
            x, y = _coord(pt)
            coord_str = format_point(pt)
            parts.append(
                f'<circle cx="{x}" cy="{y}" r="{CLICK_RADIUS}" '
                f'fill="transparent" class="board-click" '
                f'data-coord="{coord_str}" style="cursor:pointer">'
                f'<title>{coord_str}</title></circle>'
            )

    if eval_score is not None:
        parts.append(
            f'<text x="{px // 2}" y="{px + EVAL_BAR_HEIGHT // 2 + 4}" '
            f'text-anchor="middle" font-size="13" font-family="monospace" '
            f'fill="{LINE_COLOR}">Evaluation (Black): {eval_score:+d}</text>'
        )

    if game_over_message:
        color = _banner_color(game_over_message)
        band_y = px // 2 - 30
        parts.append(
            f'<rect x="0" y="{band_y}" width="{px}" height="60" fill="{BANNER_BG}"/>'
        )
        parts.append(
            f'<text x="{px // 2}" y="{band_y + 40}" text-anchor="middle" '
            f'font-size="30" font-weight="bold" font-family="sans-serif" '
            f'fill="{color}">{game_over_message}</text>'
        )

    parts.append("</svg>")
    # gr.HTML re-renders drop listeners bound on page load, so rebind inline
    parts.append(f"<script>({BOARD_CLICK_JS})()</script>")
    return "\n".join(parts)


# JavaScript that handles clicks on the SVG and writes the coordinate to
# a hidden Gradio Textbox, then triggers its submit button.
BOARD_CLICK_JS = """
() => {
    // Debounce to avoid double-fire
    if (window._gomokuClickBound) return;
    window._gomokuClickBound = true;

    document.addEventListener('click', function(e) {
        const circle = e.target.closest('.board-click');
        if (!circle) return;
        const coord = circle.getAttribute('data-coord');
        if (!coord) return;

        const container = document.querySelector('#coord-input textarea, #coord-input input');
        if (container) {
            // Set value using native setter to trigger Gradio's change detection
            const nativeSetter = Object.getOwnPropertyDescriptor(
                window.HTMLInputElement.prototype, 'value'
            )?.set || Object.getOwnPropertyDescriptor(
                window.HTMLTextAreaElement.prototype, 'value'
            )?.set;
            if (nativeSetter) {
                nativeSetter.call(container, coord);
            } else {
                container.value = coord;
            }
            container.dispatchEvent(new Event('input', { bubbles: true }));
            const btn = document.querySelector('#coord-submit');
            if (btn) btn.click();
        }
    });
}
"""
