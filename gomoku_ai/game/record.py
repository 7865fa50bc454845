"""Save and load game records as JSON files."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .board import GomokuGameState, format_point, parse_coordinate

SAVED_GAMES_DIR = Path(__file__).resolve().parents[2] / "saved_games"


def _result_text(game: GomokuGameState) -> str:
    if not game.is_over:
        return "In progress"
    if game.winner is not None:
        return f"{game.winner} wins"
    return "Draw"


def save_game(
    game: GomokuGameState,
    black_name: str,
    white_name: str,
    result: str = "",
    directory: Optional[Union[str, Path]] = None,
) -> str:
    """Save a game to a JSON file. Returns the filename."""
    directory = Path(directory) if directory is not None else SAVED_GAMES_DIR
    directory.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"{timestamp}_{black_name}_vs_{white_name}.json"
    # Sanitize filename
    filename = filename.replace(" ", "_").replace("(", "").replace(")", "")

    record = {
        "date": datetime.now().isoformat(),
        "black": black_name,
        "white": white_name,
        "size": game.size,
        "result": result or _result_text(game),
        "moves": [format_point(m.point) for m in game.moves],
    }

    with open(directory / filename, "w") as f:
        json.dump(record, f, indent=2)

    return filename


def load_game(filename: str, directory: Optional[Union[str, Path]] = None) -> dict:
    """Load a game record from a JSON file. Returns the parsed dict."""
    directory = Path(directory) if directory is not None else SAVED_GAMES_DIR
    with open(directory / filename) as f:
        return json.load(f)


def replay(record: dict) -> GomokuGameState:
    """Rebuild the final position of a loaded record."""
    size = record.get("size", 15)
    game = GomokuGameState(size)
    for text in record.get("moves", []):
        point = parse_coordinate(text, size)
        if point is None:
            raise ValueError(f"Bad coordinate in record: {text!r}")
        game.apply_move(point)
    return game
