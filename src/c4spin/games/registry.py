"""
Game registry.

Creates games by name so configuration files and the CLI can pick a
variant without importing it.
"""

from .base import BoardGame
from .connect4spin import ConnectFourSpin

GAME_REGISTRY: dict[str, type[BoardGame]] = {
    ConnectFourSpin.name: ConnectFourSpin,
}

GAME_INFO: dict[str, dict] = {
    ConnectFourSpin.name: {
        "description": "Free placement four-in-a-row; played column may flip after each move",
        "default_size": "5x8",
    },
}


def create_game(name: str, **kwargs) -> BoardGame:
    """
    Create a game by name.

    Args:
        name: Game name (e.g., "connect-4-spin")
        **kwargs: Passed to the game constructor (columns, rows, seed, ...)

    Raises:
        ValueError: If the game name is not recognized
    """
    if name not in GAME_REGISTRY:
        available = ", ".join(list_games())
        raise ValueError(f"Unknown game: {name}. Available games: {available}")

    return GAME_REGISTRY[name](**kwargs)


def list_games() -> list[str]:
    """Sorted list of registered game names."""
    return sorted(GAME_REGISTRY.keys())


def get_game_info(name: str) -> dict:
    """Description of a registered game."""
    if name not in GAME_INFO:
        available = ", ".join(list_games())
        raise ValueError(f"Unknown game: {name}. Available games: {available}")

    return GAME_INFO[name].copy()
