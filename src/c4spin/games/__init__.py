"""Board games playable by the self-play trainer."""

from .board import (
    Board,
    Move,
    Player,
    board_to_string,
    column_label,
    empty_board,
)
from .base import DEFAULT_REWARD_SCALE, BoardGame
from .connect4spin import ConnectFourSpin
from .registry import GAME_INFO, GAME_REGISTRY, create_game, get_game_info, list_games

__all__ = [
    # Board model
    "Board",
    "Move",
    "Player",
    "board_to_string",
    "column_label",
    "empty_board",
    # Game contract
    "BoardGame",
    "DEFAULT_REWARD_SCALE",
    # Variants
    "ConnectFourSpin",
    # Registry
    "GAME_REGISTRY",
    "GAME_INFO",
    "create_game",
    "get_game_info",
    "list_games",
]
