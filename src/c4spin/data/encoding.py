"""
Board Encoding for Policy Input

Boards are fed to policies as a flat float32 vector of player codes
(0 = empty, 1 = player one, 2 = player two), one entry per space in
linear-index order.
"""

import numpy as np

from ..games.board import Board


def encode_board(board: Board) -> np.ndarray:
    """
    Encodes a board as player codes.
    Shape: [columns * rows]
    """
    return np.array([space.to_code() for space in board], dtype=np.float32)
