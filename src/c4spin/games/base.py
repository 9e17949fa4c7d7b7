"""
Base class for two-player board games.

Any game the self-play trainer drives implements this interface. The
trainer and the self-play worker only talk to games through it.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..errors import OutOfBoundsError, SpaceOccupiedError
from .board import Board, Move, Player, board_to_string, empty_board

DEFAULT_REWARD_SCALE = 20.0


class BoardGame(ABC):
    """
    Abstract base class for games played on a columns x rows grid.

    Subclasses supply the variant rules through _after_move() and
    check_winner(); move validation, turn keeping and reward shaping are
    shared.
    """

    # Registry key for the game
    name: str = "base"

    def __init__(self, columns: int, rows: int, reward_scale: float = DEFAULT_REWARD_SCALE):
        """
        Initialize an empty game with player one to move.

        Args:
            columns: Board width.
            rows: Board height.
            reward_scale: Target value K; a move in a game of n turns is
                reinforced with K / n.
        """
        if columns < 1 or rows < 1:
            raise ValueError(f"Board dimensions must be positive, got {columns}x{rows}")
        if reward_scale <= 0:
            raise ValueError(f"reward_scale must be positive, got {reward_scale}")

        self.columns = columns
        self.rows = rows
        self.reward_scale = reward_scale
        self.board: Board = empty_board(columns, rows)
        self.turn: Player = Player.ONE

    @property
    def space_count(self) -> int:
        return self.columns * self.rows

    def reset(self) -> None:
        """Resets the game to its freshly constructed state."""
        self.board = empty_board(self.columns, self.rows)
        self.turn = Player.ONE

    def is_move_oob(self, move: Move) -> bool:
        """
        Returns True if the move does not address a space on this board.

        Each coordinate is checked on its own, not just the linear index, so
        Move(columns, 0) is out of bounds rather than wrapping to Move(0, 1).
        """
        return not (0 <= move.x < self.columns and 0 <= move.y < self.rows)

    @staticmethod
    def is_space_empty(space: Player) -> bool:
        return space is Player.EMPTY

    def get_turn(self) -> Player:
        return self.turn

    def get_board(self) -> Board:
        """Returns a copy of the board that later moves will not touch."""
        return list(self.board)

    def empty_indices(self) -> list[int]:
        """Linear indices of all empty spaces, ascending."""
        return [i for i, space in enumerate(self.board) if self.is_space_empty(space)]

    def play(self, move: Move) -> Player | None:
        """
        Plays a move for the current player.

        Args:
            move: Coordinate to claim.

        Returns:
            None if the game continues, the winning Player, or Player.EMPTY
            for a tie.

        Raises:
            OutOfBoundsError: If the move is off the board.
            SpaceOccupiedError: If the space already belongs to a player.
        """
        if self.is_move_oob(move):
            raise OutOfBoundsError(
                f"{move} is out of bounds",
                context={"columns": self.columns, "rows": self.rows},
            )

        index = move.to_linear(self.columns)
        occupant = self.board[index]
        if not self.is_space_empty(occupant):
            raise SpaceOccupiedError(
                f"{move} already belongs to player {occupant.value}",
            )

        self.board[index] = self.turn
        self.turn = self.turn.flip()
        self._after_move(move)
        return self.check_winner()

    def _after_move(self, move: Move) -> None:
        """Hook applied after the turn flips and before the result check."""
        pass

    @abstractmethod
    def check_winner(self) -> Player | None:
        """
        Evaluates the current board.

        Returns:
            The winning Player, Player.EMPTY for a tie, or None if the game
            continues.
        """
        pass

    def reward_for(self, move: Move, turn_count: int) -> np.ndarray:
        """
        Builds the training target for a move.

        All zeros except reward_scale / turn_count at the move's index, so
        moves from short games are reinforced harder than moves from long
        ones.
        """
        if turn_count <= 0:
            raise ValueError(f"turn_count must be positive, got {turn_count}")

        target = np.zeros(self.space_count, dtype=np.float32)
        target[move.to_linear(self.columns)] = self.reward_scale / turn_count
        return target

    def __str__(self) -> str:
        return board_to_string(self.board, self.columns, self.rows)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(columns={self.columns}, rows={self.rows})"
