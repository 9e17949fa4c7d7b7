"""
Connect Four Spin

Players claim any empty space (no gravity). After every move a coin is
flipped and, on heads, the column that was just played is turned upside
down before the board is checked for four in a row.
"""

import logging
import random
from typing import Protocol

from .base import DEFAULT_REWARD_SCALE, BoardGame
from .board import Move, Player

logger = logging.getLogger(__name__)

CONNECT = 4

# (dx, dy) in scan order: horizontal, vertical, down-right, up-right
DIRECTIONS = [(1, 0), (0, 1), (1, 1), (1, -1)]


class RandomSource(Protocol):
    """Anything with random.Random's random() method."""

    def random(self) -> float:
        ...


class ConnectFourSpin(BoardGame):
    """
    Connect Four Spin on a columns x rows board (5x8 by default).
    """

    name = "connect-4-spin"

    def __init__(
        self,
        columns: int = 5,
        rows: int = 8,
        rng: RandomSource | None = None,
        seed: int | None = None,
        reward_scale: float = DEFAULT_REWARD_SCALE,
    ):
        """
        Args:
            columns: Board width, at least 4.
            rows: Board height, at least 4.
            rng: Source for the spin coin flip. Defaults to random.Random(seed).
            seed: Seed for the default random source.
            reward_scale: Target value K used by reward_for().
        """
        if columns < CONNECT or rows < CONNECT:
            raise ValueError(
                f"Connect Four Spin needs at least {CONNECT}x{CONNECT}, got {columns}x{rows}"
            )
        super().__init__(columns, rows, reward_scale=reward_scale)
        self.rng = rng if rng is not None else random.Random(seed)

    def _after_move(self, move: Move) -> None:
        if self.rng.random() < 0.5:
            self.spin_column(move.x)
            logger.debug(f"Column {move.x} spun")

    def spin_column(self, x: int) -> None:
        """Reverses column x top to bottom in place."""
        indices = [Move(x, y).to_linear(self.columns) for y in range(self.rows)]
        column = [self.board[i] for i in indices]
        for i, space in zip(indices, reversed(column)):
            self.board[i] = space

    def _line_ranges(self, dx: int, dy: int) -> tuple[range, range]:
        """Start rows and columns for which a line of four in (dx, dy) fits."""
        if dy >= 0:
            rows = range(self.rows - dy * (CONNECT - 1))
        else:
            rows = range(CONNECT - 1, self.rows)
        columns = range(self.columns - dx * (CONNECT - 1))
        return rows, columns

    def find_line(self, player: Player) -> list[Move] | None:
        """
        Finds the first four-in-a-row for a player.

        Orientations are scanned horizontal, vertical, down-right, up-right;
        start cells row by row. Returns the four coordinates or None.
        """
        for dx, dy in DIRECTIONS:
            rows, columns = self._line_ranges(dx, dy)
            for y in rows:
                for x in columns:
                    line = [Move(x + k * dx, y + k * dy) for k in range(CONNECT)]
                    if all(self.board[m.to_linear(self.columns)] is player for m in line):
                        return line
        return None

    def check_winner(self) -> Player | None:
        for player in (Player.ONE, Player.TWO):
            if self.find_line(player) is not None:
                return player

        # Full board with no line is a tie
        if all(not self.is_space_empty(space) for space in self.board):
            return Player.EMPTY

        return None
