"""
Board Model

Coordinates, players and the flat board representation shared by every game.
Cell (x, y) lives at linear index x + y * columns.
"""

from enum import Enum
from typing import NamedTuple, TypeAlias


class Player(Enum):
    """
    State of a single space.

    EMPTY marks an unassigned space and doubles as the tie result.
    """

    EMPTY = "empty"
    ONE = "one"
    TWO = "two"

    def flip(self) -> "Player":
        """Returns the opponent. EMPTY stays EMPTY."""
        if self is Player.ONE:
            return Player.TWO
        if self is Player.TWO:
            return Player.ONE
        return self

    def to_code(self) -> int:
        """Numeric code fed to policies: EMPTY=0, ONE=1, TWO=2."""
        return _PLAYER_CODES[self]


_PLAYER_CODES = {
    Player.EMPTY: 0,
    Player.ONE: 1,
    Player.TWO: 2,
}

# Flat list of spaces, indexed by Move.to_linear()
Board: TypeAlias = list[Player]


class Move(NamedTuple):
    """(x, y) coordinate pair. x is the column, y is the row."""

    x: int
    y: int

    def to_linear(self, columns: int) -> int:
        return self.x + self.y * columns

    @classmethod
    def from_linear(cls, index: int, columns: int) -> "Move":
        # divmod floors, so this is the exact inverse of to_linear
        y, x = divmod(index, columns)
        return cls(x, y)


def empty_board(columns: int, rows: int) -> Board:
    """Creates a board with every space EMPTY."""
    return [Player.EMPTY] * (columns * rows)


def column_label(x: int) -> str:
    """Letter used for column x in move text ('a' is column 0)."""
    return chr(ord("a") + x)


def board_to_string(board: Board, columns: int, rows: int) -> str:
    """
    Converts a board to a human-readable string.

    Rows are numbered from 1 and columns lettered from 'a', matching the
    move text accepted from human players (e.g. "d3").
    """
    symbols = {Player.EMPTY: ".", Player.ONE: "X", Player.TWO: "O"}
    lines = []
    for y in range(rows):
        cells = " ".join(symbols[board[Move(x, y).to_linear(columns)]] for x in range(columns))
        lines.append(f"{y + 1:>2} {cells}")
    lines.append("   " + " ".join(column_label(x) for x in range(columns)))
    return "\n".join(lines)
