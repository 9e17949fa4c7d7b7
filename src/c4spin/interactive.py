"""
Human Play

Reads moves typed as a column letter and a row number ("d3" is column 3,
row 2) and plays a trained policy against a human.
"""

import logging
from typing import Callable

from .data import encode_board
from .errors import GameError, InvalidMoveInputError
from .games import BoardGame, Move, Player
from .models import Policy
from .self_play import select_move

logger = logging.getLogger(__name__)

PROMPT = "where would you like to go [ex. d3]> "


def parse_move(text: str, columns: int, rows: int) -> Move:
    """
    Parses a two-character move such as "d3".

    Raises:
        InvalidMoveInputError: If the text is malformed or off the board.
    """
    text = text.strip().lower()
    if len(text) != 2:
        raise InvalidMoveInputError(f"Expected a column letter and a row number, got {text!r}")

    letter, digit = text
    if not ("a" <= letter <= "z") or not digit.isdigit():
        raise InvalidMoveInputError(f"Expected a column letter and a row number, got {text!r}")

    x = ord(letter) - ord("a")
    y = ord(digit) - ord("1")
    if not (0 <= x < columns and 0 <= y < rows):
        raise InvalidMoveInputError(
            f"{text!r} is off the board",
            context={"columns": columns, "rows": rows},
        )
    return Move(x, y)


def prompt_move(
    game: BoardGame,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Move:
    """
    Asks until the human enters a move onto an empty space.
    """
    while True:
        try:
            move = parse_move(input_fn(PROMPT), game.columns, game.rows)
        except InvalidMoveInputError as e:
            output_fn(f"Bad input, try again. [{e.message}]")
            continue

        if not game.is_space_empty(game.board[move.to_linear(game.columns)]):
            output_fn(f"Bad input, try again. [{move} is taken]")
            continue

        return move


def play_against_human(
    game: BoardGame,
    policy: Policy,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Player:
    """
    Play a game with the policy moving first and the human second.

    Returns:
        The winner, or Player.EMPTY for a tie.
    """
    game.reset()
    while True:
        bot_move = select_move(game, policy.evaluate(encode_board(game.get_board())))
        logger.debug(f"Policy plays {bot_move}")
        winner = game.play(bot_move)
        if winner is not None:
            break

        output_fn(str(game))
        while True:
            try:
                winner = game.play(prompt_move(game, input_fn, output_fn))
                break
            except GameError as e:
                output_fn(f"Bad input, try again. [{e.message}]")
        if winner is not None:
            break

    if winner is Player.EMPTY:
        output_fn("It's a tie!")
    else:
        output_fn(f"Player [{winner.value}] won!")
    output_fn(str(game))
    return winner
