"""
Self-Play Worker

Plays complete games with a policy against itself and records every move.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from ..data import encode_board
from ..errors import GameError
from ..games import Board, BoardGame, Move, Player
from ..models import Policy

logger = logging.getLogger(__name__)


@dataclass
class EpisodeLogEntry:
    """One accepted move: who played it, the board they saw, and the move."""

    turn_owner: Player
    board: Board
    move: Move


@dataclass
class Episode:
    """A finished game."""

    winner: Player  # Player.EMPTY for a tie
    log: list[EpisodeLogEntry] = field(default_factory=list)

    @property
    def turn_count(self) -> int:
        return len(self.log)


def select_move(game: BoardGame, preferences: np.ndarray) -> Move:
    """
    Picks the empty space with the highest preference.

    Spaces are scanned in ascending linear order and only a strictly greater
    score replaces the current best, so the first index wins ties.

    Raises:
        ValueError: If the preference vector does not cover the board.
        GameError: If the board has no empty space.
    """
    preferences = np.asarray(preferences).reshape(-1)
    if preferences.shape[0] != game.space_count:
        raise ValueError(
            f"Policy returned {preferences.shape[0]} scores for {game.space_count} spaces"
        )

    best_index = None
    best_value = None
    for index in game.empty_indices():
        value = preferences[index]
        if best_index is None or value > best_value:
            best_index = index
            best_value = value

    if best_index is None:
        raise GameError("No empty space left to play")

    return Move.from_linear(best_index, game.columns)


class SelfPlayWorker:
    """
    Generates episodes through greedy self-play.

    The same policy moves for both players. Nothing about the policy is
    changed while an episode is running.
    """

    def __init__(self, policy: Policy):
        """
        Args:
            policy: Scores board spaces; the best empty one is played.
        """
        self.policy = policy

    def play_episode(self, game: BoardGame) -> Episode:
        """
        Play a game to the end from its current state.

        Returns:
            Episode with the result and one log entry per move.
        """
        log: list[EpisodeLogEntry] = []

        while True:
            board = game.get_board()
            preferences = self.policy.evaluate(encode_board(board))
            move = select_move(game, preferences)

            # Record position BEFORE making move
            log.append(EpisodeLogEntry(turn_owner=game.get_turn(), board=board, move=move))

            result = game.play(move)
            if result is not None:
                break

        logger.debug(f"Episode finished: turns={len(log)}, winner={result.value}")
        return Episode(winner=result, log=log)
