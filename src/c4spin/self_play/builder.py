"""
Training-Set Builder

Turns a finished episode into (board encoding, target) pairs. Only the
winner's moves are kept; after a tie every move is kept.
"""

from dataclasses import dataclass

import numpy as np

from ..data import encode_board
from ..games import BoardGame, Player
from .worker import Episode, EpisodeLogEntry


@dataclass
class TrainingExample:
    """Input and target vector for one policy update."""

    board_encoding: np.ndarray
    target: np.ndarray


def filter_log(log: list[EpisodeLogEntry], winner: Player) -> list[EpisodeLogEntry]:
    """Entries played by the winner, or all entries on a tie, in move order."""
    if winner is Player.EMPTY:
        return list(log)
    return [entry for entry in log if entry.turn_owner is winner]


def build_training_set(episode: Episode, game: BoardGame) -> list[TrainingExample]:
    """
    Builds training examples from an episode.

    Targets come from game.reward_for() with the episode's total turn count,
    so every example from the same game carries the same target value.

    Args:
        episode: Finished episode.
        game: Game that shapes the rewards (dimensions and reward scale).

    Returns:
        Examples in chronological order; empty if the log is empty.
    """
    return [
        TrainingExample(
            board_encoding=encode_board(entry.board),
            target=game.reward_for(entry.move, episode.turn_count),
        )
        for entry in filter_log(episode.log, episode.winner)
    ]
