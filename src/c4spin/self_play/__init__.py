"""
Self-Play System

Generates episodes with the current policy and turns them into training data.
"""

from .builder import TrainingExample, build_training_set, filter_log
from .worker import Episode, EpisodeLogEntry, SelfPlayWorker, select_move

__all__ = [
    "SelfPlayWorker",
    "Episode",
    "EpisodeLogEntry",
    "select_move",
    "TrainingExample",
    "build_training_set",
    "filter_log",
]
