"""
Policy interface for move-scoring models.

A policy maps an encoded board to one preference score per space. The
self-play worker only needs evaluate(); the trainer also needs a
differentiable forward pass, which MovePolicy provides.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

import numpy as np
import torch
import torch.nn as nn


@runtime_checkable
class Policy(Protocol):
    """Protocol for move-scoring policies used in self-play."""

    def evaluate(self, board_encoding: np.ndarray) -> np.ndarray:
        """
        Score every space of a board.

        Args:
            board_encoding: Flat player-code encoding of the board.

        Returns:
            Array with one preference value per space.
        """
        ...


class MovePolicy(nn.Module, ABC):
    """
    Abstract base class for trainable policies.

    Subclasses implement forward() mapping (batch, space_count) encodings to
    (batch, space_count) preference scores.
    """

    def __init__(self, space_count: int):
        """
        Args:
            space_count: Number of board spaces (columns * rows); both the
                input and output size.
        """
        super().__init__()
        self.space_count = space_count
        self._architecture_name = "base"

    @abstractmethod
    def forward(self, x: torch.Tensor) -> torch.Tensor:
        pass

    def evaluate(self, board_encoding: np.ndarray) -> np.ndarray:
        """Scores a single board without tracking gradients."""
        device = next(self.parameters()).device
        x = torch.as_tensor(board_encoding, dtype=torch.float32, device=device).view(1, -1)
        with torch.no_grad():
            scores = self(x)
        return scores.view(-1).cpu().numpy()

    def param_count(self) -> int:
        """Returns total number of trainable parameters."""
        return sum(p.numel() for p in self.parameters() if p.requires_grad)

    def architecture_string(self) -> str:
        """Returns human-readable architecture description."""
        return f"{self._architecture_name} ({self.param_count():,} params)"

    def get_config(self) -> dict:
        """Returns model configuration for serialization."""
        return {
            "architecture": self._architecture_name,
            "space_count": self.space_count,
            "param_count": self.param_count(),
        }
