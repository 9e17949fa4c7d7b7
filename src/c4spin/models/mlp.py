"""
Multi-Layer Perceptron policy.

Feed-forward network from the flat board encoding to one score per space.
"""

import torch
import torch.nn as nn

from .base import MovePolicy

DEFAULT_HIDDEN_SIZES = [36, 20]


class SpinMLP(MovePolicy):
    """
    Configurable MLP policy.

    Architecture: spaces -> [Hidden layers with ReLU] -> spaces
    Default for the 5x8 board: 40 -> 36 -> 20 -> 40
    """

    def __init__(self, space_count: int = 40, hidden_sizes: list[int] | None = None):
        """
        Args:
            space_count: Number of board spaces (input and output size).
            hidden_sizes: List of hidden layer sizes. Default is [36, 20].
        """
        super().__init__(space_count=space_count)

        if hidden_sizes is None:
            hidden_sizes = list(DEFAULT_HIDDEN_SIZES)

        self._hidden_sizes = hidden_sizes
        self._architecture_name = f"mlp-{'x'.join(str(h) for h in hidden_sizes)}"

        layers = []
        prev_size = space_count
        for hidden_size in hidden_sizes:
            layers.append(nn.Linear(prev_size, hidden_size))
            layers.append(nn.ReLU())
            prev_size = hidden_size
        layers.append(nn.Linear(prev_size, space_count))

        self.layers = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Args:
            x: Input tensor of shape (batch, space_count) or (space_count,)

        Returns:
            Scores of shape (batch, space_count)
        """
        if x.dim() == 1:
            x = x.unsqueeze(0)
        elif x.dim() > 2:
            x = x.view(x.size(0), -1)
        return self.layers(x)

    def get_config(self) -> dict:
        """Returns model configuration for serialization."""
        config = super().get_config()
        config["hidden_sizes"] = self._hidden_sizes
        return config


def create_policy(space_count: int, hidden_sizes: list[int] | None = None) -> SpinMLP:
    """Creates the default MLP policy for a board with space_count spaces."""
    return SpinMLP(space_count=space_count, hidden_sizes=hidden_sizes)
