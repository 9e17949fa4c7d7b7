"""
Policy Checkpoints

The trainer saves policy parameters through a CheckpointSink. The path is
fixed when the sink is created.
"""

import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import torch
from torch.nn import Module

from ..errors import CheckpointError

logger = logging.getLogger(__name__)

DEFAULT_CHECKPOINT_PATH = "checkpoint.pt"


@runtime_checkable
class CheckpointSink(Protocol):
    """Protocol for persisting policy parameters."""

    def exists(self) -> bool:
        ...

    def save(self, metadata: dict[str, Any] | None = None) -> None:
        ...

    def load(self) -> dict[str, Any]:
        ...


class TorchCheckpoint:
    """Saves and restores a model's state dict with torch.save."""

    def __init__(self, model: Module, path: str | Path = DEFAULT_CHECKPOINT_PATH):
        """
        Args:
            model: Model whose parameters are saved and restored.
            path: Checkpoint file.
        """
        self.model = model
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, metadata: dict[str, Any] | None = None) -> None:
        """
        Save the model parameters.

        Args:
            metadata: Extra values stored next to the parameters (step, loss, ...).
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        checkpoint = {
            "model_state_dict": self.model.state_dict(),
            "metadata": metadata or {},
        }
        torch.save(checkpoint, self.path)
        logger.info(f"Checkpoint saved to {self.path}")

    def load(self) -> dict[str, Any]:
        """
        Restore the model parameters.

        Returns:
            The metadata stored with the checkpoint.

        Raises:
            CheckpointError: If the file is missing or does not fit the model.
        """
        if not self.exists():
            raise CheckpointError(f"No checkpoint at {self.path}")

        checkpoint = torch.load(self.path, map_location="cpu", weights_only=False)
        try:
            self.model.load_state_dict(checkpoint["model_state_dict"])
        except (KeyError, RuntimeError) as e:
            raise CheckpointError(
                f"Checkpoint at {self.path} does not match the model",
                context={"error": str(e)},
            ) from e

        metadata = checkpoint.get("metadata", {})
        logger.info(f"Loaded checkpoint from {self.path} (step {metadata.get('global_step', 'unknown')})")
        return metadata
