"""
Error Hierarchy

All engine and training errors inherit from C4SpinError so callers can catch
them in one place. Move errors are fatal to the move, training errors are
fatal to the current cycle; neither is retried internally.

Usage:
    from c4spin.errors import SpaceOccupiedError

    try:
        game.play(move)
    except SpaceOccupiedError as e:
        logger.warning(f"Rejected move: {e.message}")
"""

from typing import Any

__all__ = [
    "C4SpinError",
    "ConfigurationError",
    # Game errors
    "GameError",
    "OutOfBoundsError",
    "SpaceOccupiedError",
    "InvalidMoveInputError",
    # Training errors
    "TrainingError",
    "NoTrainableExamplesError",
    "CheckpointError",
]


class C4SpinError(Exception):
    """Base exception for all c4spin errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "C4SPIN_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(C4SpinError):
    """Invalid or unreadable configuration."""
    code: str = "CONFIGURATION_ERROR"


# =============================================================================
# Game Errors
# =============================================================================


class GameError(C4SpinError, ValueError):
    """Base class for rejected moves and invalid game states."""
    code: str = "GAME_ERROR"


class OutOfBoundsError(GameError):
    """Move coordinate lies outside the board.

    Raised by play() before any state is touched.
    """
    code: str = "OUT_OF_BOUNDS"


class SpaceOccupiedError(GameError):
    """Move targets a space that already belongs to a player.

    Raised by play() before any state is touched. The engine never moves
    the piece somewhere else.
    """
    code: str = "SPACE_OCCUPIED"


class InvalidMoveInputError(C4SpinError, ValueError):
    """Human move text could not be parsed into an in-bounds coordinate.

    Retryable: the caller should prompt again.
    """
    code: str = "INVALID_MOVE_INPUT"


# =============================================================================
# Training Errors
# =============================================================================


class TrainingError(C4SpinError):
    """Base class for training loop errors."""
    code: str = "TRAINING_ERROR"


class NoTrainableExamplesError(TrainingError):
    """A self-play cycle produced no training examples."""
    code: str = "NO_TRAINABLE_EXAMPLES"


class CheckpointError(TrainingError):
    """Checkpoint missing or unreadable."""
    code: str = "CHECKPOINT_ERROR"
