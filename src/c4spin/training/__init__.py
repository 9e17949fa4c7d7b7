"""
Training Infrastructure for Self-Play

This module provides the self-play control loop, the optimizer step and
loss, checkpointing and logging callbacks.
"""

from .callbacks import (
    Callback,
    CallbackList,
    ConsoleLogger,
    CycleState,
    FileLogger,
)
from .checkpoint import DEFAULT_CHECKPOINT_PATH, CheckpointSink, TorchCheckpoint
from .losses import target_mse_loss
from .optimizers import (
    MSEOptimizerStep,
    OptimizerStep,
    create_optimizer,
    get_current_lr,
)
from .trainer import SelfPlayTrainer, TrainerConfig, TrainingMode, set_seed

__all__ = [
    # Trainer
    "SelfPlayTrainer",
    "TrainerConfig",
    "TrainingMode",
    "set_seed",
    # Loss functions
    "target_mse_loss",
    # Optimizers
    "OptimizerStep",
    "MSEOptimizerStep",
    "create_optimizer",
    "get_current_lr",
    # Checkpoints
    "CheckpointSink",
    "TorchCheckpoint",
    "DEFAULT_CHECKPOINT_PATH",
    # Callbacks
    "Callback",
    "CallbackList",
    "CycleState",
    "ConsoleLogger",
    "FileLogger",
]
