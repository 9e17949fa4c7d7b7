"""
Training Callbacks

Provides callback classes for logging training progress.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from torch.nn import Module

logger = logging.getLogger(__name__)


@dataclass
class CycleState:
    """Result of one self-play cycle, passed to callbacks."""

    cycle: int
    global_step: int
    loss: float  # loss of the last example in the cycle
    num_examples: int
    turn_count: int
    winner: str
    learning_rate: float = 0.0
    cycle_time: float = 0.0


class Callback:
    """Base class for training callbacks."""

    def on_train_begin(self, model: Module, **kwargs: Any) -> None:
        """Called at the beginning of training."""
        pass

    def on_train_end(self, model: Module, state: CycleState | None, **kwargs: Any) -> None:
        """Called at the end of training with the last cycle's state."""
        pass

    def on_cycle_begin(self, cycle: int, **kwargs: Any) -> None:
        """Called before each self-play episode is generated."""
        pass

    def on_cycle_end(self, model: Module, state: CycleState, **kwargs: Any) -> None:
        """Called after the last optimizer step of a cycle."""
        pass

    def on_step_end(self, loss: float, global_step: int, **kwargs: Any) -> None:
        """Called after each optimizer step."""
        pass


class CallbackList:
    """Container for multiple callbacks."""

    def __init__(self, callbacks: list[Callback] | None = None):
        self.callbacks = callbacks or []

    def on_train_begin(self, model: Module, **kwargs: Any) -> None:
        for callback in self.callbacks:
            callback.on_train_begin(model, **kwargs)

    def on_train_end(self, model: Module, state: CycleState | None, **kwargs: Any) -> None:
        for callback in self.callbacks:
            callback.on_train_end(model, state, **kwargs)

    def on_cycle_begin(self, cycle: int, **kwargs: Any) -> None:
        for callback in self.callbacks:
            callback.on_cycle_begin(cycle, **kwargs)

    def on_cycle_end(self, model: Module, state: CycleState, **kwargs: Any) -> None:
        for callback in self.callbacks:
            callback.on_cycle_end(model, state, **kwargs)

    def on_step_end(self, loss: float, global_step: int, **kwargs: Any) -> None:
        for callback in self.callbacks:
            callback.on_step_end(loss, global_step, **kwargs)


class ConsoleLogger(Callback):
    """Logs training progress to console."""

    def __init__(self, log_every: int = 150):
        """
        Args:
            log_every: Log every N optimizer steps.
        """
        self.log_every = log_every
        self.train_start_time = 0.0

    def on_train_begin(self, model: Module, **kwargs: Any) -> None:
        self.train_start_time = time.time()
        total_params = sum(p.numel() for p in model.parameters())
        trainable_params = sum(p.numel() for p in model.parameters() if p.requires_grad)
        logger.info(f"Model has {total_params:,} parameters ({trainable_params:,} trainable)")

    def on_step_end(self, loss: float, global_step: int, **kwargs: Any) -> None:
        if global_step % self.log_every == 0:
            lr = kwargs.get("learning_rate", 0)
            logger.info(f"Step: {global_step:5d} | Loss: {loss:8.5f} | LR: {lr:1.5f}")

    def on_cycle_end(self, model: Module, state: CycleState, **kwargs: Any) -> None:
        logger.debug(
            f"Cycle {state.cycle + 1}: turns={state.turn_count}, winner={state.winner}, "
            f"examples={state.num_examples}, loss={state.loss:.5f}"
        )

    def on_train_end(self, model: Module, state: CycleState | None, **kwargs: Any) -> None:
        elapsed = time.time() - self.train_start_time
        if state is None:
            logger.info(f"Training finished in {elapsed:.1f}s without completing a cycle")
            return
        logger.info(
            f"Training finished in {elapsed:.1f}s after {state.cycle + 1} cycles "
            f"({state.global_step} steps), final loss={state.loss:.5f}"
        )


class FileLogger(Callback):
    """Logs per-cycle metrics to a JSON file."""

    def __init__(self, log_path: str | Path, save_every: int = 100):
        """
        Args:
            log_path: Path to the log file.
            save_every: Rewrite the file every N cycles (and at the end).
        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.save_every = save_every
        self.history: list[dict] = []

    def on_cycle_end(self, model: Module, state: CycleState, **kwargs: Any) -> None:
        entry = asdict(state)
        entry["cycle"] = state.cycle + 1
        self.history.append(entry)

        if len(self.history) % self.save_every == 0:
            self._write()

    def on_train_end(self, model: Module, state: CycleState | None, **kwargs: Any) -> None:
        self._write()
        logger.info(f"Training log saved to {self.log_path}")

    def _write(self) -> None:
        # Write full history (overwrite each time for safety)
        with open(self.log_path, "w") as f:
            json.dump(self.history, f, indent=2)
