"""
Self-Play Trainer

Repeats self-play cycles: play one episode with the current policy, build
training examples from it, and take one optimizer step per example.
Learning only happens between episodes.
"""

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Literal

import torch
from tqdm import tqdm

from ..errors import ConfigurationError, NoTrainableExamplesError
from ..games import BoardGame
from ..models import MovePolicy
from ..self_play import SelfPlayWorker, build_training_set
from .callbacks import Callback, CallbackList, CycleState
from .checkpoint import CheckpointSink
from .optimizers import OptimizerStep

logger = logging.getLogger(__name__)

TrainingMode = Literal["epochs", "target_loss"]


def set_seed(seed: int) -> None:
    """Seed torch. Call before building the policy so its initial weights repeat."""
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)


@dataclass
class TrainerConfig:
    """Configuration for the SelfPlayTrainer."""

    # Stopping mode
    mode: TrainingMode = "epochs"
    epochs: int = 500  # cycles to run in "epochs" mode
    target_loss: float = 0.01  # stop once the last loss is at or below this
    checkpoint_every: int | None = None  # save every N cycles in "target_loss" mode
    max_cycles: int = 100_000  # hard cap for "target_loss" mode

    # Logging
    log_every: int = 150
    show_progress: bool = False

    # Device
    device: str = "auto"  # "auto", "cpu", "cuda", "mps"

    # Misc
    seed: int | None = 42

    def __post_init__(self):
        if self.mode not in ("epochs", "target_loss"):
            raise ConfigurationError(f"Unknown training mode: {self.mode}")
        if self.epochs < 0:
            raise ConfigurationError(f"epochs must be non-negative, got {self.epochs}")
        if self.max_cycles < 1:
            raise ConfigurationError(f"max_cycles must be at least 1, got {self.max_cycles}")
        if self.checkpoint_every is not None and self.checkpoint_every < 1:
            raise ConfigurationError(
                f"checkpoint_every must be at least 1, got {self.checkpoint_every}"
            )
        if self.log_every < 1:
            raise ConfigurationError(f"log_every must be at least 1, got {self.log_every}")

        if self.device == "auto":
            if torch.cuda.is_available():
                self.device = "cuda"
            elif torch.backends.mps.is_available():
                self.device = "mps"
            else:
                self.device = "cpu"


class SelfPlayTrainer:
    """
    Control loop for self-play training.

    Supports:
    - A fixed number of cycles ("epochs" mode)
    - Training until the loss reaches a target, with periodic checkpoints
      and a hard cycle cap ("target_loss" mode)
    - Configurable callbacks (console and file logging)
    """

    def __init__(
        self,
        game: BoardGame,
        policy: MovePolicy,
        optimizer: OptimizerStep,
        config: TrainerConfig | None = None,
        checkpoint: CheckpointSink | None = None,
        callbacks: list[Callback] | None = None,
    ):
        """
        Initialize the trainer.

        Args:
            game: Game to play; reset at the start of every cycle.
            policy: Policy that plays both sides and is trained.
            optimizer: Computes the loss and updates the policy.
            config: Training configuration.
            checkpoint: Where periodic checkpoints go.
            callbacks: Callbacks for logging.
        """
        self.config = config or TrainerConfig()
        self.game = game
        self.policy = policy.to(self.config.device)
        self.optimizer = optimizer
        self.checkpoint = checkpoint
        self.callbacks = CallbackList(callbacks)
        self.worker = SelfPlayWorker(self.policy)

        self.global_step = 0
        self.cycle = 0

        if self.config.seed is not None:
            set_seed(self.config.seed)

        logger.info(f"Trainer initialized on device: {self.config.device}")

    def run_cycle(self) -> CycleState:
        """
        Run one self-play cycle.

        Returns:
            State whose loss is the loss of the cycle's last example.

        Raises:
            NoTrainableExamplesError: If the episode produced no examples.
        """
        cycle_start = time.time()
        self.callbacks.on_cycle_begin(self.cycle)

        self.game.reset()
        self.policy.eval()
        episode = self.worker.play_episode(self.game)
        examples = build_training_set(episode, self.game)

        if not examples:
            raise NoTrainableExamplesError(
                "Episode produced no training examples",
                context={"turns": episode.turn_count, "winner": episode.winner.value},
            )

        self.policy.train()
        loss = 0.0
        for example in examples:
            board = torch.as_tensor(example.board_encoding, device=self.config.device).unsqueeze(0)
            target = torch.as_tensor(example.target, device=self.config.device)

            predicted = self.policy(board)
            loss = self.optimizer.step(predicted, target)

            self.global_step += 1
            self.callbacks.on_step_end(
                loss,
                self.global_step,
                learning_rate=self._learning_rate(),
            )

        state = CycleState(
            cycle=self.cycle,
            global_step=self.global_step,
            loss=loss,
            num_examples=len(examples),
            turn_count=episode.turn_count,
            winner=episode.winner.value,
            learning_rate=self._learning_rate(),
            cycle_time=time.time() - cycle_start,
        )
        self.cycle += 1

        self.callbacks.on_cycle_end(self.policy, state)
        return state

    def train(self) -> dict[str, Any]:
        """
        Run cycles until the configured stopping mode is satisfied.

        Returns:
            Dictionary containing the final loss and training history.
        """
        self.callbacks.on_train_begin(self.policy)

        history: list[CycleState] = []
        final_state = None
        reached_target = False
        total = self.config.epochs if self.config.mode == "epochs" else None

        with tqdm(
            total=total,
            desc="Self-play cycles",
            disable=not self.config.show_progress,
        ) as pbar:
            try:
                cycles = 0
                while True:
                    if self.config.mode == "epochs" and cycles >= self.config.epochs:
                        break
                    if self.config.mode == "target_loss" and cycles >= self.config.max_cycles:
                        logger.warning(
                            f"Stopped after {cycles} cycles without reaching "
                            f"target loss {self.config.target_loss}"
                        )
                        break

                    final_state = self.run_cycle()
                    history.append(final_state)
                    cycles += 1
                    pbar.update(1)
                    pbar.set_postfix(loss=f"{final_state.loss:.5f}")

                    if self.config.mode == "target_loss":
                        if final_state.loss <= self.config.target_loss:
                            reached_target = True
                            logger.info(
                                f"Target loss {self.config.target_loss} reached after {cycles} cycles"
                            )
                            break
                        if (
                            self.checkpoint is not None
                            and self.config.checkpoint_every is not None
                            and cycles % self.config.checkpoint_every == 0
                        ):
                            self.save_checkpoint(final_state)

            except KeyboardInterrupt:
                logger.info("Training interrupted by user")

        self.callbacks.on_train_end(self.policy, final_state)

        return {
            "cycles": len(history),
            "global_step": self.global_step,
            "final_loss": final_state.loss if final_state else None,
            "reached_target": reached_target,
            "history": [asdict(s) for s in history],
        }

    def save_checkpoint(self, state: CycleState | None = None) -> None:
        """Save the policy through the checkpoint sink, if one is configured."""
        if self.checkpoint is None:
            logger.warning("No checkpoint sink configured; skipping save")
            return

        metadata = {
            "global_step": self.global_step,
            "cycle": self.cycle,
            "loss": state.loss if state else None,
            "config": self._get_config_dict(),
        }
        self.checkpoint.save(metadata)

    def _learning_rate(self) -> float:
        return getattr(self.optimizer, "learning_rate", 0.0)

    def _get_config_dict(self) -> dict:
        """Convert config to dictionary for saving."""
        return asdict(self.config)
