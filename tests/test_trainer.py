"""Tests for the self-play trainer."""

import logging
import tempfile
from pathlib import Path

import pytest
import torch

from c4spin.errors import ConfigurationError, NoTrainableExamplesError
from c4spin.games import ConnectFourSpin
from c4spin.models import SpinMLP
from c4spin.training import (
    Callback,
    CycleState,
    MSEOptimizerStep,
    SelfPlayTrainer,
    TorchCheckpoint,
    TrainerConfig,
    create_optimizer,
    set_seed,
)


class ScriptedStep:
    """Optimizer step that returns a preset loss and leaves the policy alone."""

    def __init__(self, loss: float = 1.0):
        self.loss = loss
        self.calls = 0

    def step(self, predicted, target):
        self.calls += 1
        return self.loss


class LossSchedule(Callback):
    """Sets the scripted loss for each cycle before it runs."""

    def __init__(self, step: ScriptedStep, losses: list[float]):
        self.step = step
        self.losses = losses

    def on_cycle_begin(self, cycle, **kwargs):
        self.step.loss = self.losses[min(cycle, len(self.losses) - 1)]


class RecordingSink:
    """Checkpoint sink that remembers every save."""

    def __init__(self):
        self.saves = []

    def exists(self):
        return bool(self.saves)

    def save(self, metadata=None):
        self.saves.append(metadata)

    def load(self):
        return self.saves[-1]


def make_trainer(config: TrainerConfig, optimizer=None, checkpoint=None, callbacks=None):
    """Create a trainer on CPU with a fresh game and policy."""
    policy = SpinMLP()
    if optimizer is None:
        optimizer = MSEOptimizerStep(create_optimizer(policy.parameters()))
    return SelfPlayTrainer(
        game=ConnectFourSpin(seed=0),
        policy=policy,
        optimizer=optimizer,
        config=config,
        checkpoint=checkpoint,
        callbacks=callbacks,
    )


class TestTrainerConfig:
    """Tests for TrainerConfig."""

    def test_default_config(self):
        config = TrainerConfig()

        assert config.mode == "epochs"
        assert config.epochs == 500
        assert config.target_loss == 0.01
        assert config.checkpoint_every is None
        assert config.max_cycles == 100_000
        assert config.log_every == 150

    def test_auto_device_selection(self):
        config = TrainerConfig(device="auto")
        assert config.device in ["cpu", "cuda", "mps"]

    def test_explicit_device(self):
        assert TrainerConfig(device="cpu").device == "cpu"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"mode": "forever"},
            {"epochs": -1},
            {"max_cycles": 0},
            {"checkpoint_every": 0},
            {"log_every": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            TrainerConfig(**kwargs)


class TestSetSeed:
    """Tests for set_seed."""

    def test_repeats_initial_weights(self):
        set_seed(7)
        first = SpinMLP()
        set_seed(7)
        second = SpinMLP()

        for a, b in zip(first.parameters(), second.parameters()):
            assert torch.equal(a, b)


class TestRunCycle:
    """Tests for a single self-play cycle."""

    def test_one_step_per_example(self):
        """Every example gets exactly one optimizer step."""
        step = ScriptedStep(0.5)
        trainer = make_trainer(TrainerConfig(device="cpu"), optimizer=step)

        state = trainer.run_cycle()

        assert isinstance(state, CycleState)
        assert state.num_examples >= 1
        assert step.calls == state.num_examples
        assert trainer.global_step == state.num_examples
        assert state.loss == 0.5
        assert state.cycle == 0
        assert trainer.cycle == 1
        assert state.winner in ("one", "two", "empty")

    def test_examples_match_result(self):
        """Winners train on their own moves; ties train on every move."""
        trainer = make_trainer(TrainerConfig(device="cpu"), optimizer=ScriptedStep())

        for _ in range(5):
            state = trainer.run_cycle()
            if state.winner == "empty":
                assert state.num_examples == state.turn_count
            elif state.winner == "one":
                assert state.num_examples == (state.turn_count + 1) // 2
            else:
                assert state.num_examples == state.turn_count // 2

    def test_real_step_changes_policy(self):
        trainer = make_trainer(TrainerConfig(device="cpu"))
        before = [p.detach().clone() for p in trainer.policy.parameters()]

        state = trainer.run_cycle()

        assert state.loss > 0
        assert state.learning_rate == 0.1
        assert any(not torch.equal(b, p) for b, p in zip(before, trainer.policy.parameters()))

    def test_no_examples(self, monkeypatch):
        """An episode that yields nothing to train on is an error."""
        monkeypatch.setattr(
            "c4spin.training.trainer.build_training_set", lambda episode, game: []
        )
        trainer = make_trainer(TrainerConfig(device="cpu"), optimizer=ScriptedStep())

        with pytest.raises(NoTrainableExamplesError):
            trainer.run_cycle()

    def test_policy_errors_propagate(self):
        class FailingStep:
            def step(self, predicted, target):
                raise RuntimeError("step failed")

        trainer = make_trainer(TrainerConfig(device="cpu"), optimizer=FailingStep())
        with pytest.raises(RuntimeError, match="step failed"):
            trainer.run_cycle()


class TestTrain:
    """Tests for the training loop."""

    def test_epochs_mode(self):
        """Runs exactly the configured number of cycles."""
        step = ScriptedStep(0.0)
        trainer = make_trainer(TrainerConfig(mode="epochs", epochs=3, device="cpu"), optimizer=step)

        results = trainer.train()

        assert results["cycles"] == 3
        assert len(results["history"]) == 3
        assert results["global_step"] == trainer.global_step == step.calls
        assert results["final_loss"] == 0.0

    def test_epochs_ignores_target(self):
        """Reaching the target loss does not stop epochs mode early."""
        config = TrainerConfig(mode="epochs", epochs=4, target_loss=1.0, device="cpu")
        trainer = make_trainer(config, optimizer=ScriptedStep(0.0))
        assert trainer.train()["cycles"] == 4

    def test_zero_epochs(self):
        trainer = make_trainer(TrainerConfig(epochs=0, device="cpu"), optimizer=ScriptedStep())
        results = trainer.train()
        assert results["cycles"] == 0
        assert results["final_loss"] is None

    def test_target_loss_mode(self):
        """Stops after the first cycle whose loss is at or below target."""
        step = ScriptedStep()
        schedule = LossSchedule(step, [0.5, 0.3, 0.1, 0.05])
        config = TrainerConfig(mode="target_loss", target_loss=0.1, device="cpu")
        trainer = make_trainer(config, optimizer=step, callbacks=[schedule])

        results = trainer.train()

        assert results["cycles"] == 3
        assert results["reached_target"] is True
        assert results["final_loss"] == 0.1

    def test_target_loss_checkpoints(self):
        """Checkpoints are saved every N cycles that did not reach the target."""
        step = ScriptedStep()
        schedule = LossSchedule(step, [1.0] * 7 + [0.0])
        sink = RecordingSink()
        config = TrainerConfig(
            mode="target_loss", target_loss=0.01, checkpoint_every=3, device="cpu"
        )
        trainer = make_trainer(config, optimizer=step, checkpoint=sink, callbacks=[schedule])

        results = trainer.train()

        assert results["cycles"] == 8
        assert [save["cycle"] for save in sink.saves] == [3, 6]
        assert sink.saves[0]["loss"] == 1.0

    def test_no_checkpoints_without_cadence(self):
        step = ScriptedStep()
        sink = RecordingSink()
        config = TrainerConfig(mode="target_loss", target_loss=0.01, max_cycles=4, device="cpu")
        trainer = make_trainer(config, optimizer=step, checkpoint=sink)

        trainer.train()

        assert sink.saves == []

    def test_max_cycles(self, caplog):
        """Target-loss mode gives up after max_cycles with a warning."""
        config = TrainerConfig(mode="target_loss", target_loss=0.01, max_cycles=5, device="cpu")
        trainer = make_trainer(config, optimizer=ScriptedStep(1.0))

        with caplog.at_level(logging.WARNING, logger="c4spin.training.trainer"):
            results = trainer.train()

        assert results["cycles"] == 5
        assert results["reached_target"] is False
        assert "without reaching target loss" in caplog.text

    def test_keyboard_interrupt(self):
        """Ctrl-C ends training and still reports results."""

        class InterruptAt(Callback):
            def on_cycle_begin(self, cycle, **kwargs):
                if cycle == 2:
                    raise KeyboardInterrupt

        trainer = make_trainer(
            TrainerConfig(epochs=10, device="cpu"),
            optimizer=ScriptedStep(),
            callbacks=[InterruptAt()],
        )

        assert trainer.train()["cycles"] == 2

    def test_history_records_cycles(self):
        trainer = make_trainer(TrainerConfig(epochs=2, device="cpu"), optimizer=ScriptedStep())
        history = trainer.train()["history"]
        assert [entry["cycle"] for entry in history] == [0, 1]


class TestSaveCheckpoint:
    """Tests for checkpoint saving through the trainer."""

    def test_save_and_resume(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "checkpoint.pt"
            policy = SpinMLP()
            trainer = SelfPlayTrainer(
                game=ConnectFourSpin(seed=0),
                policy=policy,
                optimizer=MSEOptimizerStep(create_optimizer(policy.parameters())),
                config=TrainerConfig(epochs=2, device="cpu"),
                checkpoint=TorchCheckpoint(policy, path),
            )
            trainer.train()
            trainer.save_checkpoint()

            restored = SpinMLP()
            metadata = TorchCheckpoint(restored, path).load()

            assert metadata["cycle"] == 2
            assert metadata["global_step"] == trainer.global_step
            assert metadata["config"]["epochs"] == 2
            for a, b in zip(policy.parameters(), restored.parameters()):
                assert torch.equal(a, b)

    def test_without_sink(self, caplog):
        trainer = make_trainer(TrainerConfig(device="cpu"), optimizer=ScriptedStep())
        with caplog.at_level(logging.WARNING, logger="c4spin.training.trainer"):
            trainer.save_checkpoint()
        assert "No checkpoint sink" in caplog.text
