"""
Command-line interface.

Usage:
    c4spin train --epochs 500
    c4spin train -c configs/target-loss.yaml --resume
    c4spin play --checkpoint checkpoint.pt
"""

import dataclasses
import logging
from pathlib import Path

import click

from .config import RunConfig
from .errors import C4SpinError, ConfigurationError
from .games import BoardGame, create_game, get_game_info, list_games
from .interactive import play_against_human
from .models import SpinMLP, create_policy
from .training import (
    ConsoleLogger,
    FileLogger,
    MSEOptimizerStep,
    SelfPlayTrainer,
    TorchCheckpoint,
    create_optimizer,
    set_seed,
)

logger = logging.getLogger(__name__)


def load_run_config(config: str | None) -> RunConfig:
    if config is None:
        return RunConfig()
    logger.info(f"Loading configuration from {config}")
    return RunConfig.from_yaml(config)


def build_game(cfg: RunConfig) -> BoardGame:
    try:
        return create_game(
            cfg.game.name,
            columns=cfg.game.columns,
            rows=cfg.game.rows,
            seed=cfg.game.seed if cfg.game.seed is not None else cfg.trainer.seed,
            reward_scale=cfg.game.reward_scale,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def build_trainer(cfg: RunConfig, game: BoardGame, policy: SpinMLP) -> SelfPlayTrainer:
    """Wire the optimizer, checkpoint sink and callbacks into a trainer."""
    try:
        optimizer = create_optimizer(
            policy.parameters(),
            optimizer_type=cfg.optimizer.type,
            learning_rate=cfg.optimizer.learning_rate,
            weight_decay=cfg.optimizer.weight_decay,
            momentum=cfg.optimizer.momentum,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    callbacks = [ConsoleLogger(log_every=cfg.trainer.log_every)]
    if cfg.log_path:
        callbacks.append(FileLogger(cfg.log_path))

    return SelfPlayTrainer(
        game=game,
        policy=policy,
        optimizer=MSEOptimizerStep(optimizer, grad_clip=cfg.optimizer.grad_clip),
        config=cfg.trainer,
        checkpoint=TorchCheckpoint(policy, cfg.checkpoint_path),
        callbacks=callbacks,
    )



def build_run(cfg: RunConfig) -> SelfPlayTrainer:
    """
    Build the game, policy and trainer for a run.

    The trainer seed is applied before the policy is created, and also seeds
    the spin coin flip when the game has no seed of its own.
    """
    if cfg.trainer.seed is not None:
        set_seed(cfg.trainer.seed)
    game = build_game(cfg)
    policy = create_policy(game.space_count, cfg.model.hidden_sizes)
    return build_trainer(cfg, game, policy)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def main(verbose: bool) -> None:
    """Connect Four Spin self-play training."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to run configuration YAML file.",
)
@click.option(
    "--mode",
    type=click.Choice(["epochs", "target_loss"]),
    default=None,
    help="Stopping mode (default from config).",
)
@click.option("--epochs", type=int, default=None, help="Cycles to run in epochs mode.")
@click.option(
    "--target-loss",
    type=float,
    default=None,
    help="Train until the loss reaches this value (implies --mode target_loss).",
)
@click.option(
    "--checkpoint-every",
    type=int,
    default=None,
    help="Save a checkpoint every N cycles in target_loss mode.",
)
@click.option("--max-cycles", type=int, default=None, help="Hard cap on cycles in target_loss mode.")
@click.option("--lr", type=float, default=None, help="Override learning rate from config.")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility.")
@click.option(
    "--checkpoint",
    type=click.Path(dir_okay=False),
    default=None,
    help="Checkpoint file (default from config).",
)
@click.option("--resume", is_flag=True, help="Load the checkpoint first if it exists.")
@click.option(
    "--device",
    type=click.Choice(["auto", "cpu", "cuda", "mps"]),
    default=None,
    help="Device to train on.",
)
@click.option("--progress/--no-progress", default=False, help="Show a progress bar.")
def train(
    config: str | None,
    mode: str | None,
    epochs: int | None,
    target_loss: float | None,
    checkpoint_every: int | None,
    max_cycles: int | None,
    lr: float | None,
    seed: int | None,
    checkpoint: str | None,
    resume: bool,
    device: str | None,
    progress: bool,
) -> None:
    """Train a policy through self-play."""
    try:
        cfg = load_run_config(config)

        # Apply command-line overrides
        overrides = {
            "mode": mode or ("target_loss" if target_loss is not None else None),
            "epochs": epochs,
            "target_loss": target_loss,
            "checkpoint_every": checkpoint_every,
            "max_cycles": max_cycles,
            "seed": seed,
            "device": device,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if progress:
            overrides["show_progress"] = True
        cfg.trainer = dataclasses.replace(cfg.trainer, **overrides)
        if lr is not None:
            cfg.optimizer.learning_rate = lr
        if checkpoint is not None:
            cfg.checkpoint_path = checkpoint

        trainer = build_run(cfg)
        game, policy = trainer.game, trainer.policy

        if resume and trainer.checkpoint.exists():
            trainer.checkpoint.load()

        logger.info(f"Training {policy.architecture_string()} on {game.name} ({cfg.trainer.mode} mode)")
        results = trainer.train()
        trainer.save_checkpoint()

        # Resolved settings next to the checkpoint so the run can be repeated
        config_path = Path(cfg.checkpoint_path).with_suffix(".yaml")
        cfg.to_yaml(config_path)
        logger.info(f"Run configuration saved to {config_path}")
    except C4SpinError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Finished {results['cycles']} cycles ({results['global_step']} steps), "
        f"final loss: {results['final_loss']}"
    )
    if cfg.trainer.mode == "target_loss" and not results["reached_target"]:
        click.echo(f"Target loss {cfg.trainer.target_loss} was not reached.")


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to run configuration YAML file.",
)
@click.option(
    "--checkpoint",
    type=click.Path(dir_okay=False),
    default=None,
    help="Checkpoint file (default from config).",
)
@click.option(
    "--train-if-missing",
    is_flag=True,
    help="Train with the configured mode when no checkpoint exists.",
)
def play(config: str | None, checkpoint: str | None, train_if_missing: bool) -> None:
    """Play against a trained policy. The policy moves first."""
    try:
        cfg = load_run_config(config)
        if checkpoint is not None:
            cfg.checkpoint_path = checkpoint

        trainer = build_run(cfg)
        game, policy = trainer.game, trainer.policy

        if trainer.checkpoint.exists():
            trainer.checkpoint.load()
        elif train_if_missing:
            click.echo(f"No checkpoint at {Path(cfg.checkpoint_path)}; training first.")
            trainer.train()
            trainer.save_checkpoint()
        else:
            raise click.ClickException(
                f"No checkpoint at {cfg.checkpoint_path}. Run 'c4spin train' or pass --train-if-missing."
            )

        play_against_human(
            game,
            policy,
            input_fn=lambda text: click.prompt(text, prompt_suffix=""),
            output_fn=click.echo,
        )
    except C4SpinError as e:
        raise click.ClickException(str(e)) from e


@main.command()
def games() -> None:
    """List available games."""
    for name in list_games():
        info = get_game_info(name)
        click.echo(f"{name}: {info['description']} (default {info['default_size']})")


if __name__ == "__main__":
    main()
