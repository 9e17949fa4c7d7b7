"""
Run Configuration

Dataclass-based configuration for a training or play run, loadable from YAML.
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError
from .games import DEFAULT_REWARD_SCALE
from .models import DEFAULT_HIDDEN_SIZES
from .training import DEFAULT_CHECKPOINT_PATH, TrainerConfig


@dataclass
class GameConfig:
    """Which game to play and how rewards are scaled."""

    name: str = "connect-4-spin"
    columns: int = 5
    rows: int = 8
    reward_scale: float = DEFAULT_REWARD_SCALE  # K in K / turn_count
    seed: int | None = None  # seed for the spin coin flip


@dataclass
class ModelConfig:
    """Policy network shape."""

    hidden_sizes: list[int] = field(default_factory=lambda: list(DEFAULT_HIDDEN_SIZES))


@dataclass
class OptimizerConfig:
    """Optimizer settings."""

    type: str = "sgd"
    learning_rate: float = 0.1
    weight_decay: float = 0.0
    momentum: float = 0.0
    grad_clip: float | None = None


@dataclass
class RunConfig:
    """Complete configuration for a run."""

    game: GameConfig = field(default_factory=GameConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    trainer: TrainerConfig = field(default_factory=TrainerConfig)

    # Output settings
    checkpoint_path: str = DEFAULT_CHECKPOINT_PATH
    log_path: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunConfig":
        """Build a config from nested dictionaries, rejecting unknown keys."""
        data = dict(data or {})
        game = _build(GameConfig, data.pop("game", {}), "game")
        model = _build(ModelConfig, data.pop("model", {}), "model")
        optimizer = _build(OptimizerConfig, data.pop("optimizer", {}), "optimizer")
        trainer = _build(TrainerConfig, data.pop("trainer", {}), "trainer")

        unknown = set(data) - {"checkpoint_path", "log_path"}
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        return cls(game=game, model=model, optimizer=optimizer, trainer=trainer, **data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RunConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not read configuration {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationError(f"Configuration {path} must be a mapping")
        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _build(config_cls, data: dict[str, Any] | None, section: str):
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping")

    known = {f.name for f in fields(config_cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in '{section}': {', '.join(sorted(unknown))}"
        )
    return config_cls(**data)
