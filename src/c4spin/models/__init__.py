"""Move-scoring policies."""

from .base import MovePolicy, Policy
from .mlp import DEFAULT_HIDDEN_SIZES, SpinMLP, create_policy

__all__ = [
    "Policy",
    "MovePolicy",
    "SpinMLP",
    "DEFAULT_HIDDEN_SIZES",
    "create_policy",
]
