"""
Optimizer Factory and Optimizer Step

The trainer hands each (predicted, target) pair to an OptimizerStep, which
computes the loss and updates the policy parameters.
"""

from typing import Any, Protocol, runtime_checkable

import torch
from torch import Tensor
from torch.optim import SGD, Adam, AdamW, Optimizer

from .losses import target_mse_loss


@runtime_checkable
class OptimizerStep(Protocol):
    """Protocol for one loss computation plus parameter update."""

    def step(self, predicted: Tensor, target: Tensor) -> float:
        """
        Args:
            predicted: Policy output with gradients attached.
            target: Target vector.

        Returns:
            The scalar loss value.
        """
        ...


def create_optimizer(
    params,
    optimizer_type: str = "sgd",
    learning_rate: float = 0.1,
    weight_decay: float = 0.0,
    momentum: float = 0.0,
    betas: tuple[float, float] = (0.9, 0.999),
    **kwargs: Any,
) -> Optimizer:
    """
    Creates an optimizer from configuration.

    Args:
        params: Model parameters to optimize.
        optimizer_type: One of "sgd", "adam", "adamw".
        learning_rate: Initial learning rate.
        weight_decay: L2 regularization weight.
        momentum: Momentum for SGD.
        betas: Beta parameters for Adam/AdamW.
        **kwargs: Additional optimizer-specific arguments.

    Returns:
        Configured optimizer instance.

    Raises:
        ValueError: If optimizer_type is not recognized.
    """
    optimizer_type = optimizer_type.lower()

    if optimizer_type == "sgd":
        return SGD(
            params,
            lr=learning_rate,
            momentum=momentum,
            weight_decay=weight_decay,
            **kwargs,
        )
    elif optimizer_type == "adam":
        return Adam(
            params,
            lr=learning_rate,
            betas=betas,
            weight_decay=weight_decay,
            **kwargs,
        )
    elif optimizer_type == "adamw":
        return AdamW(
            params,
            lr=learning_rate,
            betas=betas,
            weight_decay=weight_decay,
            **kwargs,
        )
    else:
        raise ValueError(
            f"Unknown optimizer type: {optimizer_type}. "
            "Supported: sgd, adam, adamw"
        )


class MSEOptimizerStep:
    """
    Optimizer step with MSE loss.

    Wraps a torch optimizer: zero gradients, compute loss, backward, clip,
    step.
    """

    def __init__(self, optimizer: Optimizer, grad_clip: float | None = None):
        """
        Args:
            optimizer: Optimizer over the policy's parameters.
            grad_clip: Max gradient norm, or None to disable clipping.
        """
        self.optimizer = optimizer
        self.grad_clip = grad_clip

    def step(self, predicted: Tensor, target: Tensor) -> float:
        self.optimizer.zero_grad()
        loss = target_mse_loss(predicted, target)
        loss.backward()

        if self.grad_clip is not None:
            params = [p for group in self.optimizer.param_groups for p in group["params"]]
            torch.nn.utils.clip_grad_norm_(params, self.grad_clip)

        self.optimizer.step()
        return loss.item()

    @property
    def learning_rate(self) -> float:
        return get_current_lr(self.optimizer)


def get_current_lr(optimizer: Optimizer) -> float:
    """Gets the current learning rate from an optimizer."""
    return optimizer.param_groups[0]["lr"]
