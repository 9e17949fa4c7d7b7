"""
Loss Functions for Policy Training

Targets are sparse: zero everywhere except the reinforced move. An L2 loss
pulls the reinforced space towards its target and all others towards zero.
"""

import torch.nn.functional as F
from torch import Tensor


def target_mse_loss(predicted: Tensor, target: Tensor) -> Tensor:
    """
    MSE loss between predicted scores and a target vector.

    Args:
        predicted: (space_count,) or (1, space_count) scores from the policy.
        target: (space_count,) target vector.

    Returns:
        Scalar loss tensor.
    """
    # Ensure consistent shapes
    predicted = predicted.view(-1)
    target = target.view(-1).to(predicted.dtype)

    if predicted.shape != target.shape:
        raise ValueError(
            f"Prediction shape {tuple(predicted.shape)} does not match "
            f"target shape {tuple(target.shape)}"
        )

    return F.mse_loss(predicted, target)

