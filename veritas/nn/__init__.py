"""`nn`: minimal layers and losses on top of `veritas.tensor`."""

from .layers import MLP, Linear
from .loss import mse_loss, mse_loss_backward

__all__ = ["Linear", "MLP", "mse_loss", "mse_loss_backward"]
