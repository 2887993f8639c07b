"""`optim`: in-place parameter updates from manually threaded gradients."""

from .adam import Adam
from .base import Optimizer
from .sgd import SGD

__all__ = ["Optimizer", "SGD", "Adam"]
