"""Training loop, mini-batch sampling and convergence."""

from .convergence import is_converged
from .trainer import SGDOptimizer, Trainer

__all__ = ["SGDOptimizer", "Trainer", "is_converged"]
