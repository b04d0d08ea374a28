"""Immutable training configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class TrainConfig:
    """Read-only inputs to the training loop.

    Attributes
    ----------
    eta:
        Learning rate applied to the mean mini-batch gradient.
    max_epochs:
        Epoch cap; training that has not converged by then is exhausted.
    gradient_cutoff:
        Convergence threshold on the absolute value of every gradient entry.
    num_batches:
        Mini-batches drawn per epoch.
    cost_every:
        Full-dataset cost is reported every ``cost_every`` epochs.
    seed:
        Seed for the sampling random stream.
    """

    eta: float = 0.5
    max_epochs: int = 1000
    gradient_cutoff: float = 1e-3
    num_batches: int = 10
    cost_every: int = 10
    seed: int = 0

    def __post_init__(self) -> None:
        if not self.eta > 0:
            raise ValueError(f"eta must be positive, got {self.eta}")
        if self.max_epochs < 1:
            raise ValueError(f"max_epochs must be at least 1, got {self.max_epochs}")
        if self.gradient_cutoff < 0:
            raise ValueError(f"gradient_cutoff must be non-negative, got {self.gradient_cutoff}")
        if self.num_batches < 1:
            raise ValueError(f"num_batches must be at least 1, got {self.num_batches}")
        if self.cost_every < 1:
            raise ValueError(f"cost_every must be at least 1, got {self.cost_every}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "TrainConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(f"Unknown training options: {', '.join(unknown)}")
        return cls(**dict(mapping))

    def replace(self, **changes: Any) -> "TrainConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["TrainConfig"]
