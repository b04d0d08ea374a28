"""Core typing contracts for dnnet."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .errors import InvalidMode

Array = np.ndarray

# One array per layer, index-aligned with the network's layers.
GradientBundle = Tuple[Array, ...]

NOT_CONVERGED = -1


class Mode(enum.Enum):
    """Execution mode; selects the output activation and the loss."""

    REGRESSION = "regression"
    CLASSIFICATION = "classification"

    @classmethod
    def coerce(cls, value: "Mode | str") -> "Mode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            available = ", ".join(m.value for m in cls)
            raise InvalidMode(f"Unknown mode {value!r}. Available modes: {available}") from exc


class TrainingState(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


def as_vector(values) -> Array:
    """Return ``values`` as a read-only, contiguous float64 vector."""

    vector = np.array(values, dtype=np.float64).reshape(-1)
    vector.setflags(write=False)
    return vector


@dataclass(frozen=True, eq=False)
class LabelledDataPoint:
    """A single ``(features, target)`` example."""

    features: Array
    target: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", as_vector(self.features))
        object.__setattr__(self, "target", as_vector(self.target))


@dataclass
class ActivationTrace:
    """Intermediate values captured during a traced forward pass.

    ``pre_activations[l]`` is ``z_l`` and ``activations[l]`` is ``a_l``; for the
    input layer both hold the raw features.
    """

    pre_activations: List[Array]
    activations: List[Array]

    @property
    def output(self) -> Array:
        return self.activations[-1]


__all__ = [
    "Array",
    "GradientBundle",
    "NOT_CONVERGED",
    "Mode",
    "TrainingState",
    "LabelledDataPoint",
    "ActivationTrace",
    "as_vector",
]
