"""Transfer functions used by neuron layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from .types import Array

VectorFn = Callable[[Array], Array]


@dataclass(frozen=True)
class TransferFunction:
    """A named activation with its elementwise derivative.

    ``derivative`` is evaluated at the pre-activation ``z``.
    """

    name: str
    fn: VectorFn
    derivative: VectorFn

    def __call__(self, z: Array) -> Array:
        return self.fn(z)


def _linear(z: Array) -> Array:
    return np.array(z, dtype=np.float64)


def _linear_deriv(z: Array) -> Array:
    return np.ones_like(z, dtype=np.float64)


def _sigmoid(z: Array) -> Array:
    return 1.0 / (1.0 + np.exp(-z))


def _sigmoid_deriv(z: Array) -> Array:
    s = _sigmoid(z)
    return s * (1.0 - s)


def _softmax(z: Array) -> Array:
    shifted = z - np.max(z)
    exp = np.exp(shifted)
    return exp / np.sum(exp)


def _softmax_deriv(z: Array) -> Array:
    # Diagonal of the Jacobian; the full Jacobian is only needed when softmax is
    # paired with a loss other than cross-entropy.
    s = _softmax(z)
    return s * (1.0 - s)


_REGISTRY: Dict[str, TransferFunction] = {}


def register(name: str, fn: VectorFn, derivative: VectorFn) -> TransferFunction:
    transfer = TransferFunction(name, fn, derivative)
    _REGISTRY[name] = transfer
    return transfer


def get(name: str) -> TransferFunction:
    try:
        return _REGISTRY[name]
    except KeyError as exc:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown transfer function {name!r}. Available: {available}") from exc


def names() -> Iterable[str]:
    return sorted(_REGISTRY)


linear = register("linear", _linear, _linear_deriv)
sigmoid = register("sigmoid", _sigmoid, _sigmoid_deriv)
softmax = register("softmax", _softmax, _softmax_deriv)

__all__ = ["TransferFunction", "get", "names", "register", "linear", "sigmoid", "softmax"]
