"""Per-example losses and their pairing with output activations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from . import activations
from .activations import TransferFunction
from .errors import InvalidMode
from .types import Array, Mode

LossFn = Callable[[Array, Array], float]
LossGrad = Callable[[Array, Array], Array]

_EPS = 1e-12


@dataclass(frozen=True)
class Loss:
    """Loss wrapper with its derivative w.r.t. the prediction.

    ``matched`` names the output activation for which the output-layer error
    collapses to ``prediction - target``.
    """

    name: str
    fn: LossFn
    grad: LossGrad
    matched: str

    def __call__(self, prediction: Array, target: Array) -> float:
        return self.fn(prediction, target)

    def output_error(
        self,
        prediction: Array,
        target: Array,
        pre_activation: Array,
        activation: TransferFunction,
    ) -> Array:
        """Return ``dL/dz`` for the output layer."""

        if activation.name == self.matched:
            return prediction - target
        return self.grad(prediction, target) * activation.derivative(pre_activation)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: LossFn, grad: LossGrad, matched: str) -> None:
        self._registry[name] = Loss(name, fn, grad, matched)

    def get(self, name: str) -> Loss:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown loss {name!r}. Available losses: {available}")
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def resolve(self, mode: Mode | str, output_size: int) -> Loss:
        """Return the loss paired with the output activation of ``mode``."""

        activation = self.matched_activation(mode, output_size)
        for loss in self._registry.values():
            if loss.matched == activation.name:
                return loss
        raise InvalidMode(f"No loss registered for output activation {activation.name!r}")

    @staticmethod
    def matched_activation(mode: Mode | str, output_size: int) -> TransferFunction:
        """Return the output activation a network in ``mode`` uses."""

        mode = Mode.coerce(mode)
        if mode is Mode.REGRESSION:
            return activations.linear
        if mode is Mode.CLASSIFICATION:
            if output_size > 1:
                return activations.softmax
            if output_size == 1:
                return activations.sigmoid
        raise InvalidMode(f"No output activation for mode {mode.value!r} with {output_size} outputs")


REGISTRY = LossRegistry()


def _mse(pred: Array, target: Array) -> float:
    diff = pred - target
    return float(0.5 * np.dot(diff, diff))


def _mse_grad(pred: Array, target: Array) -> Array:
    return pred - target


def _cross_entropy(pred: Array, target: Array) -> float:
    probs = np.clip(pred, _EPS, 1.0)
    return float(-np.sum(target * np.log(probs)))


def _cross_entropy_grad(pred: Array, target: Array) -> Array:
    return -target / np.clip(pred, _EPS, 1.0)


def _bce(pred: Array, target: Array) -> float:
    probs = np.clip(pred, _EPS, 1.0 - _EPS)
    return float(-np.sum(target * np.log(probs) + (1.0 - target) * np.log(1.0 - probs)))


def _bce_grad(pred: Array, target: Array) -> Array:
    probs = np.clip(pred, _EPS, 1.0 - _EPS)
    return (probs - target) / (probs * (1.0 - probs))


REGISTRY.register("mse", _mse, _mse_grad, matched="linear")
REGISTRY.register("ce", _cross_entropy, _cross_entropy_grad, matched="softmax")
REGISTRY.register("bce", _bce, _bce_grad, matched="sigmoid")

__all__ = ["Loss", "LossRegistry", "REGISTRY"]
