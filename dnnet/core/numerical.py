"""Finite-difference gradients used to verify backpropagation."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .cost import Cost
from .feedforward import FeedForward
from .layers import NeuronLayer, snapshot_layers
from .types import Array, GradientBundle, LabelledDataPoint, Mode

# Central differences have O(EPSILON**2) truncation error, so analytic and
# numerical gradients should agree to roughly 1e-8 on well-scaled networks.
EPSILON = 1e-4


class NumericalGradient:
    """Estimate each weight's partial derivative by central differences.

    Every weight and bias entry is perturbed by ``+/- epsilon`` on a private
    copy of the layers and the example cost re-evaluated, which costs two
    forward passes per parameter. The bundle layout matches
    :class:`~dnnet.core.backprop.BackPropagate`.
    """

    def __init__(
        self,
        layers: Sequence[NeuronLayer],
        mode: Mode | str,
        epsilon: float = EPSILON,
    ) -> None:
        self.layers = tuple(layers)
        self.mode = Mode.coerce(mode)
        self.epsilon = float(epsilon)

    def __call__(self, example: LabelledDataPoint) -> GradientBundle:
        layers = snapshot_layers(self.layers)
        cost = Cost(self.mode, FeedForward(layers))
        cost.feed_forward.check_features(example.features)

        grads: list[Array] = [layers[0].zero_gradient()]
        for layer in layers[1:]:
            grad = layer.zero_gradient()
            for idx in np.ndindex(*layer.gradient_shape):
                grad[idx] = self._partial(layer, idx, cost, example)
            grads.append(grad)
        return tuple(grads)

    def _partial(
        self,
        layer: NeuronLayer,
        idx: tuple[int, ...],
        cost: Cost,
        example: LabelledDataPoint,
    ) -> float:
        step = layer.zero_gradient()
        step[idx] = self.epsilon

        layer.update_weights(step)
        plus = cost(example)
        layer.update_weights(-2.0 * step)
        minus = cost(example)
        layer.update_weights(step)
        return (plus - minus) / (2.0 * self.epsilon)


__all__ = ["EPSILON", "NumericalGradient"]
