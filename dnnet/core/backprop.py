"""Per-example backpropagation and the gradient reduction operator."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import DimensionMismatch
from .feedforward import FeedForward
from .layers import NeuronLayer
from .losses import REGISTRY as LOSS_REGISTRY
from .losses import Loss
from .types import Array, GradientBundle, LabelledDataPoint, Mode


def combine_gradients(first: GradientBundle, second: GradientBundle) -> GradientBundle:
    """Sum two gradient bundles entry by entry.

    The sum is associative and commutative up to floating-point rounding, so
    partitions may be reduced in any order; different orders can differ in
    the last bits.
    """

    if len(first) != len(second):
        raise DimensionMismatch(
            f"Cannot combine gradient bundles of {len(first)} and {len(second)} layers"
        )
    combined = []
    for idx, (a, b) in enumerate(zip(first, second)):
        if a.shape != b.shape:
            raise DimensionMismatch(f"Layer {idx}: gradient shapes {a.shape} and {b.shape} differ")
        combined.append(a + b)
    return tuple(combined)


def scale_gradients(bundle: GradientBundle, factor: float) -> GradientBundle:
    return tuple(grad * factor for grad in bundle)


def check_target(layers: Sequence[NeuronLayer], target: Array) -> None:
    expected = layers[-1].size
    if target.shape[0] != expected:
        raise DimensionMismatch(
            f"Target vector has length {target.shape[0]}, network expects {expected}"
        )


class BackPropagate:
    """Compute the gradient of one example's loss w.r.t. every layer.

    Each non-input entry of the returned bundle is ``[delta_l (x) a_{l-1} | delta_l]``:
    the weight gradient with the bias gradient appended as a last column.
    """

    def __init__(
        self,
        layers: Sequence[NeuronLayer],
        mode: Mode | str,
        loss: Loss | None = None,
    ) -> None:
        self.layers = tuple(layers)
        self.mode = Mode.coerce(mode)
        self.loss = loss or LOSS_REGISTRY.resolve(self.mode, self.layers[-1].size)
        self.feed_forward = FeedForward(self.layers)

    def __call__(self, example: LabelledDataPoint) -> GradientBundle:
        features = self.feed_forward.check_features(example.features)
        check_target(self.layers, example.target)
        trace = self.feed_forward.trace(features)

        last = len(self.layers) - 1
        output_layer = self.layers[last]
        delta = self.loss.output_error(
            trace.output,
            example.target,
            trace.pre_activations[last],
            output_layer.activation,
        )

        grads: list[Array] = [np.empty(0)] * len(self.layers)
        grads[0] = self.layers[0].zero_gradient()
        for idx in range(last, 0, -1):
            grads[idx] = np.column_stack([np.outer(delta, trace.activations[idx - 1]), delta])
            if idx > 1:
                below = self.layers[idx - 1]
                delta = (self.layers[idx].weights.T @ delta) * below.activation.derivative(
                    trace.pre_activations[idx - 1]
                )
        return tuple(grads)

    @staticmethod
    def combine(first: GradientBundle, second: GradientBundle) -> GradientBundle:
        return combine_gradients(first, second)


__all__ = ["BackPropagate", "combine_gradients", "scale_gradients", "check_target"]
