"""Forward evaluation through an ordered layer sequence."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import DimensionMismatch
from .layers import NeuronLayer
from .types import ActivationTrace, Array, LabelledDataPoint


class FeedForward:
    """Map a feature vector through every layer, layer 0 first.

    Instances hold the layers they were given and never write to them, so a
    snapshot can be shared by any number of concurrent mappers. Calling the
    instance returns a :class:`LabelledDataPoint` pairing the input with its
    prediction, which is what ``predict`` maps over unlabelled data.
    """

    def __init__(self, layers: Sequence[NeuronLayer]) -> None:
        self.layers = tuple(layers)

    @property
    def input_size(self) -> int:
        return self.layers[0].size

    def check_features(self, features: Array) -> Array:
        features = np.asarray(features, dtype=np.float64).reshape(-1)
        if features.shape[0] != self.input_size:
            raise DimensionMismatch(
                f"Feature vector has length {features.shape[0]}, "
                f"network expects {self.input_size}"
            )
        return features

    def output(self, features: Array) -> Array:
        x = self.check_features(features)
        for layer in self.layers:
            x = layer.forward(x)
        return x

    def trace(self, features: Array) -> ActivationTrace:
        """Forward pass retaining ``z_l`` and ``a_l`` for every layer."""

        x = self.check_features(features)
        pre_activations: list[Array] = []
        activations: list[Array] = []
        for layer in self.layers:
            z = layer.pre_activation(x)
            x = layer.forward(x) if layer.is_input else layer.activation(z)
            pre_activations.append(z)
            activations.append(x)
        return ActivationTrace(pre_activations=pre_activations, activations=activations)

    def __call__(self, features: Array) -> LabelledDataPoint:
        return LabelledDataPoint(features=features, target=self.output(features))


__all__ = ["FeedForward"]
