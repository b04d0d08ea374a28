"""Neuron layers: the only owners of network weights."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .activations import TransferFunction, linear
from .errors import DimensionMismatch
from .types import Array


@dataclass(eq=False)
class NeuronLayer:
    """One layer of the network.

    ``weights`` has shape ``(size, previous_size)`` and ``bias`` shape
    ``(size,)``. The input layer (``index == 0``) carries an empty
    ``(size, 0)`` weight matrix and passes its input through unchanged.
    """

    index: int
    size: int
    previous_size: int
    activation: TransferFunction = linear
    weights: Array = field(default=None, repr=False)  # type: ignore[assignment]
    bias: Array = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.weights is None:
            self.weights = np.zeros((self.size, self.previous_size), dtype=np.float64)
        if self.bias is None:
            self.bias = np.zeros(self.size, dtype=np.float64)
        self.weights = np.asarray(self.weights, dtype=np.float64)
        self.bias = np.asarray(self.bias, dtype=np.float64).reshape(-1)
        if self.weights.shape != (self.size, self.previous_size):
            raise DimensionMismatch(
                f"Layer {self.index}: weights have shape {self.weights.shape}, "
                f"expected {(self.size, self.previous_size)}"
            )
        if self.bias.shape != (self.size,):
            raise DimensionMismatch(
                f"Layer {self.index}: bias has shape {self.bias.shape}, expected {(self.size,)}"
            )

    @classmethod
    def build(
        cls,
        index: int,
        topography: Sequence[int],
        activation: TransferFunction,
        rng: np.random.Generator | None = None,
    ) -> "NeuronLayer":
        """Allocate layer ``index`` of ``topography`` with Glorot-uniform weights."""

        size = int(topography[index])
        if index == 0:
            return cls(index=0, size=size, previous_size=0, activation=linear)
        previous = int(topography[index - 1])
        rng = rng or np.random.default_rng(0)
        limit = np.sqrt(6.0 / (previous + size))
        weights = rng.uniform(-limit, limit, size=(size, previous))
        return cls(
            index=index,
            size=size,
            previous_size=previous,
            activation=activation,
            weights=weights,
        )

    @property
    def is_input(self) -> bool:
        return self.index == 0

    @property
    def gradient_shape(self) -> tuple[int, int]:
        """Shape of this layer's entry in a gradient bundle (bias folded in)."""

        if self.is_input:
            return (self.size, 0)
        return (self.size, self.previous_size + 1)

    def parameter_count(self) -> int:
        if self.is_input:
            return 0
        return int(self.weights.size + self.bias.size)

    def pre_activation(self, inputs: Array) -> Array:
        if self.is_input:
            return np.array(inputs, dtype=np.float64)
        return self.weights @ inputs + self.bias

    def forward(self, inputs: Array) -> Array:
        if self.is_input:
            return np.array(inputs, dtype=np.float64)
        return self.activation(self.pre_activation(inputs))

    def update_weights(self, delta: Array) -> None:
        """Add ``delta`` (weights columns then a bias column) in place."""

        delta = np.asarray(delta, dtype=np.float64)
        if delta.shape != self.gradient_shape:
            raise DimensionMismatch(
                f"Layer {self.index}: update has shape {delta.shape}, "
                f"expected {self.gradient_shape}"
            )
        if self.is_input:
            return
        self.weights += delta[:, :-1]
        self.bias += delta[:, -1]

    def zero_gradient(self) -> Array:
        return np.zeros(self.gradient_shape, dtype=np.float64)

    def snapshot(self) -> "NeuronLayer":
        """Return a copy that is safe to hand to concurrent readers."""

        return NeuronLayer(
            index=self.index,
            size=self.size,
            previous_size=self.previous_size,
            activation=self.activation,
            weights=self.weights.copy(),
            bias=self.bias.copy(),
        )


def snapshot_layers(layers: Sequence[NeuronLayer]) -> tuple[NeuronLayer, ...]:
    return tuple(layer.snapshot() for layer in layers)


__all__ = ["NeuronLayer", "snapshot_layers"]
