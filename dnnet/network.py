"""Backpropagation neural network: construction, training and prediction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .config import TrainConfig
from .core import activations
from .core.backprop import BackPropagate, combine_gradients, scale_gradients
from .core.errors import InvalidTopography
from .core.feedforward import FeedForward
from .core.layers import NeuronLayer, snapshot_layers
from .core.losses import REGISTRY as LOSS_REGISTRY
from .core.numerical import NumericalGradient
from .core.types import Array, Mode, TrainingState
from .data.labelled import LabelledData, UnlabelledData
from .training.trainer import Trainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerComparison:
    """Mean analytic and numerical gradients of one layer."""

    layer: int
    analytic: Array
    numerical: Array

    @property
    def max_abs_diff(self) -> float:
        if self.analytic.size == 0:
            return 0.0
        return float(np.max(np.abs(self.analytic - self.numerical)))


def _validate_topography(topography: Sequence[int]) -> Tuple[int, ...]:
    sizes = tuple(int(size) for size in topography)
    if len(sizes) < 2:
        raise InvalidTopography(f"A network needs at least 2 layers, got {len(sizes)}")
    if any(size <= 0 for size in sizes):
        raise InvalidTopography(f"Layer sizes must be positive, got {list(sizes)}")
    return sizes


class BackpropagationNetwork:
    """Feed-forward network trained by mini-batch backpropagation.

    Hidden layers use the sigmoid activation. The output activation follows
    ``mode``: linear for regression, sigmoid for single-output classification
    and softmax for multi-output classification.

    Example
    -------
    >>> from dnnet.data.synthetic import separable_blobs
    >>> net = BackpropagationNetwork([2, 4, 1], Mode.CLASSIFICATION, seed=0)
    >>> epoch = net.train(separable_blobs(), TrainConfig(eta=1.0, gradient_cutoff=0.02))
    """

    def __init__(self, topography: Sequence[int], mode: Mode | str, *, seed: int = 0) -> None:
        self.topography = _validate_topography(topography)
        self.mode = Mode.coerce(mode)
        self.seed = seed
        self.layers: List[NeuronLayer] = self._init_layers()
        self.trainer: Trainer | None = None

    def _init_layers(self) -> List[NeuronLayer]:
        rng = np.random.default_rng(self.seed)
        output = LOSS_REGISTRY.matched_activation(self.mode, self.topography[-1])
        last = len(self.topography) - 1
        layers: List[NeuronLayer] = []
        for index in range(len(self.topography)):
            if index == 0:
                activation = activations.linear
            elif index == last:
                activation = output
            else:
                activation = activations.sigmoid
            layers.append(NeuronLayer.build(index, self.topography, activation, rng))
        return layers

    @property
    def state(self) -> TrainingState | None:
        return self.trainer.state if self.trainer is not None else None

    def describe(self) -> dict[str, object]:
        return {
            "topography": list(self.topography),
            "mode": self.mode.value,
            "activations": [layer.activation.name for layer in self.layers],
            "parameters": self.parameter_count(),
        }

    def parameter_count(self) -> int:
        return int(sum(layer.parameter_count() for layer in self.layers))

    def train(
        self,
        labelled_data: LabelledData,
        config: TrainConfig | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> int:
        """Train in place; return the converged epoch or ``NOT_CONVERGED``."""

        self.trainer = Trainer(self.layers, self.mode, config, callbacks)
        return self.trainer.run(labelled_data)

    def predict(self, unlabelled_data: UnlabelledData) -> LabelledData:
        feed_forward = FeedForward(snapshot_layers(self.layers))
        return LabelledData(unlabelled_data.data.map(feed_forward))

    def predict_one(self, features: Array) -> Array:
        """Prediction for a single feature vector."""

        return FeedForward(snapshot_layers(self.layers)).output(features)

    def cost(self, labelled_data: LabelledData) -> float:
        """Mean per-example cost over ``labelled_data``."""

        return Trainer(self.layers, self.mode).average_cost(labelled_data)

    def gradient_check(self, labelled_data: LabelledData) -> List[LayerComparison]:
        """Compare mean backpropagation and finite-difference gradients.

        The comparison is logged per layer at DEBUG level and returned for
        inspection; discrepancies are not raised. An empty dataset yields an
        empty report.
        """

        data = labelled_data.data
        count = data.count()
        if count == 0:
            logger.debug("Gradient check skipped: no examples")
            return []
        layers = snapshot_layers(self.layers)

        numerical = data.map(NumericalGradient(layers, self.mode)).reduce(combine_gradients)
        analytic = data.map(BackPropagate(layers, self.mode)).reduce(combine_gradients)
        numerical = scale_gradients(numerical, 1.0 / count)
        analytic = scale_gradients(analytic, 1.0 / count)

        report = []
        for index, (grad, approx) in enumerate(zip(analytic, numerical)):
            logger.debug("Derivative (backpropagation) for layer %d: %s", index, grad)
            logger.debug("Derivative (numerical) for layer %d:       %s", index, approx)
            report.append(LayerComparison(layer=index, analytic=grad, numerical=approx))
        return report


__all__ = ["BackpropagationNetwork", "LayerComparison"]
