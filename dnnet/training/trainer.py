"""Mini-batch backpropagation training loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..config import TrainConfig
from ..core.backprop import BackPropagate, check_target, combine_gradients, scale_gradients
from ..core.cost import Cost
from ..core.errors import DimensionMismatch
from ..core.feedforward import FeedForward
from ..core.layers import NeuronLayer, snapshot_layers
from ..core.types import NOT_CONVERGED, GradientBundle, LabelledDataPoint, Mode, TrainingState
from ..data.collection import ParallelCollection
from ..data.labelled import LabelledData
from .batching import epoch_working_set, mini_batches
from .convergence import is_converged

logger = logging.getLogger(__name__)


@dataclass
class SGDOptimizer:
    """Plain gradient descent: ``W <- W - eta * g`` through each layer."""

    eta: float

    def step(self, layers: Sequence[NeuronLayer], grads: GradientBundle) -> None:
        if len(layers) != len(grads):
            raise DimensionMismatch(
                f"Gradient bundle has {len(grads)} entries for {len(layers)} layers"
            )
        for layer, grad in zip(layers, grads):
            layer.update_weights(-self.eta * grad)


def _collection(data: LabelledData | ParallelCollection[LabelledDataPoint]):
    return data.data if isinstance(data, LabelledData) else data


class Trainer:
    """Run epochs of mini-batch updates until convergence or the epoch cap.

    ``layers`` are updated in place. Mappers only ever see a snapshot of the
    weights taken before each batch; the optimizer writes the live layers
    after the batch's reduction has finished.
    """

    def __init__(
        self,
        layers: Sequence[NeuronLayer],
        mode: Mode | str,
        config: TrainConfig | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.layers = list(layers)
        self.mode = Mode.coerce(mode)
        self.config = config or TrainConfig()
        self.optimizer = SGDOptimizer(eta=self.config.eta)
        self.callbacks = list(callbacks or [])
        self.state = TrainingState.RUNNING
        self.epoch = 0
        self.last_gradients: GradientBundle | None = None

    def run(self, data: LabelledData | ParallelCollection[LabelledDataPoint]) -> int:
        """Train on ``data``; return the epoch that converged or ``NOT_CONVERGED``."""

        complete = _collection(data).cache()
        config = self.config
        rng = np.random.default_rng(config.seed)
        self.state = TrainingState.RUNNING

        logger.info("Learning rate = %s", config.eta)
        logger.info("Maximum epochs = %d", config.max_epochs)
        self.validate(complete)

        for epoch in range(1, config.max_epochs + 1):
            self.epoch = epoch
            working_set = epoch_working_set(complete, rng)
            for batch_index, batch in enumerate(mini_batches(working_set, config.num_batches, rng)):
                gradients = self.train_batch(batch)
                if gradients is None:
                    logger.debug("Epoch %d batch %d is empty; skipped", epoch, batch_index)
                    continue
                if is_converged(gradients, config.gradient_cutoff):
                    self.state = TrainingState.CONVERGED
                    logger.info("Converged at epoch %d (batch %d)", epoch, batch_index)
                    return epoch

            if epoch % config.cost_every == 0:
                cost = self.average_cost(complete)
                logger.debug("Completed %d epochs; cost = %.6g", epoch, cost)
                self._emit_epoch(epoch, {"cost": cost})

        self.state = TrainingState.EXHAUSTED
        logger.info("Did not converge within %d epochs", config.max_epochs)
        return NOT_CONVERGED

    def validate(self, data: ParallelCollection[LabelledDataPoint]) -> None:
        """Raise ``DimensionMismatch`` if any example does not fit the layers."""

        feed_forward = FeedForward(self.layers)

        def check(example: LabelledDataPoint) -> None:
            feed_forward.check_features(example.features)
            check_target(self.layers, example.target)

        data.map(check).collect()

    def train_batch(self, batch: ParallelCollection[LabelledDataPoint]) -> GradientBundle | None:
        """Apply one mean-gradient update; return the mean gradient used."""

        batch_size = batch.count()
        if batch_size == 0:
            return None
        backprop = BackPropagate(snapshot_layers(self.layers), self.mode)
        total = batch.map(backprop).reduce(combine_gradients)
        gradients = scale_gradients(total, 1.0 / batch_size)
        self.optimizer.step(self.layers, gradients)
        self.last_gradients = gradients
        return gradients

    def average_cost(self, data: LabelledData | ParallelCollection[LabelledDataPoint]) -> float:
        collection = _collection(data)
        cost = Cost(self.mode, FeedForward(snapshot_layers(self.layers)))
        costs = collection.map(cost).collect()
        if not costs:
            return float("nan")
        return float(np.mean(costs))

    def _emit_epoch(self, epoch: int, metrics: dict[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["SGDOptimizer", "Trainer"]
