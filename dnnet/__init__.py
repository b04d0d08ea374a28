"""dnnet public API."""

import logging

from .config import TrainConfig
from .core import activations  # noqa: F401
from .core.backprop import BackPropagate, combine_gradients
from .core.cost import Cost
from .core.errors import (
    DimensionMismatch,
    DistributedExecutionFailure,
    DnnetError,
    InvalidMode,
    InvalidTopography,
)
from .core.feedforward import FeedForward
from .core.layers import NeuronLayer
from .core.numerical import EPSILON, NumericalGradient
from .core.types import NOT_CONVERGED, LabelledDataPoint, Mode, TrainingState
from .data import LabelledData, LocalCollection, UnlabelledData
from .network import BackpropagationNetwork, LayerComparison
from .training import Trainer, is_converged

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BackPropagate",
    "BackpropagationNetwork",
    "Cost",
    "DimensionMismatch",
    "DistributedExecutionFailure",
    "DnnetError",
    "EPSILON",
    "FeedForward",
    "InvalidMode",
    "InvalidTopography",
    "LabelledData",
    "LabelledDataPoint",
    "LayerComparison",
    "LocalCollection",
    "Mode",
    "NOT_CONVERGED",
    "NeuronLayer",
    "NumericalGradient",
    "TrainConfig",
    "Trainer",
    "TrainingState",
    "UnlabelledData",
    "activations",
    "combine_gradients",
    "is_converged",
]
