"""Scalar loss of a single example."""

from __future__ import annotations

from .backprop import check_target
from .feedforward import FeedForward
from .losses import REGISTRY as LOSS_REGISTRY
from .types import LabelledDataPoint, Mode


class Cost:
    """Evaluate the mode's loss for one example on the bound layer weights.

    REGRESSION uses ``0.5 * ||prediction - target||^2``; CLASSIFICATION uses
    cross-entropy (softmax outputs) or binary cross-entropy (a single sigmoid
    output).
    """

    def __init__(self, mode: Mode | str, feed_forward: FeedForward) -> None:
        self.mode = Mode.coerce(mode)
        self.feed_forward = feed_forward
        self.loss = LOSS_REGISTRY.resolve(self.mode, feed_forward.layers[-1].size)

    def __call__(self, example: LabelledDataPoint) -> float:
        check_target(self.feed_forward.layers, example.target)
        prediction = self.feed_forward.output(example.features)
        return self.loss(prediction, example.target)


__all__ = ["Cost"]
