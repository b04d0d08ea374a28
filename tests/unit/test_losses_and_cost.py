import numpy as np
import pytest

from dnnet.core import activations
from dnnet.core.cost import Cost
from dnnet.core.errors import DimensionMismatch, InvalidMode
from dnnet.core.feedforward import FeedForward
from dnnet.core.layers import NeuronLayer
from dnnet.core.losses import REGISTRY
from dnnet.core.types import LabelledDataPoint, Mode


@pytest.mark.parametrize(
    "mode, outputs, loss, activation",
    [
        (Mode.REGRESSION, 1, "mse", "linear"),
        (Mode.REGRESSION, 3, "mse", "linear"),
        (Mode.CLASSIFICATION, 1, "bce", "sigmoid"),
        (Mode.CLASSIFICATION, 3, "ce", "softmax"),
    ],
)
def test_mode_resolves_matched_pair(mode, outputs, loss, activation):
    assert REGISTRY.resolve(mode, outputs).name == loss
    assert REGISTRY.matched_activation(mode, outputs).name == activation


def test_unknown_mode_is_rejected():
    with pytest.raises(InvalidMode):
        REGISTRY.resolve("clustering", 2)
    with pytest.raises(InvalidMode):
        Mode.coerce("ranking")
    assert Mode.coerce("Classification") is Mode.CLASSIFICATION


def test_matched_output_error_is_prediction_minus_target():
    loss = REGISTRY.get("ce")
    pred = np.array([0.7, 0.2, 0.1])
    target = np.array([1.0, 0.0, 0.0])
    err = loss.output_error(pred, target, np.zeros(3), activations.softmax)
    assert np.allclose(err, pred - target)


def test_unmatched_output_error_uses_activation_derivative():
    loss = REGISTRY.get("mse")
    z = np.array([0.3, -0.4])
    pred = activations.sigmoid(z)
    target = np.array([1.0, 0.0])
    err = loss.output_error(pred, target, z, activations.sigmoid)
    assert np.allclose(err, (pred - target) * pred * (1.0 - pred))


def _one_to_one(weight: float, bias: float, activation=activations.linear):
    return FeedForward(
        [
            NeuronLayer.build(0, [1, 1], activation),
            NeuronLayer(1, 1, 1, activation, weights=np.array([[weight]]), bias=np.array([bias])),
        ]
    )


def test_regression_cost_is_half_squared_error():
    cost = Cost(Mode.REGRESSION, _one_to_one(2.0, 1.0))
    example = LabelledDataPoint([3.0], [4.0])
    assert np.isclose(cost(example), 0.5 * (7.0 - 4.0) ** 2)


def test_binary_classification_cost_is_cross_entropy():
    cost = Cost(Mode.CLASSIFICATION, _one_to_one(0.0, 0.0, activations.sigmoid))
    example = LabelledDataPoint([1.0], [1.0])
    assert np.isclose(cost(example), np.log(2.0))


def test_cost_rejects_mismatched_target():
    cost = Cost(Mode.REGRESSION, _one_to_one(1.0, 0.0))
    with pytest.raises(DimensionMismatch):
        cost(LabelledDataPoint([1.0], [1.0, 2.0]))
