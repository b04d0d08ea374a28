import logging

import numpy as np
import pytest

from dnnet import (
    NOT_CONVERGED,
    BackpropagationNetwork,
    DimensionMismatch,
    FeedForward,
    InvalidMode,
    InvalidTopography,
    LabelledData,
    LabelledDataPoint,
    Mode,
    TrainConfig,
    TrainingState,
    UnlabelledData,
)


def test_topography_validation():
    with pytest.raises(InvalidTopography):
        BackpropagationNetwork([3], Mode.REGRESSION)
    with pytest.raises(InvalidTopography):
        BackpropagationNetwork([2, 0, 1], Mode.REGRESSION)
    with pytest.raises(InvalidMode):
        BackpropagationNetwork([2, 1], "ranking")


@pytest.mark.parametrize(
    "topography, mode, activations",
    [
        ([2, 3, 1], Mode.REGRESSION, ["linear", "sigmoid", "linear"]),
        ([2, 4, 1], Mode.CLASSIFICATION, ["linear", "sigmoid", "sigmoid"]),
        ([4, 5, 3, 3], "classification", ["linear", "sigmoid", "sigmoid", "softmax"]),
    ],
)
def test_layer_activations_follow_mode(topography, mode, activations):
    net = BackpropagationNetwork(topography, mode)
    description = net.describe()
    assert description["activations"] == activations
    assert description["topography"] == topography
    expected = sum(topography[i] * (topography[i - 1] + 1) for i in range(1, len(topography)))
    assert net.parameter_count() == expected


def test_initialisation_is_deterministic_per_seed():
    a = BackpropagationNetwork([3, 4, 2], Mode.REGRESSION, seed=5)
    b = BackpropagationNetwork([3, 4, 2], Mode.REGRESSION, seed=5)
    c = BackpropagationNetwork([3, 4, 2], Mode.REGRESSION, seed=6)
    assert all(np.array_equal(x.weights, y.weights) for x, y in zip(a.layers, b.layers))
    assert not np.array_equal(a.layers[1].weights, c.layers[1].weights)


def test_feed_forward_is_bit_for_bit_deterministic():
    net = BackpropagationNetwork([3, 5, 4, 2], Mode.CLASSIFICATION, seed=9)
    x = np.array([0.3, -1.2, 2.5])
    first = FeedForward(net.layers).output(x)
    second = FeedForward(net.layers).output(x)
    assert np.array_equal(first, second)
    trace = FeedForward(net.layers).trace(x)
    assert np.array_equal(trace.output, first)
    assert len(trace.pre_activations) == len(trace.activations) == 4
    assert np.array_equal(trace.activations[0], x)


def test_predict_on_untrained_identity_network():
    net = BackpropagationNetwork([1, 1], Mode.REGRESSION, seed=0)
    layer = net.layers[1]
    inputs = np.array([-1.0, 0.5, 3.0])

    predictions = net.predict(UnlabelledData.from_array(inputs)).data.collect()

    assert len(predictions) == 3
    for point, x in zip(predictions, inputs):
        assert np.array_equal(point.features, [x])
        assert np.allclose(point.target, layer.weights[0, 0] * x + layer.bias[0])


def test_predict_rejects_wrong_feature_length():
    net = BackpropagationNetwork([2, 3, 1], Mode.REGRESSION)
    with pytest.raises(DimensionMismatch):
        net.predict(UnlabelledData.from_array(np.ones((2, 3))))


@pytest.mark.parametrize(
    "bad_point",
    [
        LabelledDataPoint(np.ones(3), np.zeros(1)),
        LabelledDataPoint(np.ones(2), np.zeros(2)),
    ],
)
def test_train_fails_fast_on_one_malformed_row_without_touching_weights(bad_point):
    net = BackpropagationNetwork([2, 3, 1], Mode.REGRESSION, seed=1)
    before = [(layer.weights.copy(), layer.bias.copy()) for layer in net.layers]
    rng = np.random.default_rng(1)
    good = LabelledData.from_arrays(rng.standard_normal((200, 2)), rng.standard_normal(200))
    data = LabelledData.from_points(good.data.collect() + [bad_point])

    with pytest.raises(DimensionMismatch):
        net.train(data, TrainConfig(max_epochs=2))
    for layer, (weights, bias) in zip(net.layers, before):
        assert np.array_equal(layer.weights, weights)
        assert np.array_equal(layer.bias, bias)


def test_exhausted_training_returns_sentinel():
    net = BackpropagationNetwork([2, 3, 1], Mode.REGRESSION, seed=0)
    data = LabelledData.from_arrays(np.random.default_rng(0).standard_normal((30, 2)), np.ones(30))
    result = net.train(data, TrainConfig(max_epochs=3, gradient_cutoff=0.0))
    assert result == NOT_CONVERGED
    assert net.state is TrainingState.EXHAUSTED
    assert net.trainer.epoch == 3


def test_gradient_check_reports_agreement(caplog):
    net = BackpropagationNetwork([2, 3, 1], Mode.REGRESSION, seed=2)
    rng = np.random.default_rng(2)
    data = LabelledData.from_arrays(rng.standard_normal((8, 2)), rng.standard_normal(8))

    with caplog.at_level(logging.DEBUG, logger="dnnet"):
        report = net.gradient_check(data)

    assert [entry.layer for entry in report] == [0, 1, 2]
    assert all(entry.max_abs_diff < 1e-6 for entry in report)
    assert report[1].analytic.shape == (3, 3)
    assert "Derivative (numerical) for layer 2" in caplog.text


def test_gradient_check_on_empty_data_returns_empty_report():
    net = BackpropagationNetwork([2, 3, 1], Mode.REGRESSION, seed=2)
    empty = LabelledData.from_points([])
    assert net.gradient_check(empty) == []
