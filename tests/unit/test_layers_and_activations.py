import numpy as np
import pytest

from dnnet.core import activations
from dnnet.core.errors import DimensionMismatch
from dnnet.core.layers import NeuronLayer


def test_transfer_function_factory():
    z = np.array([-1.0, 0.0, 2.0])
    assert np.allclose(activations.get("linear")(z), z)
    assert np.allclose(activations.get("sigmoid")(np.zeros(3)), 0.5)
    probs = activations.get("softmax")(z)
    assert np.isclose(probs.sum(), 1.0)
    assert np.argmax(probs) == 2
    assert np.allclose(activations.sigmoid.derivative(np.zeros(2)), 0.25)
    with pytest.raises(KeyError):
        activations.get("tanh")


def test_softmax_is_shift_invariant():
    z = np.array([1000.0, 1001.0, 1002.0])
    assert np.allclose(activations.softmax(z), activations.softmax(z - 1000.0))


def test_input_layer_passes_features_through():
    layer = NeuronLayer.build(0, [3, 2], activations.sigmoid)
    x = np.array([0.5, -1.0, 2.0])
    assert np.array_equal(layer.forward(x), x)
    assert layer.activation is activations.linear
    assert layer.gradient_shape == (3, 0)
    assert layer.parameter_count() == 0


def test_hidden_layer_forward_and_update():
    layer = NeuronLayer(
        index=1,
        size=2,
        previous_size=2,
        activation=activations.linear,
        weights=np.array([[1.0, 2.0], [0.0, -1.0]]),
        bias=np.array([0.5, 0.0]),
    )
    x = np.array([1.0, 1.0])
    assert np.allclose(layer.forward(x), [3.5, -1.0])

    delta = np.array([[0.1, 0.2, 0.3], [0.0, 0.0, -0.5]])
    layer.update_weights(delta)
    assert np.allclose(layer.weights, [[1.1, 2.2], [0.0, -1.0]])
    assert np.allclose(layer.bias, [0.8, -0.5])


def test_update_with_wrong_shape_leaves_weights_untouched():
    layer = NeuronLayer.build(1, [2, 3], activations.sigmoid, np.random.default_rng(0))
    before = layer.weights.copy()
    with pytest.raises(DimensionMismatch):
        layer.update_weights(np.ones((3, 2)))
    assert np.array_equal(layer.weights, before)


def test_snapshot_is_independent():
    layer = NeuronLayer.build(1, [2, 2], activations.sigmoid, np.random.default_rng(1))
    copy = layer.snapshot()
    layer.update_weights(np.ones(layer.gradient_shape))
    assert not np.allclose(copy.weights, layer.weights)
    assert not np.allclose(copy.bias, layer.bias)


def test_glorot_initialisation_bounds():
    layer = NeuronLayer.build(1, [4, 6], activations.sigmoid, np.random.default_rng(2))
    limit = np.sqrt(6.0 / 10.0)
    assert layer.weights.shape == (6, 4)
    assert np.all(np.abs(layer.weights) <= limit)
    assert np.all(layer.bias == 0.0)
