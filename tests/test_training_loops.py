from __future__ import annotations

import numpy as np

from fusednet.core.layer import Layer
from fusednet.data import get_dataset
from fusednet.training import metrics
from fusednet.training.network import NeuralNetwork


def test_or_gate_converges():
    X = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=np.float64)
    y = np.array([0.0, 1.0, 1.0, 1.0])

    net = NeuralNetwork(learning_rate=0.1)
    net.add_layer(Layer(2, 8, activation="relu", seed=0))
    net.add_layer(Layer(8, 1, activation="sigmoid", seed=1))
    result = net.train(X, y, epochs=1000, loss="bce")

    predictions = net.predict(X)
    assert predictions.shape == (4, 1)
    assert np.all(np.abs(predictions[:, 0] - y) < 0.5)
    assert result.final_loss < result.history[0]


def test_iris_sample_with_softmax_and_cce():
    dataset = get_dataset("iris_sample")
    net = NeuralNetwork(learning_rate=0.05, patience=100)
    net.add_layer(Layer(dataset.d_in, 8, activation="relu", seed=1))
    net.add_layer(Layer(8, 3, activation="softmax", seed=2))
    result = net.train(dataset.inputs, dataset.targets, epochs=500, loss="cce")

    predictions = net.predict(dataset.inputs)
    assert np.allclose(predictions.sum(axis=1), 1.0)
    assert result.final_loss < result.history[0]
    assert metrics.accuracy(dataset.targets, predictions) > 0.6


def test_tanh_hidden_layer_learns_xor():
    dataset = get_dataset("logic_xor")
    net = NeuralNetwork(learning_rate=0.05)
    net.add_layer(Layer(2, 8, activation="tanh", seed=3))
    net.add_layer(Layer(8, 1, activation="sigmoid", seed=4))
    result = net.train(dataset.inputs, dataset.targets, epochs=2000, loss="bce")
    assert result.final_loss < 0.8 * result.history[0]
