import numpy as np
import pytest

from fusednet.core.errors import ConfigurationError
from fusednet.core.layer import Layer
from fusednet.training import network as network_module
from fusednet.training.losses import LossRegistry
from fusednet.training.network import NeuralNetwork

X_OR = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=np.float64)
Y_OR = np.array([0.0, 1.0, 1.0, 1.0])


def _network(lr=0.1, patience=500, seed=0, hidden="relu", output="sigmoid", d_out=1):
    net = NeuralNetwork(learning_rate=lr, patience=patience)
    net.add_layer(Layer(2, 8, activation=hidden, seed=seed))
    net.add_layer(Layer(8, d_out, activation=output, seed=seed + 1))
    return net


@pytest.mark.parametrize("patience", [1, 5, 20])
def test_early_stop_halts_at_first_epoch_plus_patience(patience):
    net = _network(lr=0.0, patience=patience)
    result = net.train(X_OR, Y_OR, epochs=200, loss="bce")
    assert result.stop_reason == "early_stop"
    assert result.early_stopped
    assert result.stopped_epoch == patience
    assert result.epochs_run == patience + 1
    # The stopping epoch skips its backward pass.
    assert net.optimizer.step == patience * len(net.layers)


def test_epochs_exhausted_without_plateau():
    net = _network(lr=0.05)
    result = net.train(X_OR, Y_OR, epochs=30, loss="bce")
    assert result.stop_reason == "epochs_exhausted"
    assert result.epochs_run == 30
    assert result.stopped_epoch == 29
    assert result.best_loss <= result.history[0]


def test_layers_are_indexed_at_assembly():
    net = _network()
    assert [layer.index for layer in net.layers] == [0, 1]


def test_mismatched_layer_sizes_are_rejected():
    net = NeuralNetwork()
    net.add_layer(Layer(2, 4, seed=0))
    with pytest.raises(ConfigurationError):
        net.add_layer(Layer(3, 1, activation="sigmoid", seed=0))


def test_linear_output_cannot_seed_a_gradient():
    net = _network(output="linear")
    with pytest.raises(ConfigurationError):
        net.train(X_OR, Y_OR, epochs=3, loss="mse")


def test_training_an_empty_network_fails():
    with pytest.raises(ConfigurationError):
        NeuralNetwork().train(X_OR, Y_OR, epochs=1)


def test_unknown_loss_fails_before_training():
    net = _network()
    with pytest.raises(ValueError):
        net.train(X_OR, Y_OR, epochs=1, loss="hinge")
    assert net.optimizer.step == 0


def test_predict_does_not_touch_parameters():
    net = _network()
    before = [tuple(p.copy() for p in layer.get_params()) for layer in net.layers]
    net.predict(X_OR)
    for layer, (W, b) in zip(net.layers, before):
        assert np.array_equal(layer.weights, W)
        assert np.array_equal(layer.bias, b)


def test_callbacks_receive_every_epoch():
    seen = []

    class _Capture:
        def on_epoch(self, epoch, metrics):
            seen.append((epoch, metrics["loss"]))

    net = _network()
    result = net.train(X_OR, Y_OR, epochs=12, loss="bce", callbacks=[_Capture()])
    assert [epoch for epoch, _ in seen] == list(range(12))
    assert [loss for _, loss in seen] == result.history


def test_verbose_training_logs_progress(caplog):
    net = _network(lr=0.0, patience=2)
    with caplog.at_level("INFO", logger="fusednet.training.network"):
        net.train(X_OR, Y_OR, epochs=10, loss="bce", verbose=True)
    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("epoch 0") for m in messages)
    assert any("early stop at epoch 2" in m for m in messages)


def test_shared_optimizer_is_rejected_before_training():
    first = _network(lr=0.05)
    first.train(X_OR, Y_OR, epochs=5, loss="bce")
    with pytest.raises(ConfigurationError):
        NeuralNetwork(optimizer=first.optimizer)
    assert first.optimizer.step == 5 * len(first.layers)


@pytest.mark.parametrize("patience", [1, 3, 5])
def test_plateau_after_improvement_stops_at_last_improvement_plus_patience(
    monkeypatch, patience
):
    # Improves through epoch 3, then moves by less than the improvement threshold.
    scripted = iter([1.0, 0.9, 0.8, 0.7, 0.7 - 5e-7, 0.7, 0.7 + 1e-3] + [0.7] * 20)
    registry = LossRegistry()
    registry.register("scripted", lambda labels, predictions: next(scripted))
    monkeypatch.setattr(network_module, "LOSS_REGISTRY", registry)

    net = _network(lr=0.0, patience=patience)
    result = net.train(X_OR, Y_OR, epochs=25, loss="scripted")
    assert result.stop_reason == "early_stop"
    assert result.best_loss == pytest.approx(0.7)
    assert result.stopped_epoch == 3 + patience
    assert result.history[:4] == [1.0, 0.9, 0.8, 0.7]
    assert net.optimizer.step == (3 + patience) * len(net.layers)
