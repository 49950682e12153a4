import numpy as np
import pytest

from fusednet.training import metrics


def test_binary_accuracy_thresholds_at_half():
    y = np.array([0.0, 1.0, 1.0, 0.0])
    p = np.array([[0.2], [0.7], [0.4], [0.6]])
    assert metrics.accuracy(y, p) == pytest.approx(0.5)


def test_multiclass_accuracy_uses_argmax():
    y = np.array([[1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=float)
    p = np.array([[0.8, 0.1, 0.1], [0.5, 0.3, 0.2], [0.1, 0.1, 0.8]])
    assert metrics.accuracy(y, p) == pytest.approx(2 / 3)


def test_precision_recall_f1():
    y = np.array([1.0, 1.0, 0.0, 0.0])
    p = np.array([[0.9], [0.1], [0.8], [0.2]])
    assert metrics.precision(y, p) == pytest.approx(0.5)
    assert metrics.recall(y, p) == pytest.approx(0.5)
    assert metrics.f1(y, p) == pytest.approx(0.5)


def test_precision_without_positive_predictions_is_zero():
    y = np.array([1.0, 0.0])
    p = np.array([[0.1], [0.2]])
    assert metrics.precision(y, p) == 0.0
    assert metrics.f1(y, p) == 0.0


def test_regression_errors():
    y = np.array([1.0, 2.0, 3.0])
    p = np.array([[1.5], [2.0], [1.0]])
    assert metrics.mse(y, p) == pytest.approx((0.25 + 0.0 + 4.0) / 3)
    assert metrics.mae(y, p) == pytest.approx((0.5 + 0.0 + 2.0) / 3)


def test_argmax_returns_one_hot_rows():
    out = metrics.argmax(np.array([[0.1, 0.7, 0.2], [3.0, 1.0, 2.0]]))
    assert np.array_equal(out, [[0, 1, 0], [1, 0, 0]])


def test_align_shapes_rejects_incompatible_shapes():
    with pytest.raises(ValueError):
        metrics.align_shapes(np.zeros(3), np.zeros((3, 2)))


def test_compute_metrics_by_name():
    y = np.array([0.0, 1.0])
    p = np.array([[0.1], [0.9]])
    result = metrics.compute_metrics(["accuracy", "MAE"], y, p)
    assert result["accuracy"] == 1.0
    assert result["mae"] == pytest.approx(0.1)
    with pytest.raises(KeyError):
        metrics.compute_metrics(["auc"], y, p)


def test_multiclass_accuracy_counts_rows_not_entries():
    labels = np.array([[1, 0, 0], [0, 1, 0]], dtype=np.float64)
    predictions = np.array([[0.8, 0.1, 0.1], [0.1, 0.2, 0.7]])
    # One of two rows is right; entry-wise agreement would give 4/6.
    assert metrics.accuracy(labels, predictions) == pytest.approx(0.5)
