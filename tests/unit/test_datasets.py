import numpy as np
import pytest

from fusednet.data import available_datasets, get_dataset


def test_builtin_datasets_are_registered():
    assert {"logic_or", "logic_and", "logic_xor", "iris_sample", "csv"} <= set(
        available_datasets()
    )


def test_logic_or_truth_table():
    dataset = get_dataset("logic_or")
    assert dataset.inputs.shape == (4, 2)
    assert np.array_equal(dataset.targets, [0.0, 1.0, 1.0, 1.0])
    assert dataset.task_type == "binary"
    assert dataset.d_out == 1


def test_iris_sample_is_one_hot_and_normalised():
    dataset = get_dataset("iris_sample")
    assert dataset.targets.shape == (6, 3)
    assert np.array_equal(dataset.targets.sum(axis=1), np.ones(6))
    assert dataset.inputs.min() >= 0.0 and dataset.inputs.max() <= 1.0


def test_csv_loader_maps_labels_and_scales_features(tmp_path):
    path = tmp_path / "cars.csv"
    path.write_text(
        "id,mileage,year,price,sold\n"
        "1,10000,2015,9000,yes\n"
        "2,50000,2010,4000,no\n"
        "3,30000,2012,6000,maybe\n"
        "4,20000,2018,12000,Yes\n"
    )
    dataset = get_dataset(
        "csv",
        csv_path=path,
        target_col="sold",
        feature_cols=["mileage", "year", "price"],
    )
    assert len(dataset) == 3
    assert np.array_equal(dataset.targets, [1.0, 0.0, 1.0])
    assert dataset.inputs.min() == pytest.approx(0.0)
    assert dataset.inputs.max() == pytest.approx(1.0)
    assert dataset.provenance["dropped"] == 1


def test_csv_loader_missing_target(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("a,b\n1,2\n")
    with pytest.raises(KeyError):
        get_dataset("csv", csv_path=path, target_col="label")


def test_unknown_dataset():
    with pytest.raises(KeyError):
        get_dataset("mnist")
