"""Tests for shared dataset loading."""

import numpy as np
import pytest

from hpcbench.errors import DatasetLoadError
from hpcbench.microbenchmark.datasets import (
    dataset_search_paths,
    find_dataset,
    load_dataset,
)


def test_bundled_dataset():
    """Test loading the bundled 1D Poisson matrix."""
    matrix = load_dataset("poisson1d_10")

    assert matrix.shape == (10, 10)
    assert matrix.nnz == 28
    dense = matrix.toarray()
    np.testing.assert_array_equal(dense, dense.T)
    assert dense[0, 0] == 2.0
    assert dense[1, 0] == -1.0


def test_local_data_directory(tmp_path, monkeypatch):
    """Test that ./data is searched after the bundled datasets."""
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "tiny.mtx").write_text(
        "%%MatrixMarket matrix coordinate real general\n"
        "2 3 2\n"
        "1 1 1.5\n"
        "2 3 -2.0\n"
    )
    monkeypatch.chdir(tmp_path)

    assert find_dataset("tiny") == tmp_path / "data" / "tiny.mtx"
    matrix = load_dataset("tiny")
    assert matrix.shape == (2, 3)
    assert matrix[1, 2] == -2.0


def test_search_order(tmp_path, monkeypatch):
    """Test that the bundled directory comes first."""
    monkeypatch.chdir(tmp_path)

    bundled, local = dataset_search_paths("x")
    assert bundled.parent.name == "data"
    assert bundled.parent.parent.name == "hpcbench"
    assert local == tmp_path / "data" / "x.mtx"


def test_missing_dataset(tmp_path, monkeypatch):
    """Test that an unknown dataset is a DatasetLoadError."""
    monkeypatch.chdir(tmp_path)

    with pytest.raises(DatasetLoadError) as exc_info:
        load_dataset("does_not_exist")

    assert exc_info.value.dataset_name == "does_not_exist"


def test_unreadable_dataset(tmp_path, monkeypatch):
    """Test that a corrupt file is a DatasetLoadError."""
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "corrupt.mtx").write_text("this is not matrix market\n")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(DatasetLoadError):
        load_dataset("corrupt")
