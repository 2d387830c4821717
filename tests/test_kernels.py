"""Smoke tests of the built-in kernels at tiny problem sizes."""

import numpy as np
import pytest
import scipy.sparse as sp

from hpcbench.kernels import KernelRegistry
from hpcbench.kernels.clustering import clustering_allocator
from hpcbench.kernels.dense import deformtrans_allocator, lsfit_allocator
from hpcbench.kernels.sparse import (
    matvec_allocator,
    random_sparse_matrix,
    random_spd_matrix,
    spd_allocator,
)
from hpcbench.models.microbenchmark_models import (
    ClusteringMicrobenchmark,
    DenseMatrixMicrobenchmark,
    SparseMatrixMicrobenchmark,
)
from hpcbench.timing import TrialTimings


def _dense(dimension):
    return DenseMatrixMicrobenchmark(
        name="tiny",
        matrix_dimension=[dimension],
        number_of_trials=[1],
        number_of_warmup_trials=[0],
        allocator="matmat",
        kernel_function="matmat",
    )


def _sparse(rows, columns, nonzeros, data_object_name=None):
    return SparseMatrixMicrobenchmark(
        name="tiny",
        data_object_name=data_object_name,
        number_of_rows=[rows],
        number_of_columns=[columns],
        number_of_nonzeros=[nonzeros],
        number_of_trials=[1],
        number_of_warmup_trials=[0],
        allocator="matvec",
        kernel_function="matvec",
    )


def _clustering(features, clusters, per_cluster):
    return ClusteringMicrobenchmark(
        name="tiny",
        number_of_features=[features],
        number_of_clusters=[clusters],
        number_of_feature_vectors_per_cluster=[per_cluster],
        number_of_trials=[1],
        number_of_warmup_trials=[0],
        allocator="kmeans",
        kernel_function="kmeans",
    )


def _rng():
    return np.random.default_rng(42)


def _check_timings(timings):
    assert isinstance(timings, TrialTimings)
    assert timings.wall_clock_time >= 0.0
    assert timings.user_time >= 0.0
    assert timings.system_time >= 0.0


@pytest.mark.parametrize(
    "spec", KernelRegistry.default().kernels("dense"), ids=lambda s: s.name
)
def test_dense_kernels(spec):
    """Test every dense kernel on an 8 x 8 problem."""
    microbenchmark = _dense(8)
    parameters = spec.allocator(microbenchmark, 0, _rng(), None)

    _check_timings(spec.kernel_function(microbenchmark, parameters))


@pytest.mark.parametrize("allocator", [deformtrans_allocator, lsfit_allocator])
def test_odd_dimension_rejected(allocator):
    """Test kernels that need an even matrix dimension."""
    with pytest.raises(ValueError, match="multiple of 2"):
        allocator(_dense(7), 0, _rng(), None)


def test_lsfit_shapes():
    """Test the overdetermined least squares system."""
    parameters = lsfit_allocator(_dense(8), 0, _rng(), None)

    assert parameters["A"].shape == (16, 4)
    assert parameters["b"].shape == (16, 1)


def test_dense_allocation_is_reproducible():
    """Test that the same generator state gives the same input."""
    spec = KernelRegistry.default().get("dense", "solve")

    first = spec.allocator(_dense(6), 0, _rng(), None)
    second = spec.allocator(_dense(6), 0, _rng(), None)

    np.testing.assert_array_equal(first["A"], second["A"])
    np.testing.assert_array_equal(first["B"], second["B"])


@pytest.mark.parametrize(
    "spec", KernelRegistry.default().kernels("sparse"), ids=lambda s: s.name
)
def test_sparse_kernels(spec):
    """Test every sparse kernel on a generated 50 x 50 matrix."""
    microbenchmark = _sparse(50, 50, 250)
    parameters = spec.allocator(microbenchmark, 0, _rng(), None)

    _check_timings(spec.kernel_function(microbenchmark, parameters))


def test_random_matrices():
    """Test the generated sparse matrices."""
    matrix = random_sparse_matrix(30, 40, 100, _rng())
    assert matrix.shape == (30, 40)
    assert 0 < matrix.nnz <= 100

    spd = random_spd_matrix(30, 120, _rng())
    dense = spd.toarray()
    np.testing.assert_allclose(dense, dense.T)
    assert np.all(np.linalg.eigvalsh(dense) > 0)


def test_sparse_allocators_use_dataset():
    """Test that a staged dataset replaces the generated matrix."""
    dataset = sp.identity(5, format="csc") * 2.0

    parameters = spd_allocator(_sparse(5, 5, 5, "ident"), 0, _rng(), dataset)
    assert (parameters["A"] != dataset).nnz == 0
    assert parameters["b"].shape == (5,)

    parameters = matvec_allocator(_sparse(5, 5, 5, "ident"), 0, _rng(), dataset)
    assert parameters["A"].format == "csr"


def test_dataset_shape_mismatch():
    """Test that a dataset of the wrong shape is an allocation failure."""
    dataset = sp.identity(5, format="csc")

    with pytest.raises(ValueError, match="shape"):
        matvec_allocator(_sparse(6, 6, 6, "ident"), 0, _rng(), dataset)


def test_spd_allocator_requires_square():
    """Test that factorization kernels reject rectangular matrices."""
    with pytest.raises(ValueError, match="square"):
        spd_allocator(_sparse(5, 6, 10), 0, _rng(), None)


def test_clustering_allocator():
    """Test the generated feature vectors."""
    parameters = clustering_allocator(_clustering(4, 3, 20), 0, _rng(), None)

    assert parameters["X"].shape == (60, 4)
    assert parameters["k"] == 3


@pytest.mark.parametrize(
    "spec", KernelRegistry.default().kernels("clustering"), ids=lambda s: s.name
)
def test_clustering_kernels(spec):
    """Test every clustering kernel on 3 well separated clusters."""
    if spec.name in ("pam", "clara"):
        pytest.importorskip("sklearn_extra.cluster")
    microbenchmark = _clustering(2, 3, 30)
    parameters = spec.allocator(microbenchmark, 0, _rng(), None)

    _check_timings(spec.kernel_function(microbenchmark, parameters))


def test_clara_sample_size_capped(monkeypatch):
    """Test that CLARA never samples more vectors than there are."""
    cluster = pytest.importorskip("sklearn_extra.cluster")
    real_clara = cluster.CLARA
    created = []

    def recording_clara(**kwargs):
        created.append(kwargs)
        return real_clara(**kwargs)

    monkeypatch.setattr(cluster, "CLARA", recording_clara)
    microbenchmark = _clustering(2, 3, 10)
    parameters = clustering_allocator(microbenchmark, 0, _rng(), None)

    _check_timings(KernelRegistry.default().get("clustering", "clara").kernel_function(
        microbenchmark, parameters
    ))

    assert created[0]["n_sampling"] == 30
    assert created[0]["n_sampling_iter"] == 5
