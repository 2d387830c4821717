"""Sparse matrix kernels backed by scipy.sparse.

When the microbenchmark names a shared dataset (a Matrix Market file loaded
once by the suite), the allocators use that matrix. Otherwise they generate a
matrix with the configured rows, columns and expected number of nonzeros.
"""

from typing import Any

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from hpcbench.models.microbenchmark_models import SparseMatrixMicrobenchmark
from hpcbench.timing import TrialTimings, time_call


def random_sparse_matrix(
    rows: int, columns: int, nonzeros: int, rng: np.random.Generator
) -> sp.csr_matrix:
    """Random matrix with about ``nonzeros`` standard normal entries.

    Duplicate coordinates are summed, so the stored count can be slightly lower.
    """
    row_indices = rng.integers(0, rows, size=nonzeros)
    column_indices = rng.integers(0, columns, size=nonzeros)
    values = rng.standard_normal(nonzeros)
    matrix = sp.coo_matrix((values, (row_indices, column_indices)), shape=(rows, columns))
    return matrix.tocsr()


def random_spd_matrix(
    dimension: int, nonzeros: int, rng: np.random.Generator
) -> sp.csc_matrix:
    """Random symmetric, strictly diagonally dominant (hence SPD) matrix."""
    offdiagonal = max(nonzeros - dimension, 0) // 2
    b = random_sparse_matrix(dimension, dimension, offdiagonal, rng)
    symmetric = b + b.T
    diagonal = np.asarray(abs(symmetric).sum(axis=1)).ravel() + 1.0
    return (symmetric + sp.diags(diagonal)).tocsc()


def _sizes(microbenchmark: SparseMatrixMicrobenchmark, index: int) -> tuple[int, int, int]:
    return (
        int(microbenchmark.number_of_rows[index]),
        int(microbenchmark.number_of_columns[index]),
        int(microbenchmark.number_of_nonzeros[index]),
    )


def _dataset_matrix(
    microbenchmark: SparseMatrixMicrobenchmark, index: int, dataset: Any
) -> sp.csc_matrix:
    """Use the staged dataset, checking it matches the configured dimensions."""
    rows, columns, _ = _sizes(microbenchmark, index)
    matrix = sp.csc_matrix(dataset)
    if matrix.shape != (rows, columns):
        raise ValueError(
            f"dataset '{microbenchmark.data_object_name}' has shape {matrix.shape}, "
            f"expected ({rows}, {columns})"
        )
    return matrix


# -----------------------------------------------------------------------------
# Sparse matrix-vector multiplication
# -----------------------------------------------------------------------------


def matvec_allocator(
    microbenchmark: SparseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, Any]:
    """Allocate a sparse matrix ``A`` in CSR format and a dense vector ``x``."""
    rows, columns, nonzeros = _sizes(microbenchmark, index)
    if dataset is not None:
        a = _dataset_matrix(microbenchmark, index, dataset).tocsr()
    else:
        a = random_sparse_matrix(rows, columns, nonzeros, rng)
    return {"A": a, "x": rng.standard_normal(columns)}


def matvec_kernel(
    microbenchmark: SparseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time ``A @ x``."""
    return time_call(kernel_parameters["A"].dot, kernel_parameters["x"])


# -----------------------------------------------------------------------------
# Factorization and iterative solve
# -----------------------------------------------------------------------------


def spd_allocator(
    microbenchmark: SparseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, Any]:
    """Allocate a square sparse matrix ``A`` in CSC format and a right hand side ``b``."""
    rows, columns, nonzeros = _sizes(microbenchmark, index)
    if rows != columns:
        raise ValueError(f"matrix must be square, got {rows} x {columns}")
    if dataset is not None:
        a = _dataset_matrix(microbenchmark, index, dataset)
    else:
        a = random_spd_matrix(rows, nonzeros, rng)
    return {"A": a, "b": rng.standard_normal(rows)}


def lu_kernel(
    microbenchmark: SparseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the sparse LU factorization of ``A``."""
    return time_call(spla.splu, kernel_parameters["A"])


def _conjugate_gradient(a: sp.spmatrix, b: np.ndarray) -> np.ndarray:
    x, info = spla.cg(a, b)
    if info > 0:
        raise RuntimeError(f"conjugate gradient did not converge in {info} iterations")
    if info < 0:
        raise RuntimeError("conjugate gradient received illegal input")
    return x


def cg_kernel(
    microbenchmark: SparseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time solving ``A x = b`` with the conjugate gradient method."""
    return time_call(_conjugate_gradient, kernel_parameters["A"], kernel_parameters["b"])
