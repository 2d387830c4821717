"""Dense matrix kernels backed by numpy's BLAS/LAPACK.

Each kernel comes as an allocator, which builds the matrices for one trial
from the configured matrix dimension, and a kernel function, which times the
operation on them. Allocators draw all random numbers from the generator the
runner passes in, so inputs are identical across repeated runs.
"""

from typing import Any

import numpy as np

from hpcbench.models.microbenchmark_models import DenseMatrixMicrobenchmark
from hpcbench.timing import TrialTimings, time_call


def _dimension(microbenchmark: DenseMatrixMicrobenchmark, index: int) -> int:
    return int(microbenchmark.matrix_dimension[index])


def _require_even(dimension: int, kernel: str) -> None:
    if dimension % 2 != 0:
        raise ValueError(f"{kernel} kernel matrix dimension must be a multiple of 2")


def square_matrix_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate one N x N standard normal matrix ``A``."""
    n = _dimension(microbenchmark, index)
    return {"A": rng.standard_normal((n, n))}


# -----------------------------------------------------------------------------
# Cholesky factorization
# -----------------------------------------------------------------------------


def cholesky_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate a symmetric positive definite matrix ``A = X^T X``."""
    n = _dimension(microbenchmark, index)
    x = rng.standard_normal((n, n))
    a = x.T @ x
    del x
    return {"A": a}


def cholesky_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the Cholesky factorization of ``A``."""
    return time_call(np.linalg.cholesky, kernel_parameters["A"])


# -----------------------------------------------------------------------------
# Matrix cross product
# -----------------------------------------------------------------------------


def crossprod_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the cross product ``A^T A``."""
    a = kernel_parameters["A"]
    return time_call(np.matmul, a.T, a)


# -----------------------------------------------------------------------------
# Matrix deformation and transpose
# -----------------------------------------------------------------------------


def deformtrans_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate ``A`` for the deformtrans kernel; N must be even."""
    n = _dimension(microbenchmark, index)
    _require_even(n, "deformtrans")
    return {"A": rng.standard_normal((n, n))}


def _deform_and_transpose(a: np.ndarray) -> np.ndarray:
    rows, columns = a.shape
    # Column-major reshape of the transpose, then transpose back
    b = np.ascontiguousarray(a.T).reshape((rows // 2, 2 * columns), order="F")
    return np.ascontiguousarray(b.T)


def deformtrans_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time transposing ``A``, reshaping it to N/2 x 2N and transposing again."""
    return time_call(_deform_and_transpose, kernel_parameters["A"])


# -----------------------------------------------------------------------------
# Determinant
# -----------------------------------------------------------------------------


def determinant_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the (log) determinant of ``A`` via LU factorization."""
    return time_call(np.linalg.slogdet, kernel_parameters["A"])


# -----------------------------------------------------------------------------
# Eigendecomposition
# -----------------------------------------------------------------------------


def eigen_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the eigenvalues and eigenvectors of the nonsymmetric matrix ``A``."""
    return time_call(np.linalg.eig, kernel_parameters["A"])


# -----------------------------------------------------------------------------
# Linear least squares fit
# -----------------------------------------------------------------------------


def lsfit_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate an overdetermined 2N x N/2 system ``A x = b``; N must be even."""
    n = _dimension(microbenchmark, index)
    _require_even(n, "least squares fit")
    return {
        "A": rng.standard_normal((2 * n, n // 2)),
        "b": rng.standard_normal((2 * n, 1)),
    }


def lsfit_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the least squares solution of ``A x = b``."""
    return time_call(
        np.linalg.lstsq, kernel_parameters["A"], kernel_parameters["b"], rcond=None
    )


# -----------------------------------------------------------------------------
# Matrix-matrix multiplication
# -----------------------------------------------------------------------------


def matmat_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate two N x N matrices ``A`` and ``B``."""
    n = _dimension(microbenchmark, index)
    return {"A": rng.standard_normal((n, n)), "B": rng.standard_normal((n, n))}


def matmat_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time ``A @ B``."""
    return time_call(np.matmul, kernel_parameters["A"], kernel_parameters["B"])


# -----------------------------------------------------------------------------
# Matrix-vector multiplication
# -----------------------------------------------------------------------------


def matvec_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate an N x N matrix ``A`` and an N x 1 vector ``b``."""
    n = _dimension(microbenchmark, index)
    return {"A": rng.standard_normal((n, n)), "b": rng.standard_normal((n, 1))}


def matvec_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time ``A @ b``."""
    return time_call(np.matmul, kernel_parameters["A"], kernel_parameters["b"])


# -----------------------------------------------------------------------------
# QR decomposition
# -----------------------------------------------------------------------------


def qr_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the LAPACK QR decomposition of ``A``."""
    return time_call(np.linalg.qr, kernel_parameters["A"])


# -----------------------------------------------------------------------------
# Linear solve with multiple right hand sides
# -----------------------------------------------------------------------------


def solve_allocator(
    microbenchmark: DenseMatrixMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, np.ndarray]:
    """Allocate ``A`` and ``B = A X`` for N right hand sides."""
    n = _dimension(microbenchmark, index)
    a = rng.standard_normal((n, n))
    x = rng.standard_normal((n, n))
    b = a @ x
    del x
    return {"A": a, "B": b}


def solve_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time solving ``A X = B``."""
    return time_call(np.linalg.solve, kernel_parameters["A"], kernel_parameters["B"])


# -----------------------------------------------------------------------------
# Singular value decomposition
# -----------------------------------------------------------------------------


def svd_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time the full singular value decomposition of ``A``."""
    return time_call(np.linalg.svd, kernel_parameters["A"])


# -----------------------------------------------------------------------------
# Transpose
# -----------------------------------------------------------------------------


def transpose_kernel(
    microbenchmark: DenseMatrixMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time materializing the transpose of ``A``."""
    return time_call(np.ascontiguousarray, kernel_parameters["A"].T)
