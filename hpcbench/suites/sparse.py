"""Sparse matrix microbenchmark suites.

Matrices are generated from the configured rows, columns and nonzeros unless
a definition names a shared dataset, in which case the dataset is the matrix.
"""

from hpcbench.kernels.registry import KernelRegistry
from hpcbench.models.microbenchmark_models import SparseMatrixMicrobenchmark

# Bundled Matrix Market file: tridiag(-1, 2, -1) of order 10
POISSON_DATASET = "poisson1d_10"
POISSON_ORDER = 10
POISSON_NONZEROS = 28


def _sparse_microbenchmark(
    name: str,
    kernel: str,
    rows: list[int],
    columns: list[int],
    nonzeros: list[int],
    number_of_trials: int,
    number_of_warmup_trials: int,
    data_object_name: str | None = None,
    description: str | None = None,
) -> SparseMatrixMicrobenchmark:
    spec = KernelRegistry.default().get("sparse", kernel)
    return SparseMatrixMicrobenchmark(
        name=name,
        description=description or spec.description,
        data_object_name=data_object_name,
        number_of_rows=rows,
        number_of_columns=columns,
        number_of_nonzeros=nonzeros,
        number_of_trials=[number_of_trials] * len(rows),
        number_of_warmup_trials=[number_of_warmup_trials] * len(rows),
        allocator=spec.allocator,
        kernel_function=spec.kernel_function,
    )


def get_sparse_matrix_default_microbenchmarks() -> list[SparseMatrixMicrobenchmark]:
    """Default sparse matrix microbenchmarks on generated matrices."""
    orders = [100_000, 400_000, 1_600_000]
    # About ten nonzeros per row
    nonzeros = [10 * n for n in orders]
    factor_orders = [10_000, 40_000, 160_000]
    factor_nonzeros = [10 * n for n in factor_orders]

    return [
        _sparse_microbenchmark(
            "sparse_matvec", "matvec", orders, orders, nonzeros, 3, 1,
            description="Sparse matrix-vector multiplication, ~10 nonzeros per row",
        ),
        _sparse_microbenchmark(
            "sparse_cg", "cg", orders, orders, nonzeros, 3, 1,
            description="Conjugate gradient solve of an SPD system, ~10 nonzeros per row",
        ),
        _sparse_microbenchmark(
            "sparse_lu", "lu", factor_orders, factor_orders, factor_nonzeros, 3, 1,
            description="Sparse LU factorization, ~10 nonzeros per row",
        ),
    ]


def get_sparse_matrix_example_microbenchmarks() -> list[SparseMatrixMicrobenchmark]:
    """Small sparse matrix microbenchmarks, including one on the bundled dataset."""
    orders = [1000, 2000]
    nonzeros = [5 * n for n in orders]
    return [
        _sparse_microbenchmark(
            "sparse_matvec_example", "matvec", orders, orders, nonzeros, 2, 1
        ),
        _sparse_microbenchmark(
            "sparse_lu_example", "lu", orders, orders, nonzeros, 2, 1
        ),
        _sparse_microbenchmark(
            "sparse_cg_poisson1d", "cg",
            [POISSON_ORDER], [POISSON_ORDER], [POISSON_NONZEROS], 2, 1,
            data_object_name=POISSON_DATASET,
            description="Conjugate gradient solve of the 1D Poisson matrix of order 10",
        ),
    ]
