"""Default and example microbenchmark suites for each kernel kind."""

from hpcbench.suites.clustering import (
    get_clustering_default_microbenchmarks,
    get_clustering_example_microbenchmarks,
)
from hpcbench.suites.dense import (
    get_dense_matrix_default_microbenchmarks,
    get_dense_matrix_example_microbenchmarks,
)
from hpcbench.suites.sparse import (
    get_sparse_matrix_default_microbenchmarks,
    get_sparse_matrix_example_microbenchmarks,
)

# kind -> (default suite, example suite)
SUITES = {
    "dense": (
        get_dense_matrix_default_microbenchmarks,
        get_dense_matrix_example_microbenchmarks,
    ),
    "sparse": (
        get_sparse_matrix_default_microbenchmarks,
        get_sparse_matrix_example_microbenchmarks,
    ),
    "clustering": (
        get_clustering_default_microbenchmarks,
        get_clustering_example_microbenchmarks,
    ),
}


def get_microbenchmarks(kind: str, example: bool = False) -> list:
    """Return the default (or example) suite of ``kind``.

    Raises:
        KeyError: If ``kind`` is not a known microbenchmark kind.
    """
    default, example_suite = SUITES[kind]
    return example_suite() if example else default()


__all__ = [
    "SUITES",
    "get_clustering_default_microbenchmarks",
    "get_clustering_example_microbenchmarks",
    "get_dense_matrix_default_microbenchmarks",
    "get_dense_matrix_example_microbenchmarks",
    "get_microbenchmarks",
    "get_sparse_matrix_default_microbenchmarks",
    "get_sparse_matrix_example_microbenchmarks",
]
