"""Dense matrix microbenchmark suites.

The default suite runs every dense kernel over matrix orders 1000 to 8000
(smaller orders for the cubic-cost decompositions that are slow at 8000). The
example suite runs the same kernels at orders small enough to finish in
seconds.
"""

from hpcbench.kernels.registry import KernelRegistry
from hpcbench.models.microbenchmark_models import DenseMatrixMicrobenchmark

DEFAULT_DIMENSIONS = [1000, 2000, 4000, 8000]
DECOMPOSITION_DIMENSIONS = [1000, 2000, 4000]
EXAMPLE_DIMENSIONS = [250, 500]

# Kernels whose run time makes the largest default order impractical
DECOMPOSITION_KERNELS = ("eigen", "svd")


def _dense_microbenchmark(
    kernel: str,
    dimensions: list[int],
    number_of_trials: int,
    number_of_warmup_trials: int,
    name: str | None = None,
) -> DenseMatrixMicrobenchmark:
    spec = KernelRegistry.default().get("dense", kernel)
    return DenseMatrixMicrobenchmark(
        name=name or kernel,
        description=f"{spec.description} of square matrices",
        matrix_dimension=dimensions,
        number_of_trials=[number_of_trials] * len(dimensions),
        number_of_warmup_trials=[number_of_warmup_trials] * len(dimensions),
        allocator=spec.allocator,
        kernel_function=spec.kernel_function,
    )


def get_dense_matrix_default_microbenchmarks() -> list[DenseMatrixMicrobenchmark]:
    """Default dense matrix microbenchmarks, one per built-in dense kernel."""
    microbenchmarks = []
    for spec in KernelRegistry.default().kernels("dense"):
        if spec.name in DECOMPOSITION_KERNELS:
            dimensions = DECOMPOSITION_DIMENSIONS
        else:
            dimensions = DEFAULT_DIMENSIONS
        microbenchmarks.append(_dense_microbenchmark(spec.name, dimensions, 3, 1))
    return microbenchmarks


def get_dense_matrix_example_microbenchmarks() -> list[DenseMatrixMicrobenchmark]:
    """Small dense matrix microbenchmarks for trying out the harness."""
    return [
        _dense_microbenchmark(spec.name, EXAMPLE_DIMENSIONS, 2, 1)
        for spec in KernelRegistry.default().kernels("dense")
    ]
