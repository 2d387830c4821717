"""Built-in kernels: allocators and timed kernel functions.

Kernels are grouped by microbenchmark kind (dense, sparse, clustering) and
looked up by name through the KernelRegistry.
"""

from hpcbench.kernels.registry import (
    KernelNameCollisionError,
    KernelNotFoundError,
    KernelRegistry,
    KernelRegistryError,
    KernelSpec,
)

__all__ = [
    "KernelNameCollisionError",
    "KernelNotFoundError",
    "KernelRegistry",
    "KernelRegistryError",
    "KernelSpec",
]
