"""Registry of the built-in kernels, looked up by name.

Suite files and string-valued capabilities refer to kernels by name, e.g.
``kernel: cholesky``. Names are unique within a kind; the same name may be
used by different kinds (``matvec`` is both a dense and a sparse kernel).

Usage:
    from hpcbench.kernels.registry import KernelRegistry

    registry = KernelRegistry.default()
    spec = registry.get("dense", "cholesky")
    spec.allocator, spec.kernel_function
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from hpcbench.kernels import clustering, dense, sparse


class KernelRegistryError(Exception):
    """Base exception for registry errors."""

    pass


class KernelNameCollisionError(KernelRegistryError):
    """Raised when a kernel name is registered twice for the same kind."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Kernel name collision: '{name}' already registered for {kind}")


class KernelNotFoundError(KernelRegistryError):
    """Raised when a requested kernel is not found."""

    def __init__(self, kind: str | None, name: str) -> None:
        self.kind = kind
        self.name = name
        where = f" for {kind} microbenchmarks" if kind else ""
        super().__init__(f"Kernel not found{where}: '{name}'")


@dataclass(frozen=True)
class KernelSpec:
    """An allocator and kernel function pair for one named kernel."""

    kind: str
    name: str
    description: str
    allocator: Callable[..., Any]
    kernel_function: Callable[..., Any]


class KernelRegistry:
    """Kernel specifications keyed by (kind, name)."""

    _default: "KernelRegistry | None" = None

    def __init__(self) -> None:
        self._kernels: dict[tuple[str, str], KernelSpec] = {}

    def register(self, spec: KernelSpec) -> None:
        """Register a kernel.

        Raises:
            KernelNameCollisionError: If the name is taken for this kind.
        """
        key = (spec.kind, spec.name)
        if key in self._kernels:
            raise KernelNameCollisionError(spec.kind, spec.name)
        self._kernels[key] = spec

    def get(self, kind: str, name: str) -> KernelSpec:
        """Get a kernel by kind and name.

        Raises:
            KernelNotFoundError: If no such kernel is registered.
        """
        try:
            return self._kernels[(kind, name.lower())]
        except KeyError:
            raise KernelNotFoundError(kind, name) from None

    def find(self, name: str) -> list[KernelSpec]:
        """All kernels with the given name, whatever their kind."""
        return [spec for (_, n), spec in self._kernels.items() if n == name.lower()]

    def kernels(self, kind: str | None = None) -> list[KernelSpec]:
        """Registered kernels in registration order, optionally for one kind."""
        return [s for s in self._kernels.values() if kind is None or s.kind == kind]

    def __iter__(self) -> Iterator[KernelSpec]:
        return iter(self._kernels.values())

    def __len__(self) -> int:
        return len(self._kernels)

    def __contains__(self, key: tuple[str, str]) -> bool:
        kind, name = key
        return (kind, name.lower()) in self._kernels

    @classmethod
    def default(cls) -> "KernelRegistry":
        """The registry of built-in kernels, created on first use."""
        if cls._default is None:
            registry = cls()
            for spec in _builtin_kernels():
                registry.register(spec)
            cls._default = registry
        return cls._default


def _builtin_kernels() -> list[KernelSpec]:
    square = dense.square_matrix_allocator
    return [
        # Dense matrix kernels
        KernelSpec("dense", "cholesky", "Cholesky factorization",
                   dense.cholesky_allocator, dense.cholesky_kernel),
        KernelSpec("dense", "crossprod", "Matrix cross product A^T A",
                   square, dense.crossprod_kernel),
        KernelSpec("dense", "deformtrans", "Transpose, reshape and transpose",
                   dense.deformtrans_allocator, dense.deformtrans_kernel),
        KernelSpec("dense", "determinant", "Determinant via LU factorization",
                   square, dense.determinant_kernel),
        KernelSpec("dense", "eigen", "Nonsymmetric eigendecomposition",
                   square, dense.eigen_kernel),
        KernelSpec("dense", "lsfit", "Linear least squares fit",
                   dense.lsfit_allocator, dense.lsfit_kernel),
        KernelSpec("dense", "matmat", "Matrix-matrix multiplication",
                   dense.matmat_allocator, dense.matmat_kernel),
        KernelSpec("dense", "matvec", "Matrix-vector multiplication",
                   dense.matvec_allocator, dense.matvec_kernel),
        KernelSpec("dense", "qr", "QR decomposition",
                   square, dense.qr_kernel),
        KernelSpec("dense", "solve", "Linear solve with N right hand sides",
                   dense.solve_allocator, dense.solve_kernel),
        KernelSpec("dense", "svd", "Singular value decomposition",
                   square, dense.svd_kernel),
        KernelSpec("dense", "transpose", "Matrix transpose",
                   square, dense.transpose_kernel),
        # Sparse matrix kernels
        KernelSpec("sparse", "matvec", "Sparse matrix-vector multiplication",
                   sparse.matvec_allocator, sparse.matvec_kernel),
        KernelSpec("sparse", "lu", "Sparse LU factorization",
                   sparse.spd_allocator, sparse.lu_kernel),
        KernelSpec("sparse", "cg", "Conjugate gradient solve",
                   sparse.spd_allocator, sparse.cg_kernel),
        # Clustering
        KernelSpec("clustering", "pam", "PAM (partitioning around medoids)",
                   clustering.clustering_allocator, clustering.pam_kernel),
        KernelSpec("clustering", "clara", "CLARA (sampled partitioning around medoids)",
                   clustering.clustering_allocator, clustering.clara_kernel),
        KernelSpec("clustering", "kmeans", "k-means clustering",
                   clustering.clustering_allocator, clustering.kmeans_kernel),
        KernelSpec("clustering", "hierarchical", "Ward hierarchical clustering",
                   clustering.clustering_allocator, clustering.hierarchical_kernel),
    ]
