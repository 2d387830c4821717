"""hpcbench - Microbenchmark harness for dense, sparse and clustering kernels."""

__version__ = "0.1.0"

__all__ = ["__version__"]
