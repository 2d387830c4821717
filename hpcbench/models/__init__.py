"""Pydantic models for microbenchmark definitions and suite files."""

from hpcbench.models.microbenchmark_models import (
    MICROBENCHMARK_MODELS,
    Capability,
    ClusteringMicrobenchmark,
    DenseMatrixMicrobenchmark,
    Microbenchmark,
    MicrobenchmarkKind,
    SparseMatrixMicrobenchmark,
    microbenchmarks_by_name,
)

__all__ = [
    "MICROBENCHMARK_MODELS",
    "Capability",
    "ClusteringMicrobenchmark",
    "DenseMatrixMicrobenchmark",
    "Microbenchmark",
    "MicrobenchmarkKind",
    "SparseMatrixMicrobenchmark",
    "microbenchmarks_by_name",
]
