"""Pydantic models for microbenchmark definitions.

A definition describes one microbenchmark: the kernel to time (through its
allocator and kernel function capabilities), the problem sizes to test and how
many warm-up and measured trials to run for each size. There is one model per
kernel kind; they differ only in which size parameters they carry.
"""

from collections.abc import Callable, Sequence
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from hpcbench.errors import MicrobenchmarkConfigurationError

# A callable, a kernel registry name ("cholesky") or an import path
# ("package.module:attribute"). Strings are resolved by the runner.
Capability = Callable[..., Any] | str


def _as_list(value: Any) -> Any:
    """Accept a bare scalar wherever a per-size sequence is expected."""
    if isinstance(value, int | float | str):
        return [value]
    return value


class Microbenchmark(BaseModel):
    """Fields and behavior shared by every microbenchmark kind."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClassVar[str] = ""
    SIZE_FIELDS: ClassVar[tuple[str, ...]] = ()

    active: bool = Field(True, description="Whether the suite executes this definition")
    name: str = Field(
        ..., min_length=1, description="Unique name, also the base of output file names"
    )
    description: str = Field("", description="Free-text explanation")
    data_object_name: str | None = Field(
        None, description="Shared dataset loaded once for this definition"
    )
    number_of_trials: list[NonNegativeInt] = Field(
        ..., description="Measured trials per problem size"
    )
    number_of_warmup_trials: list[NonNegativeInt] = Field(
        ..., description="Untimed warm-up trials per problem size"
    )
    allocator: Capability = Field(..., description="Produces the input of one trial")
    kernel_function: Capability = Field(
        ..., description="Times the kernel on allocator output"
    )

    @field_validator("number_of_trials", "number_of_warmup_trials", mode="before")
    @classmethod
    def _wrap_counts(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("data_object_name", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    # -------------------------------------------------------------------------
    # Size parameters
    # -------------------------------------------------------------------------

    def size_parameters(self) -> dict[str, list[int]]:
        """Return the parallel size sequences keyed by field name."""
        return {field: list(getattr(self, field)) for field in self.SIZE_FIELDS}

    @property
    def number_of_sizes(self) -> int:
        """Number of problem sizes, taken from the first size sequence."""
        return len(getattr(self, self.SIZE_FIELDS[0]))

    def size_fields(self, index: int) -> dict[str, int]:
        """Return the size-describing fields of problem size ``index``."""
        return {field: int(getattr(self, field)[index]) for field in self.SIZE_FIELDS}

    def describe_size(self, index: int) -> str:
        """Human-readable description of problem size ``index``."""
        return ", ".join(f"{k}={v}" for k, v in self.size_fields(index).items())

    @classmethod
    def size_columns(cls) -> tuple[str, ...]:
        """Column names of the size-describing fields."""
        return cls.SIZE_FIELDS

    def check_consistency(self) -> None:
        """Check that every per-size sequence has the same length.

        Raises:
            MicrobenchmarkConfigurationError: On any length mismatch.
        """
        sequences: dict[str, Sequence[int]] = self.size_parameters()
        sequences["number_of_warmup_trials"] = self.number_of_warmup_trials

        expected = len(self.number_of_trials)
        for field, values in sequences.items():
            if len(values) != expected:
                raise MicrobenchmarkConfigurationError(
                    self.name,
                    f"lengths of number_of_trials and {field} arrays must be equal "
                    f"({expected} != {len(values)})",
                )


class DenseMatrixMicrobenchmark(Microbenchmark):
    """Microbenchmark of a dense matrix kernel over square matrix dimensions."""

    kind: ClassVar[str] = "dense"
    SIZE_FIELDS: ClassVar[tuple[str, ...]] = ("matrix_dimension",)

    matrix_dimension: list[NonNegativeInt] = Field(
        ..., description="Matrix order N of each problem size"
    )

    @field_validator("matrix_dimension", mode="before")
    @classmethod
    def _wrap_dimensions(cls, value: Any) -> Any:
        return _as_list(value)

    def describe_size(self, index: int) -> str:
        n = self.matrix_dimension[index]
        return f"matrix dimension {n} x {n}"


class SparseMatrixMicrobenchmark(Microbenchmark):
    """Microbenchmark of a sparse matrix kernel."""

    kind: ClassVar[str] = "sparse"
    SIZE_FIELDS: ClassVar[tuple[str, ...]] = (
        "number_of_rows",
        "number_of_columns",
        "number_of_nonzeros",
    )

    number_of_rows: list[NonNegativeInt]
    number_of_columns: list[NonNegativeInt]
    number_of_nonzeros: list[NonNegativeInt]

    @field_validator(
        "number_of_rows", "number_of_columns", "number_of_nonzeros", mode="before"
    )
    @classmethod
    def _wrap_sizes(cls, value: Any) -> Any:
        return _as_list(value)

    def describe_size(self, index: int) -> str:
        return (
            f"matrix dimensions {self.number_of_rows[index]} x "
            f"{self.number_of_columns[index]} "
            f"({self.number_of_nonzeros[index]} nonzeros)"
        )


class ClusteringMicrobenchmark(Microbenchmark):
    """Microbenchmark of a clustering algorithm on synthetic Gaussian clusters."""

    kind: ClassVar[str] = "clustering"
    SIZE_FIELDS: ClassVar[tuple[str, ...]] = (
        "number_of_features",
        "number_of_clusters",
        "number_of_feature_vectors_per_cluster",
    )

    number_of_features: list[NonNegativeInt]
    number_of_clusters: list[NonNegativeInt]
    number_of_feature_vectors_per_cluster: list[NonNegativeInt]

    @field_validator(
        "number_of_features",
        "number_of_clusters",
        "number_of_feature_vectors_per_cluster",
        mode="before",
    )
    @classmethod
    def _wrap_sizes(cls, value: Any) -> Any:
        return _as_list(value)

    def describe_size(self, index: int) -> str:
        clusters = self.number_of_clusters[index]
        per_cluster = self.number_of_feature_vectors_per_cluster[index]
        return (
            f"{clusters * per_cluster} feature vectors of dimension "
            f"{self.number_of_features[index]} in {clusters} clusters"
        )


MicrobenchmarkKind = Literal["dense", "sparse", "clustering"]

MICROBENCHMARK_MODELS: dict[str, type[Microbenchmark]] = {
    "dense": DenseMatrixMicrobenchmark,
    "sparse": SparseMatrixMicrobenchmark,
    "clustering": ClusteringMicrobenchmark,
}


def microbenchmarks_by_name(
    microbenchmarks: Sequence[Microbenchmark],
) -> dict[str, Microbenchmark]:
    """Build a name -> definition lookup, preserving list order.

    Raises:
        ValueError: If two definitions share a name.
    """
    lookup: dict[str, Microbenchmark] = {}
    for microbenchmark in microbenchmarks:
        if microbenchmark.name in lookup:
            raise ValueError(f"Duplicate microbenchmark name: '{microbenchmark.name}'")
        lookup[microbenchmark.name] = microbenchmark
    return lookup
