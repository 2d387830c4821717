"""Shared fixtures for the hpcbench tests."""

from io import StringIO

import pytest

from hpcbench.models.microbenchmark_models import DenseMatrixMicrobenchmark
from hpcbench.timing import TrialTimings
from hpcbench.utils.logger import Logger

HPCBENCH_VARIABLES = (
    "HPCBENCH_RNG_SEED",
    "HPCBENCH_RNG_KIND",
    "HPCBENCH_WARNINGS_AS_ERRORS",
    "HPCBENCH_NUM_THREADS_VARIABLE",
    "HPCBENCH_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def log_output():
    """Route hpcbench diagnostics to a buffer the test can inspect."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)
    yield output


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep HPCBENCH_* settings of the calling shell out of the tests."""
    for name in HPCBENCH_VARIABLES:
        monkeypatch.delenv(name, raising=False)


def noop_allocator(microbenchmark, index, rng, dataset):
    """Allocator producing the problem size as trial input."""
    return {"dimension": microbenchmark.matrix_dimension[index]}


def constant_kernel(microbenchmark, kernel_parameters):
    """Kernel reporting a fixed 0.5 second trial."""
    return TrialTimings(0.25, 0.05, 0.5)


@pytest.fixture
def make_dense():
    """Factory for small dense definitions with stub capabilities."""

    def _make(name="stub", **overrides):
        fields = {
            "name": name,
            "description": f"{name} stub",
            "matrix_dimension": [4],
            "number_of_trials": [2],
            "number_of_warmup_trials": [1],
            "allocator": noop_allocator,
            "kernel_function": constant_kernel,
        }
        fields.update(overrides)
        return DenseMatrixMicrobenchmark(**fields)

    return _make
