"""Microbenchmark execution engine.

Runs microbenchmark definitions over their problem sizes, records per-trial
timings and per-size summaries, and combines the results of whole suites.
"""

from hpcbench.microbenchmark.runner import (
    CallOutcome,
    MicrobenchmarkRunner,
    guarded_call,
    resolve_capability,
    run_microbenchmark,
)
from hpcbench.microbenchmark.statistics import (
    compute_average_time,
    compute_standard_deviation,
)
from hpcbench.microbenchmark.suite import (
    run_dense_matrix_benchmark,
    run_machine_learning_benchmark,
    run_sparse_matrix_benchmark,
    run_suite,
)
from hpcbench.timing import TrialTimings, time_call

__all__ = [
    "CallOutcome",
    "MicrobenchmarkRunner",
    "TrialTimings",
    "compute_average_time",
    "compute_standard_deviation",
    "guarded_call",
    "resolve_capability",
    "run_dense_matrix_benchmark",
    "run_machine_learning_benchmark",
    "run_microbenchmark",
    "run_sparse_matrix_benchmark",
    "run_suite",
    "time_call",
]
