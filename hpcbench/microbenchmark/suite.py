"""Suite orchestration: run a list of microbenchmarks and combine their results.

Usage:
    from hpcbench.microbenchmark.suite import run_dense_matrix_benchmark

    # Thread count comes from HPCBENCH_NUM_THREADS_VARIABLE -> e.g. OMP_NUM_THREADS
    results = run_dense_matrix_benchmark("run1", "results")

    # Or drive the orchestrator directly
    results = run_suite(microbenchmarks, run_microbenchmark,
                        number_of_threads=8, run_identifier="run1",
                        results_directory="results")
"""

import gc
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from hpcbench.errors import MicrobenchmarkSuiteError
from hpcbench.microbenchmark.datasets import load_dataset
from hpcbench.microbenchmark.runner import (
    MicrobenchmarkRunner,
    guarded_call,
    run_microbenchmark,
)
from hpcbench.models.microbenchmark_models import Microbenchmark
from hpcbench.options import BenchmarkOptions, get_number_of_threads
from hpcbench.utils.logger import Logger

KernelRunner = Callable[..., pd.DataFrame]
DatasetLoader = Callable[[str], Any]


def _logger() -> logging.Logger:
    Logger.ensure_configured()
    return Logger.get("microbenchmark.suite")


def _check_suite(microbenchmarks: Any) -> None:
    """Reject anything that is not a sequence of Microbenchmark definitions.

    Raises:
        MicrobenchmarkSuiteError: If the suite is structurally malformed.
    """
    if isinstance(microbenchmarks, str | bytes) or not isinstance(
        microbenchmarks, Sequence
    ):
        raise MicrobenchmarkSuiteError(
            f"microbenchmarks must be a list of definitions, got "
            f"{type(microbenchmarks).__name__}"
        )
    for position, microbenchmark in enumerate(microbenchmarks):
        if not isinstance(microbenchmark, Microbenchmark):
            raise MicrobenchmarkSuiteError(
                f"element {position} of the suite is a "
                f"{type(microbenchmark).__name__}, not a microbenchmark definition"
            )


def run_suite(
    microbenchmarks: Sequence[Microbenchmark],
    kernel_runner: KernelRunner = run_microbenchmark,
    number_of_threads: int = 1,
    run_identifier: str = "run",
    results_directory: str | Path = "results",
    dataset_loader: DatasetLoader = load_dataset,
    warnings_as_errors: bool = True,
) -> pd.DataFrame | None:
    """Run each active microbenchmark in order and concatenate their raw tables.

    A microbenchmark naming a shared dataset has it loaded once before its run
    and passed to the runner as ``dataset``; it is released as soon as the
    microbenchmark finishes. If the loader raises (or warns, with
    ``warnings_as_errors``) the microbenchmark is skipped.

    Args:
        microbenchmarks: Ordered definitions to execute.
        kernel_runner: Called as ``kernel_runner(microbenchmark, number_of_threads,
            results_directory, run_identifier, dataset=...)``.
        number_of_threads: Reported thread count.
        run_identifier: Suffix of every summary CSV written.
        results_directory: Directory receiving the summary CSVs.
        dataset_loader: Loads a shared dataset by name.
        warnings_as_errors: Treat a warning raised by the loader as a failure.

    Returns:
        The combined raw trial table in execution order, or None if the suite
        is empty.

    Raises:
        MicrobenchmarkSuiteError: If ``microbenchmarks`` is not a list of
            definitions. Nothing has been run in that case.
    """
    _check_suite(microbenchmarks)
    log = _logger()

    if len(microbenchmarks) == 0:
        log.warning("WARN: no microbenchmarks to execute, skipping")
        return None

    frames: list[pd.DataFrame] = []

    for microbenchmark in microbenchmarks:
        if not microbenchmark.active:
            log.debug(f"Skipping inactive microbenchmark '{microbenchmark.name}'")
            continue

        dataset = None
        data_object_name = microbenchmark.data_object_name
        if data_object_name is not None:
            loaded = guarded_call(
                dataset_loader, data_object_name, warnings_as_errors=warnings_as_errors
            )
            if not loaded.ok:
                log.error(
                    f"ERROR: failed to read data object '{data_object_name}', "
                    f"skipping microbenchmark '{microbenchmark.name}' -- {loaded.error}"
                )
                continue
            dataset = loaded.value
            del loaded

        try:
            frame = kernel_runner(
                microbenchmark,
                number_of_threads,
                results_directory,
                run_identifier,
                dataset=dataset,
            )
        finally:
            del dataset
            gc.collect()

        frames.append(frame)

    return _concatenate(frames)


def _concatenate(frames: list[pd.DataFrame]) -> pd.DataFrame:
    non_empty = [frame for frame in frames if not frame.empty]
    if non_empty:
        return pd.concat(non_empty, ignore_index=True)
    if frames:
        return frames[0].iloc[0:0].reset_index(drop=True)
    return pd.DataFrame()


# -----------------------------------------------------------------------------
# Top-level benchmarks
# -----------------------------------------------------------------------------


def _run_benchmark(
    kind_label: str,
    microbenchmarks: Sequence[Microbenchmark],
    run_identifier: str,
    results_directory: str | Path,
    kernel_runner: KernelRunner | None,
) -> pd.DataFrame | None:
    number_of_threads = get_number_of_threads()
    options = BenchmarkOptions.from_env()
    if len(microbenchmarks) == 0:
        _logger().warning(f"WARN: no {kind_label} microbenchmarks to execute, skipping")
        return None
    if kernel_runner is None:
        kernel_runner = MicrobenchmarkRunner(options=options)
    return run_suite(
        microbenchmarks,
        kernel_runner,
        number_of_threads,
        run_identifier,
        results_directory,
        warnings_as_errors=options.warnings_as_errors,
    )


def run_dense_matrix_benchmark(
    run_identifier: str,
    results_directory: str | Path,
    microbenchmarks: Sequence[Microbenchmark] | None = None,
    kernel_runner: KernelRunner | None = None,
) -> pd.DataFrame | None:
    """Run the dense matrix microbenchmarks (the defaults if none are given).

    Raises:
        ThreadCountConfigurationError: If the thread count is not configured.
        EnvVarError: If an HPCBENCH_* option variable is invalid.
    """
    if microbenchmarks is None:
        from hpcbench.suites.dense import get_dense_matrix_default_microbenchmarks

        microbenchmarks = get_dense_matrix_default_microbenchmarks()
    return _run_benchmark(
        "dense matrix", microbenchmarks, run_identifier, results_directory, kernel_runner
    )


def run_sparse_matrix_benchmark(
    run_identifier: str,
    results_directory: str | Path,
    microbenchmarks: Sequence[Microbenchmark] | None = None,
    kernel_runner: KernelRunner | None = None,
) -> pd.DataFrame | None:
    """Run the sparse matrix microbenchmarks (the defaults if none are given).

    Raises:
        ThreadCountConfigurationError: If the thread count is not configured.
        EnvVarError: If an HPCBENCH_* option variable is invalid.
    """
    if microbenchmarks is None:
        from hpcbench.suites.sparse import get_sparse_matrix_default_microbenchmarks

        microbenchmarks = get_sparse_matrix_default_microbenchmarks()
    return _run_benchmark(
        "sparse matrix", microbenchmarks, run_identifier, results_directory, kernel_runner
    )


def run_machine_learning_benchmark(
    run_identifier: str,
    results_directory: str | Path,
    microbenchmarks: Sequence[Microbenchmark] | None = None,
    kernel_runner: KernelRunner | None = None,
) -> pd.DataFrame | None:
    """Run the clustering microbenchmarks (the defaults if none are given).

    Raises:
        ThreadCountConfigurationError: If the thread count is not configured.
        EnvVarError: If an HPCBENCH_* option variable is invalid.
    """
    if microbenchmarks is None:
        from hpcbench.suites.clustering import get_clustering_default_microbenchmarks

        microbenchmarks = get_clustering_default_microbenchmarks()
    return _run_benchmark(
        "clustering", microbenchmarks, run_identifier, results_directory, kernel_runner
    )
