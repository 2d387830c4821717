"""Microbenchmark runner: the warm-up and measured trial loop.

For every problem size of a microbenchmark, in the configured order, the
runner performs ``warmup + trials`` trials. Each trial reseeds the random
number generator, calls the allocator, times the kernel function and then
releases the trial input. Only trials after the warm-up ones are recorded.

An allocator or kernel failure ends the trials of that problem size (later
sizes still run), and the summary of the size is computed from whatever
measured trials succeeded before the failure.

Usage:
    from hpcbench.microbenchmark.runner import MicrobenchmarkRunner

    runner = MicrobenchmarkRunner()
    frame = runner.run(microbenchmark, number_of_threads=8,
                       results_directory="results", run_identifier="run1")
"""

import gc
import importlib
import logging
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import click
import numpy as np
import pandas as pd

from hpcbench.errors import (
    AllocationError,
    KernelError,
    MicrobenchmarkConfigurationError,
)
from hpcbench.kernels.registry import KernelNotFoundError, KernelRegistry
from hpcbench.microbenchmark.recorder import ResultsRecorder, empty_results_frame
from hpcbench.microbenchmark.statistics import (
    compute_average_time,
    compute_standard_deviation,
)
from hpcbench.models.microbenchmark_models import Capability, Microbenchmark
from hpcbench.options import BenchmarkOptions
from hpcbench.timing import TrialTimings
from hpcbench.utils.logger import Logger


@dataclass(frozen=True)
class CallOutcome:
    """Result of a guarded allocator or kernel call: a value or an error."""

    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SizeSummary:
    """Outcome of all trials of one problem size."""

    index: int
    description: str
    number_of_successful_trials: int
    average_wall_clock_time: float
    standard_deviation: float


def guarded_call(
    func: Callable[..., Any], *args: Any, warnings_as_errors: bool = True
) -> CallOutcome:
    """Call ``func`` and capture any exception as the outcome's error.

    With ``warnings_as_errors`` a warning raised during the call is a failure.
    """
    try:
        with warnings.catch_warnings():
            if warnings_as_errors:
                warnings.simplefilter("error")
            return CallOutcome(value=func(*args))
    except Exception as e:
        return CallOutcome(error=e)


def as_trial_timings(value: Any) -> TrialTimings:
    """Coerce a kernel function's return value to TrialTimings.

    Raises:
        TypeError: If the value is not three numbers.
    """
    if isinstance(value, TrialTimings):
        return value
    try:
        user_time, system_time, wall_clock_time = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise TypeError(
            "kernel function must return (user_time, system_time, wall_clock_time), "
            f"got {value!r}"
        ) from e
    return TrialTimings(user_time, system_time, wall_clock_time)


def resolve_capability(
    capability: Capability,
    kind: str,
    role: str,
    registry: KernelRegistry | None = None,
) -> Callable[..., Any]:
    """Resolve an allocator or kernel function reference to a callable.

    Args:
        capability: A callable, a kernel registry name, or an import path of
            the form "package.module:attribute".
        kind: Microbenchmark kind, used for registry lookups.
        role: "allocator" or "kernel_function".
        registry: Registry to look names up in; defaults to the built-in one.

    Raises:
        ValueError: If the reference does not resolve to a callable.
    """
    if callable(capability):
        return capability

    if not isinstance(capability, str) or not capability:
        raise ValueError(f"{role} must be a callable or a name, got {capability!r}")

    resolved: Any
    if ":" in capability:
        module_name, _, attribute = capability.partition(":")
        try:
            module = importlib.import_module(module_name)
            resolved = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"cannot import {role} '{capability}': {e}") from e
    else:
        registry = registry or KernelRegistry.default()
        try:
            resolved = getattr(registry.get(kind, capability), role)
        except KernelNotFoundError as e:
            raise ValueError(str(e)) from e

    if not callable(resolved):
        raise ValueError(f"{role} '{capability}' is not callable")
    return resolved


def _timed_kernel(
    kernel_function: Callable[..., Any],
    microbenchmark: Microbenchmark,
    kernel_parameters: Any,
) -> TrialTimings:
    return as_trial_timings(kernel_function(microbenchmark, kernel_parameters))


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


class MicrobenchmarkRunner:
    """Executes one microbenchmark and returns its raw trial table.

    Diagnostics are logged; progress lines are echoed to stdout.
    """

    def __init__(
        self,
        options: BenchmarkOptions | None = None,
        registry: KernelRegistry | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            options: RNG and warning handling options; defaults from environment.
            registry: Kernel registry for string capabilities.
        """
        self.options = options or BenchmarkOptions.from_env()
        self.registry = registry or KernelRegistry.default()

    @property
    def logger(self) -> logging.Logger:
        """Logger for runner diagnostics."""
        Logger.ensure_configured()
        return Logger.get("microbenchmark.runner")

    def __call__(
        self,
        microbenchmark: Microbenchmark,
        number_of_threads: int,
        results_directory: str | Path,
        run_identifier: str,
        dataset: Any = None,
    ) -> pd.DataFrame:
        return self.run(
            microbenchmark, number_of_threads, results_directory, run_identifier, dataset
        )

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def run(
        self,
        microbenchmark: Microbenchmark,
        number_of_threads: int,
        results_directory: str | Path,
        run_identifier: str,
        dataset: Any = None,
    ) -> pd.DataFrame:
        """Run every problem size of ``microbenchmark``.

        Args:
            microbenchmark: Definition to execute.
            number_of_threads: Reported thread count, written to the summary CSV.
            results_directory: Directory for ``<name>_<run_identifier>.csv``;
                created if missing.
            run_identifier: Suffix of the summary CSV file name.
            dataset: Shared dataset handed to every allocator call, if any.

        Returns:
            One row per successful measured trial. Empty (with columns) when
            the definition is misconfigured or no measured trial succeeded.
        """
        click.echo(f"Running microbenchmark: {microbenchmark.name}")
        click.echo(f"Microbenchmark description: {microbenchmark.description}")

        try:
            allocator, kernel_function = self._prepare(microbenchmark, results_directory)
        except MicrobenchmarkConfigurationError as e:
            self.logger.error(f"ERROR: {e}")
            return empty_results_frame(type(microbenchmark))

        recorder = ResultsRecorder(microbenchmark, results_directory, run_identifier)

        # One buffer sized for the largest trial count serves every size
        trial_times = np.full(max(microbenchmark.number_of_trials, default=0), np.nan)
        summaries: list[SizeSummary] = []

        for index in range(microbenchmark.number_of_sizes):
            trial_times.fill(np.nan)
            successes = self._run_problem_size(
                microbenchmark, index, allocator, kernel_function,
                recorder, trial_times, dataset,
            )

            average = compute_average_time(successes, trial_times)
            deviation = compute_standard_deviation(successes, trial_times)
            recorder.write_summary_row(number_of_threads, index, average, deviation)

            summary = SizeSummary(
                index=index,
                description=microbenchmark.describe_size(index),
                number_of_successful_trials=successes,
                average_wall_clock_time=average,
                standard_deviation=deviation,
            )
            summaries.append(summary)
            click.echo(
                f"{summary.description}: {successes} successful trials, "
                f"average {average:.6f}(sec), standard deviation {deviation:.6f}(sec)"
            )

        self._print_results(microbenchmark, number_of_threads, summaries)
        return recorder.to_frame()

    def _prepare(
        self, microbenchmark: Microbenchmark, results_directory: str | Path
    ) -> tuple[Callable[..., Any], Callable[..., Any]]:
        """Validate the definition, resolve its capabilities, create the output directory.

        Raises:
            MicrobenchmarkConfigurationError: If anything is misconfigured.
        """
        name = microbenchmark.name
        try:
            allocator = resolve_capability(
                microbenchmark.allocator, microbenchmark.kind, "allocator", self.registry
            )
            kernel_function = resolve_capability(
                microbenchmark.kernel_function,
                microbenchmark.kind,
                "kernel_function",
                self.registry,
            )
        except ValueError as e:
            raise MicrobenchmarkConfigurationError(name, str(e)) from e

        microbenchmark.check_consistency()

        try:
            Path(results_directory).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MicrobenchmarkConfigurationError(
                name, f"cannot create results directory {results_directory}: {e}"
            ) from e

        return allocator, kernel_function

    def _run_problem_size(
        self,
        microbenchmark: Microbenchmark,
        index: int,
        allocator: Callable[..., Any],
        kernel_function: Callable[..., Any],
        recorder: ResultsRecorder,
        trial_times: np.ndarray,
        dataset: Any,
    ) -> int:
        """Run the warm-up and measured trials of one problem size.

        Returns:
            Number of measured trials that succeeded.
        """
        warmup_trials = microbenchmark.number_of_warmup_trials[index]
        total_trials = microbenchmark.number_of_trials[index] + warmup_trials
        description = microbenchmark.describe_size(index)
        warnings_as_errors = self.options.warnings_as_errors
        successes = 0

        for trial in range(1, total_trials + 1):
            click.echo(f"Running performance trial {trial} for {description}...")

            allocation = guarded_call(
                allocator,
                microbenchmark,
                index,
                self.options.make_rng(),
                dataset,
                warnings_as_errors=warnings_as_errors,
            )
            if not allocation.ok:
                error = AllocationError(microbenchmark.name, index, allocation.error)
                self.logger.error(f"ERROR: {error}")
                break

            kernel_parameters = allocation.value
            del allocation

            date_started = _timestamp()
            outcome = guarded_call(
                _timed_kernel,
                kernel_function,
                microbenchmark,
                kernel_parameters,
                warnings_as_errors=warnings_as_errors,
            )
            date_finished = _timestamp()

            del kernel_parameters
            gc.collect()

            if not outcome.ok:
                error = KernelError(microbenchmark.name, index, outcome.error)
                self.logger.error(f"ERROR: {error}")
                break

            timings: TrialTimings = outcome.value
            if trial > warmup_trials:
                recorder.add_trial(index, timings, date_started, date_finished)
                trial_times[trial - warmup_trials - 1] = timings.wall_clock_time
                successes += 1

            click.echo(f"done: {timings.wall_clock_time:f}(sec)")

        return successes

    def _print_results(
        self,
        microbenchmark: Microbenchmark,
        number_of_threads: int,
        summaries: list[SizeSummary],
    ) -> None:
        """Echo the per-size results table of one microbenchmark."""
        click.echo(f"\nResults for microbenchmark {microbenchmark.name}")
        click.echo(f"Number of threads: {number_of_threads}")
        click.echo("-" * 78)
        click.echo(f"{'Problem size':<44} {'Trials':>6} {'Average(s)':>12} {'StdDev(s)':>12}")
        for summary in summaries:
            click.echo(
                f"{summary.description:<44} "
                f"{summary.number_of_successful_trials:>6} "
                f"{summary.average_wall_clock_time:>12.6f} "
                f"{summary.standard_deviation:>12.6f}"
            )
        click.echo("-" * 78 + "\n")


def run_microbenchmark(
    microbenchmark: Microbenchmark,
    number_of_threads: int,
    results_directory: str | Path,
    run_identifier: str,
    dataset: Any = None,
) -> pd.DataFrame:
    """Run one microbenchmark with options taken from the environment."""
    return MicrobenchmarkRunner().run(
        microbenchmark, number_of_threads, results_directory, run_identifier, dataset
    )
