"""Run command - execute a microbenchmark suite.

CLI Examples:
    hpcbench run dense --run-id run1                  # Default dense suite
    hpcbench run dense --run-id run1 --example        # Small example suite
    hpcbench run sparse --run-id run1 --only sparse_cg
    hpcbench run clustering --run-id run1 --config suite.yaml
    hpcbench run dense --run-id run1 --output raw.csv # Also save raw trials

The reported thread count is read from the variable named by
HPCBENCH_NUM_THREADS_VARIABLE, e.g.:
    HPCBENCH_NUM_THREADS_VARIABLE=OMP_NUM_THREADS OMP_NUM_THREADS=8 hpcbench run ...
"""

import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import click
import pandas as pd

from hpcbench.errors import MicrobenchmarkSuiteError, SuiteConfigError
from hpcbench.microbenchmark.suite import (
    run_dense_matrix_benchmark,
    run_machine_learning_benchmark,
    run_sparse_matrix_benchmark,
)
from hpcbench.models.config_models import load_suite
from hpcbench.models.microbenchmark_models import (
    Microbenchmark,
    microbenchmarks_by_name,
)
from hpcbench.suites import get_microbenchmarks
from hpcbench.utils.env import EnvVarError

BENCHMARK_RUNNERS: dict[str, Callable[..., pd.DataFrame | None]] = {
    "dense": run_dense_matrix_benchmark,
    "sparse": run_sparse_matrix_benchmark,
    "clustering": run_machine_learning_benchmark,
}


def select_microbenchmarks(
    kind: str,
    example: bool,
    config_path: str | None,
    only: Sequence[str],
) -> list[Microbenchmark]:
    """Build the ordered list of definitions to run.

    Definitions come from the suite file if given, otherwise from the built-in
    default (or example) suite. ``only`` restricts them to the named ones,
    keeping suite order.
    """
    if config_path:
        try:
            file_kind, microbenchmarks = load_suite(config_path)
        except SuiteConfigError as e:
            click.echo(f"Error: {e}")
            sys.exit(1)
        if file_kind != kind:
            click.echo(
                f"Error: Suite file {config_path} defines {file_kind} "
                f"microbenchmarks, not {kind}"
            )
            sys.exit(1)
    else:
        microbenchmarks = get_microbenchmarks(kind, example=example)

    if not only:
        return list(microbenchmarks)

    try:
        lookup = microbenchmarks_by_name(microbenchmarks)
    except ValueError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    unknown = [name for name in only if name not in lookup]
    if unknown:
        valid = ", ".join(lookup)
        click.echo(f"Error: Unknown microbenchmark(s) {', '.join(unknown)}. Valid: {valid}")
        sys.exit(1)

    selected = set(only)
    return [m for m in microbenchmarks if m.name in selected]


def run_benchmark(
    kind: str,
    run_identifier: str,
    results_directory: str,
    example: bool = False,
    config_path: str | None = None,
    only: Sequence[str] = (),
    output: str | None = None,
) -> None:
    """Run a suite of one kind and report where results were written."""
    microbenchmarks = select_microbenchmarks(kind, example, config_path, only)

    try:
        results = BENCHMARK_RUNNERS[kind](
            run_identifier, results_directory, microbenchmarks
        )
    except EnvVarError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)
    except MicrobenchmarkSuiteError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if results is None:
        click.echo("No microbenchmarks were executed.")
        return

    click.echo(f"Recorded {len(results)} measured trials")
    click.echo(f"Summary CSV files written to {Path(results_directory).resolve()}")

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        results.to_csv(output_path, index=False)
        click.echo(f"Raw trial results written to {output_path}")
