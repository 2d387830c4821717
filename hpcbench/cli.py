#!/usr/bin/env python3
"""hpcbench CLI - Command-line interface for the microbenchmark harness."""

import click

from hpcbench.utils.env import get_env
from hpcbench.utils.logger import Logger

KINDS = ["dense", "sparse", "clustering"]


@click.group()
@click.version_option(package_name="hpcbench")
def hpcbench():
    """Dense matrix, sparse matrix and clustering microbenchmarks."""
    # Diagnostics go to stderr, progress to stdout
    if not Logger.is_configured():
        Logger.configure(
            level=get_env("HPCBENCH_LOG_LEVEL", default="INFO"),
            output="stderr",
            timestamps=True,
        )


@hpcbench.command()
@click.argument("kind", type=click.Choice(KINDS))
@click.option(
    "--run-id",
    "run_identifier",
    required=True,
    help="Tag appended to every results file name (<name>_<run-id>.csv)",
)
@click.option(
    "--results-dir",
    "results_directory",
    type=click.Path(file_okay=False),
    default="results",
    show_default=True,
    help="Directory receiving the summary CSV files",
)
@click.option(
    "--example",
    is_flag=True,
    help="Run the small example suite instead of the default one",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Suite file (YAML or JSON) defining the microbenchmarks to run",
)
@click.option(
    "--only",
    multiple=True,
    help="Run only the named microbenchmark(s) (repeatable)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Also write the raw trial table to this CSV file",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug output",
)
def run(kind, run_identifier, results_directory, example, config_path, only, output, debug):
    r"""Run a microbenchmark suite.

    \b
    Examples:
      hpcbench run dense --run-id run1
      hpcbench run sparse --run-id run1 --example
      hpcbench run clustering --run-id run1 --only pam_cluster_3_7_2500
      hpcbench run dense --run-id run1 --config suite.yaml -o raw.csv
    """
    from hpcbench.commands.run_cmd import run_benchmark

    if debug:
        Logger.set_level("DEBUG")

    run_benchmark(
        kind,
        run_identifier,
        results_directory,
        example=example,
        config_path=config_path,
        only=only,
        output=output,
    )


@hpcbench.command(name="list")
@click.argument("kind", type=click.Choice(KINDS))
@click.option(
    "--example",
    is_flag=True,
    help="List the example suite instead of the default one",
)
def list_(kind, example):
    """List the microbenchmarks of a built-in suite."""
    from hpcbench.commands.list_cmd import list_microbenchmarks

    list_microbenchmarks(kind, example=example)


@hpcbench.command()
def kernels():
    """List the built-in kernels usable in suite files."""
    from hpcbench.commands.list_cmd import list_kernels

    list_kernels()


if __name__ == "__main__":
    hpcbench()
