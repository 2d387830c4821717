"""List commands - show suite definitions and built-in kernels.

CLI Examples:
    hpcbench list dense              # Default dense matrix suite
    hpcbench list clustering --example
    hpcbench kernels                 # All built-in kernels
"""

import click

from hpcbench.kernels.registry import KernelRegistry
from hpcbench.models.microbenchmark_models import Microbenchmark
from hpcbench.suites import get_microbenchmarks


def _format_sizes(microbenchmark: Microbenchmark) -> list[str]:
    return [
        f"{microbenchmark.describe_size(i)} "
        f"(trials={microbenchmark.number_of_trials[i]}, "
        f"warmup={microbenchmark.number_of_warmup_trials[i]})"
        for i in range(microbenchmark.number_of_sizes)
    ]


def list_microbenchmarks(kind: str, example: bool = False) -> None:
    """Print the definitions of a built-in suite in execution order."""
    microbenchmarks = get_microbenchmarks(kind, example=example)
    suite = "example" if example else "default"

    click.echo(f"{kind.capitalize()} microbenchmarks ({suite} suite):")
    click.echo("-" * 60)

    for microbenchmark in microbenchmarks:
        status = "" if microbenchmark.active else " [inactive]"
        click.echo(f"  {microbenchmark.name}{status}")
        if microbenchmark.description:
            click.echo(f"      {microbenchmark.description}")
        if microbenchmark.data_object_name:
            click.echo(f"      dataset: {microbenchmark.data_object_name}")
        for line in _format_sizes(microbenchmark):
            click.echo(f"      - {line}")

    click.echo("-" * 60)
    click.echo(f"Total: {len(microbenchmarks)} microbenchmarks")


def list_kernels(registry: KernelRegistry | None = None) -> None:
    """Print the built-in kernels grouped by kind."""
    registry = registry or KernelRegistry.default()

    click.echo("Available Kernels:")
    click.echo("-" * 50)
    for kind in ("dense", "sparse", "clustering"):
        specs = registry.kernels(kind)
        if not specs:
            continue
        click.echo(f"{kind}:")
        for spec in specs:
            click.echo(f"  {spec.name:<14} {spec.description}")
    click.echo("-" * 50)
    click.echo(f"Total: {len(registry)} kernels registered")
