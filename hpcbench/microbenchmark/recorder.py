"""Recording of microbenchmark results.

Two outputs are produced while a microbenchmark runs:

- One summary row per problem size, appended to
  ``<results_directory>/<name>_<run_identifier>.csv``. The file is opened,
  appended and closed on every write so that sizes already tested survive an
  early termination.
- A raw table with one row per successful measured trial, kept in memory and
  returned to the caller as a pandas DataFrame.

Usage:
    from hpcbench.microbenchmark.recorder import ResultsRecorder

    recorder = ResultsRecorder(microbenchmark, results_directory, run_identifier)
    recorder.add_trial(index, timings, date_started, date_finished)
    recorder.write_summary_row(number_of_threads, index, average, deviation)
    frame = recorder.to_frame()
"""

from pathlib import Path
from typing import Any

import pandas as pd

from hpcbench.models.microbenchmark_models import Microbenchmark
from hpcbench.timing import TrialTimings

RAW_LEADING_COLUMNS = ("benchmark_name",)
RAW_TRAILING_COLUMNS = (
    "user_time",
    "system_time",
    "wall_clock_time",
    "date_started",
    "date_finished",
)
SUMMARY_LEADING_COLUMNS = ("number_of_threads",)
SUMMARY_TRAILING_COLUMNS = ("average_wall_clock_time", "standard_deviation")

# Written in place of NaN when no (or only one) measured trial succeeded
MISSING_VALUE = "NaN"


def raw_columns(microbenchmark_cls: type[Microbenchmark]) -> list[str]:
    """Columns of the raw trial table for a microbenchmark kind."""
    return [
        *RAW_LEADING_COLUMNS,
        *microbenchmark_cls.size_columns(),
        *RAW_TRAILING_COLUMNS,
    ]


def summary_columns(microbenchmark_cls: type[Microbenchmark]) -> list[str]:
    """Columns of the per-size summary CSV for a microbenchmark kind."""
    return [
        *SUMMARY_LEADING_COLUMNS,
        *microbenchmark_cls.size_columns(),
        *SUMMARY_TRAILING_COLUMNS,
    ]


def empty_results_frame(microbenchmark_cls: type[Microbenchmark]) -> pd.DataFrame:
    """Raw trial table with the right columns and no rows."""
    return pd.DataFrame(columns=raw_columns(microbenchmark_cls))


def csv_results_path(
    results_directory: str | Path, name: str, run_identifier: str
) -> Path:
    """Path of the summary CSV for one microbenchmark and run."""
    return Path(results_directory) / f"{name}_{run_identifier}.csv"


def write_summary_row(
    file_path: str | Path,
    row: dict[str, Any],
    columns: list[str] | None = None,
) -> None:
    """Append one row to a CSV file, writing the header first if it is new.

    Args:
        file_path: CSV file to create or append to.
        row: Column name -> value.
        columns: Column order; defaults to the order of ``row``.
    """
    path = Path(file_path)
    frame = pd.DataFrame([row], columns=columns or list(row))
    write_header = not path.exists()
    with open(path, "a", newline="") as f:
        frame.to_csv(f, header=write_header, index=False, na_rep=MISSING_VALUE)


class ResultsRecorder:
    """Collects trial records and writes summary rows for one microbenchmark."""

    def __init__(
        self,
        microbenchmark: Microbenchmark,
        results_directory: str | Path,
        run_identifier: str,
    ) -> None:
        """Initialize the recorder.

        Args:
            microbenchmark: Definition being executed.
            results_directory: Directory that receives the summary CSV.
            run_identifier: Suffix distinguishing this run's output files.
        """
        self.microbenchmark = microbenchmark
        self.csv_path = csv_results_path(
            results_directory, microbenchmark.name, run_identifier
        )
        self._rows: list[dict[str, Any]] = []

    def add_trial(
        self,
        index: int,
        timings: TrialTimings,
        date_started: str,
        date_finished: str,
    ) -> None:
        """Record one successful measured trial of problem size ``index``."""
        self._rows.append(
            {
                "benchmark_name": self.microbenchmark.name,
                **self.microbenchmark.size_fields(index),
                "user_time": float(timings.user_time),
                "system_time": float(timings.system_time),
                "wall_clock_time": float(timings.wall_clock_time),
                "date_started": date_started,
                "date_finished": date_finished,
            }
        )

    def write_summary_row(
        self,
        number_of_threads: int,
        index: int,
        average_wall_clock_time: float,
        standard_deviation: float,
    ) -> None:
        """Append the summary of problem size ``index`` to the results CSV."""
        row = {
            "number_of_threads": number_of_threads,
            **self.microbenchmark.size_fields(index),
            "average_wall_clock_time": average_wall_clock_time,
            "standard_deviation": standard_deviation,
        }
        write_summary_row(
            self.csv_path, row, summary_columns(type(self.microbenchmark))
        )

    @property
    def trial_count(self) -> int:
        """Number of trial records collected so far."""
        return len(self._rows)

    def to_frame(self) -> pd.DataFrame:
        """Return the raw trial table."""
        columns = raw_columns(type(self.microbenchmark))
        if not self._rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(self._rows, columns=columns)
