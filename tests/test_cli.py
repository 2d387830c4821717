"""Tests for the command-line interface."""

import pandas as pd
import pytest
from click.testing import CliRunner

from hpcbench.cli import hpcbench

TINY_SUITE = """\
kind: dense
microbenchmarks:
  - name: matmat_tiny
    kernel: matmat
    matrix_dimension: [4, 6]
    number_of_trials: [2, 2]
    number_of_warmup_trials: [1, 1]
  - name: qr_tiny
    kernel: qr
    matrix_dimension: 4
    number_of_trials: 1
    number_of_warmup_trials: 0
"""


@pytest.fixture
def suite_file(tmp_path):
    """A dense suite small enough to run in the test."""
    path = tmp_path / "suite.yaml"
    path.write_text(TINY_SUITE)
    return path


@pytest.fixture
def thread_env(monkeypatch):
    """Report 2 threads."""
    monkeypatch.setenv("HPCBENCH_NUM_THREADS_VARIABLE", "HPCBENCH_TEST_THREADS")
    monkeypatch.setenv("HPCBENCH_TEST_THREADS", "2")


def test_kernels_command():
    """Test listing the built-in kernels."""
    result = CliRunner().invoke(hpcbench, ["kernels"])

    assert result.exit_code == 0
    assert "cholesky" in result.output
    assert "clara" in result.output
    assert "Total: 19 kernels registered" in result.output


def test_list_command():
    """Test listing an example suite."""
    result = CliRunner().invoke(hpcbench, ["list", "clustering", "--example"])

    assert result.exit_code == 0
    assert "pam_cluster_3_3_1000" in result.output
    assert "clara_cluster_3_3_1000" in result.output
    assert "Total: 2 microbenchmarks" in result.output


def test_run_suite_file(thread_env, suite_file, tmp_path):
    """Test running a suite file end to end."""
    results_directory = tmp_path / "results"
    raw = tmp_path / "raw.csv"

    result = CliRunner().invoke(
        hpcbench,
        [
            "run", "dense",
            "--run-id", "t1",
            "--results-dir", str(results_directory),
            "--config", str(suite_file),
            "--output", str(raw),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Recorded 5 measured trials" in result.output

    summary = pd.read_csv(results_directory / "matmat_tiny_t1.csv")
    assert list(summary["matrix_dimension"]) == [4, 6]
    assert list(summary["number_of_threads"]) == [2, 2]
    assert (results_directory / "qr_tiny_t1.csv").is_file()
    assert list(pd.read_csv(raw)["benchmark_name"]) == ["matmat_tiny"] * 4 + ["qr_tiny"]


def test_run_only_selected(thread_env, suite_file, tmp_path):
    """Test restricting a run to one microbenchmark."""
    result = CliRunner().invoke(
        hpcbench,
        [
            "run", "dense", "--run-id", "t2",
            "--results-dir", str(tmp_path),
            "--config", str(suite_file),
            "--only", "qr_tiny",
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "qr_tiny_t2.csv").is_file()
    assert not (tmp_path / "matmat_tiny_t2.csv").exists()


def test_run_unknown_only(thread_env, suite_file, tmp_path):
    """Test that an unknown --only name is an error."""
    result = CliRunner().invoke(
        hpcbench,
        ["run", "dense", "--run-id", "t3", "--config", str(suite_file), "--only", "nope"],
    )

    assert result.exit_code == 1
    assert "Unknown microbenchmark(s) nope" in result.output


def test_run_kind_mismatch(thread_env, suite_file):
    """Test that a suite file of another kind is rejected."""
    result = CliRunner().invoke(
        hpcbench, ["run", "sparse", "--run-id", "t4", "--config", str(suite_file)]
    )

    assert result.exit_code == 1
    assert "defines dense microbenchmarks" in result.output


def test_run_without_thread_count(suite_file, tmp_path):
    """Test that a missing thread count configuration exits with status 1."""
    result = CliRunner().invoke(
        hpcbench,
        ["run", "dense", "--run-id", "t5", "--results-dir", str(tmp_path),
         "--config", str(suite_file)],
    )

    assert result.exit_code == 1
    assert "HPCBENCH_NUM_THREADS_VARIABLE" in result.output
    assert not list(tmp_path.glob("*_t5.csv"))


def test_run_invalid_suite_file(thread_env, tmp_path):
    """Test that an invalid suite file exits with status 1."""
    path = tmp_path / "bad.yaml"
    path.write_text("kind: dense\nmicrobenchmarks:\n  - name: x\n    kernel: nope\n")

    result = CliRunner().invoke(
        hpcbench, ["run", "dense", "--run-id", "t6", "--config", str(path)]
    )

    assert result.exit_code == 1
    assert "Invalid suite file" in result.output


def test_run_invalid_rng_kind(thread_env, monkeypatch, suite_file, tmp_path):
    """Test that an invalid HPCBENCH_RNG_KIND exits with status 1."""
    monkeypatch.setenv("HPCBENCH_RNG_KIND", "Mersenne")

    result = CliRunner().invoke(
        hpcbench,
        ["run", "dense", "--run-id", "t7", "--results-dir", str(tmp_path),
         "--config", str(suite_file)],
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Error: Invalid value HPCBENCH_RNG_KIND='Mersenne'" in result.output
    assert not list(tmp_path.glob("*_t7.csv"))
