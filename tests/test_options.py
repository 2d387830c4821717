"""Tests for run-wide options and the thread count."""

import numpy as np
import pytest

from hpcbench.options import (
    NUM_THREADS_VARIABLE,
    BenchmarkOptions,
    BenchmarkOptionsError,
    ThreadCountConfigurationError,
    get_number_of_threads,
)
from hpcbench.utils.env import EnvVarError, EnvVarNotSetError, EnvVarTypeError


def test_defaults():
    """Test default option values."""
    options = BenchmarkOptions.from_env()

    assert options.rng_seed == 42
    assert options.rng_kind == "PCG64"
    assert options.warnings_as_errors is True


def test_options_from_environment(monkeypatch):
    """Test overriding options through HPCBENCH_* variables."""
    monkeypatch.setenv("HPCBENCH_RNG_SEED", "7")
    monkeypatch.setenv("HPCBENCH_RNG_KIND", "MT19937")
    monkeypatch.setenv("HPCBENCH_WARNINGS_AS_ERRORS", "false")

    options = BenchmarkOptions.from_env()

    assert options.rng_seed == 7
    assert options.rng_kind == "MT19937"
    assert options.warnings_as_errors is False


def test_invalid_rng_kind(monkeypatch):
    """Test that an unknown bit generator is rejected."""
    monkeypatch.setenv("HPCBENCH_RNG_KIND", "Mersenne")

    with pytest.raises(BenchmarkOptionsError) as exc_info:
        BenchmarkOptions.from_env()

    assert exc_info.value.name == "HPCBENCH_RNG_KIND"
    assert "Mersenne" in str(exc_info.value)
    assert isinstance(exc_info.value, EnvVarError)


def test_negative_rng_seed(monkeypatch):
    """Test that a seed below zero is reported against its variable."""
    monkeypatch.setenv("HPCBENCH_RNG_SEED", "-1")

    with pytest.raises(BenchmarkOptionsError, match="HPCBENCH_RNG_SEED='-1'"):
        BenchmarkOptions.from_env()


def test_non_integer_rng_seed(monkeypatch):
    """Test that a non-numeric seed is a type error."""
    monkeypatch.setenv("HPCBENCH_RNG_SEED", "lucky")

    with pytest.raises(EnvVarTypeError):
        BenchmarkOptions.from_env()


def test_make_rng_is_reproducible():
    """Test that every generator starts from the same state."""
    options = BenchmarkOptions(rng_seed=3, rng_kind="Philox")

    first = options.make_rng().standard_normal(5)
    second = options.make_rng().standard_normal(5)

    np.testing.assert_array_equal(first, second)
    assert isinstance(options.make_rng().bit_generator, np.random.Philox)


def test_thread_count_indirection(monkeypatch):
    """Test reading the thread count through the named variable."""
    monkeypatch.setenv(NUM_THREADS_VARIABLE, "OMP_NUM_THREADS")
    monkeypatch.setenv("OMP_NUM_THREADS", "12")

    assert get_number_of_threads() == 12


def test_thread_variable_not_set(monkeypatch):
    """Test the error when the indirection variable is missing."""
    with pytest.raises(ThreadCountConfigurationError) as exc_info:
        get_number_of_threads()

    assert exc_info.value.name == NUM_THREADS_VARIABLE
    assert exc_info.value.indirect_from is None
    assert isinstance(exc_info.value, EnvVarNotSetError)


def test_named_variable_not_set(monkeypatch):
    """Test the error when the named variable is missing or empty."""
    monkeypatch.setenv(NUM_THREADS_VARIABLE, "HPCBENCH_TEST_THREADS")
    monkeypatch.setenv("HPCBENCH_TEST_THREADS", "")

    with pytest.raises(ThreadCountConfigurationError) as exc_info:
        get_number_of_threads()

    assert exc_info.value.name == "HPCBENCH_TEST_THREADS"
    assert exc_info.value.indirect_from == NUM_THREADS_VARIABLE
    assert "named by HPCBENCH_NUM_THREADS_VARIABLE" in str(exc_info.value)


def test_thread_count_not_an_integer(monkeypatch):
    """Test the error for a non-numeric thread count."""
    monkeypatch.setenv(NUM_THREADS_VARIABLE, "HPCBENCH_TEST_THREADS")
    monkeypatch.setenv("HPCBENCH_TEST_THREADS", "eight")

    with pytest.raises(EnvVarTypeError):
        get_number_of_threads()
