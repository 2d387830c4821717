"""Tests for the environment variable utility."""

import pytest

from hpcbench.utils.env import (
    EnvVarNotSetError,
    EnvVarTypeError,
    get_env,
    require_env,
)


def test_get_env_basic(monkeypatch):
    """Test getting set variables and missing variables with defaults."""
    monkeypatch.setenv("HPCBENCH_TEST_VAR", "test_value")
    monkeypatch.delenv("HPCBENCH_MISSING_VAR", raising=False)

    assert get_env("HPCBENCH_TEST_VAR") == "test_value"
    assert get_env("HPCBENCH_MISSING_VAR", default="default") == "default"
    assert get_env("HPCBENCH_MISSING_VAR") is None


def test_get_env_coercion(monkeypatch):
    """Test type coercion for common types."""
    monkeypatch.setenv("HPCBENCH_BOOL_TRUE", "true")
    monkeypatch.setenv("HPCBENCH_BOOL_FALSE", "0")
    monkeypatch.setenv("HPCBENCH_INT", " 123 ")
    monkeypatch.setenv("HPCBENCH_FLOAT", "1.23")

    assert get_env("HPCBENCH_BOOL_TRUE", as_type=bool) is True
    assert get_env("HPCBENCH_BOOL_FALSE", as_type=bool) is False
    assert get_env("HPCBENCH_INT", as_type=int) == 123
    assert get_env("HPCBENCH_FLOAT", as_type=float) == 1.23

    monkeypatch.setenv("HPCBENCH_INVALID_INT", "not_an_int")
    with pytest.raises(EnvVarTypeError):
        get_env("HPCBENCH_INVALID_INT", as_type=int)


def test_require_env(monkeypatch):
    """Test getting required variables."""
    monkeypatch.setenv("HPCBENCH_REQUIRED", "exists")
    monkeypatch.setenv("HPCBENCH_EMPTY", "")
    monkeypatch.delenv("HPCBENCH_NON_EXISTENT", raising=False)

    assert require_env("HPCBENCH_REQUIRED") == "exists"

    with pytest.raises(EnvVarNotSetError):
        require_env("HPCBENCH_NON_EXISTENT")
    with pytest.raises(EnvVarNotSetError):
        require_env("HPCBENCH_EMPTY")


def test_access_is_logged(monkeypatch, log_output):
    """Test that logged reads appear at DEBUG level."""
    monkeypatch.setenv("HPCBENCH_LOGGED", "yes")

    get_env("HPCBENCH_LOGGED", log=True)

    assert "ENV GET HPCBENCH_LOGGED=yes" in log_output.getvalue()
