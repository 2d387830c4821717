"""hpcbench utilities - logging and environment helpers."""

from hpcbench.utils.env import (
    EnvVarError,
    EnvVarNotSetError,
    EnvVarTypeError,
    get_env,
    require_env,
)
from hpcbench.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
)

__all__ = [
    # Env
    "EnvVarError",
    "EnvVarNotSetError",
    "EnvVarTypeError",
    # Logger
    "Logger",
    "LoggerNotConfiguredError",
    "get_env",
    "require_env",
]
