"""Centralized logging for hpcbench.

Diagnostics (configuration problems, allocator and kernel failures, dataset
load failures) go through this logger. Progress output is written separately
with ``click.echo`` so that the two streams can be captured independently.

Usage:
    from hpcbench.utils.logger import Logger

    # Configure once at startup, or let library entry points fall back to stderr
    Logger.configure(level="INFO", output="stderr")

    log = Logger.get("microbenchmark.runner")
    log.error("allocator threw an error")
"""

import logging
import sys
from typing import TextIO

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggerNotConfiguredError(Exception):
    """Raised when trying to use Logger before calling Logger.configure()."""

    def __init__(self) -> None:
        super().__init__(
            "Logger not configured. Call Logger.configure() at application startup."
        )


def _to_logging_level(level: str) -> int:
    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"Invalid log level {level!r}; expected one of {', '.join(LEVELS)}")
    return int(getattr(logging, name))


class Logger:
    """Configure-once access to the ``hpcbench`` logger hierarchy.

    Example:
        >>> Logger.configure(level="INFO")
        >>> Logger.get("microbenchmark.suite").warning("no microbenchmarks to execute")
    """

    _configured: bool = False
    _root_name: str = "hpcbench"

    @classmethod
    def configure(
        cls,
        level: str = "INFO",
        output: str | TextIO | None = None,
        timestamps: bool = True,
    ) -> None:
        """Configure the logger, replacing any earlier configuration.

        Args:
            level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".
            output: None or "stderr" for sys.stderr, "stdout", or any
                file-like object.
            timestamps: Prefix messages with the time.
        """
        logging_level = _to_logging_level(level)

        logger = logging.getLogger(cls._root_name)
        logger.setLevel(logging_level)

        for existing_handler in logger.handlers[:]:
            logger.removeHandler(existing_handler)
            existing_handler.close()

        handler: logging.Handler
        if output is None or output == "stderr":
            handler = logging.StreamHandler(sys.stderr)
        elif output == "stdout":
            handler = logging.StreamHandler(sys.stdout)
        elif hasattr(output, "write"):
            handler = logging.StreamHandler(output)
        else:
            raise ValueError(f"Invalid output: {output!r}")

        handler.setLevel(logging_level)
        prefix = "%(asctime)s " if timestamps else ""
        handler.setFormatter(logging.Formatter(f"{prefix}%(levelname)s [%(name)s] %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

        cls._configured = True

    @classmethod
    def ensure_configured(cls, level: str = "INFO") -> None:
        """Configure with stderr output unless configure() was already called."""
        if not cls._configured:
            cls.configure(level=level, output="stderr")

    @classmethod
    def get(cls, name: str | None = None) -> logging.Logger:
        """Get ``hpcbench.<name>``, or the root ``hpcbench`` logger.

        Raises:
            LoggerNotConfiguredError: If configure() hasn't been called.
        """
        if not cls._configured:
            raise LoggerNotConfiguredError()

        if name:
            return logging.getLogger(f"{cls._root_name}.{name}")
        return logging.getLogger(cls._root_name)

    @classmethod
    def set_level(cls, level: str) -> None:
        """Change the level of the logger and its handlers.

        Raises:
            LoggerNotConfiguredError: If configure() hasn't been called.
        """
        if not cls._configured:
            raise LoggerNotConfiguredError()

        logging_level = _to_logging_level(level)
        logger = logging.getLogger(cls._root_name)
        logger.setLevel(logging_level)
        for handler in logger.handlers:
            handler.setLevel(logging_level)

    @classmethod
    def is_configured(cls) -> bool:
        """Check if logger has been configured."""
        return cls._configured
