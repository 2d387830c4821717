"""Timing of a single kernel invocation.

Kernel functions return a TrialTimings with the user, system and wall-clock
seconds spent in the timed call. User and system time are process-wide CPU
times, so a multithreaded BLAS call reports the sum over its worker threads.
"""

import time
from collections.abc import Callable
from typing import Any, NamedTuple

import psutil


class TrialTimings(NamedTuple):
    """Elapsed times of one trial, in seconds."""

    user_time: float
    system_time: float
    wall_clock_time: float


def time_call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> TrialTimings:
    """Call ``func`` once and measure user, system and wall-clock time.

    The return value of ``func`` is discarded once timing is complete.

    Example:
        >>> timings = time_call(np.linalg.cholesky, a)
        >>> timings.wall_clock_time
        0.0123
    """
    process = psutil.Process()

    cpu_before = process.cpu_times()
    start = time.perf_counter()
    result = func(*args, **kwargs)
    wall_clock_time = time.perf_counter() - start
    cpu_after = process.cpu_times()

    del result

    return TrialTimings(
        user_time=cpu_after.user - cpu_before.user,
        system_time=cpu_after.system - cpu_before.system,
        wall_clock_time=wall_clock_time,
    )
