"""Summary statistics over the successful measured trials of one problem size.

Only the first ``number_of_successful_trials`` entries of the timing buffer are
read; the rest of the buffer is never inspected.
"""

import math
from collections.abc import Sequence

import numpy as np


def compute_average_time(
    number_of_successful_trials: int, trial_times: Sequence[float] | np.ndarray
) -> float:
    """Arithmetic mean of the successful trial times, or NaN if there are none."""
    if number_of_successful_trials < 1:
        return math.nan
    successful = np.asarray(trial_times[:number_of_successful_trials], dtype=np.float64)
    return float(np.mean(successful))


def compute_standard_deviation(
    number_of_successful_trials: int, trial_times: Sequence[float] | np.ndarray
) -> float:
    """Sample standard deviation (n - 1 divisor), or NaN with fewer than two trials."""
    if number_of_successful_trials < 2:
        return math.nan
    successful = np.asarray(trial_times[:number_of_successful_trials], dtype=np.float64)
    return float(np.std(successful, ddof=1))
