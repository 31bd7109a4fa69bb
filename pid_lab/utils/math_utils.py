"""
Mathematical utility functions for PID control.
Uses numpy for efficient array operations.
"""

from typing import Optional
import math

import numpy as np
from numpy.typing import ArrayLike


def clamp(value: float, min_val: Optional[float], max_val: Optional[float]) -> float:
    """Clamp a value between minimum and maximum bounds."""
    if min_val is not None and value < min_val:
        return float(min_val)
    if max_val is not None and value > max_val:
        return float(max_val)
    return float(value)


def sample_count(duration: float, sample_time: float) -> int:
    """
    Number of samples covering [0, duration] at the given step, both ends included.

    ceil(duration / sample_time) + 1, with a small guard so that ratios which
    are integers up to rounding (20 / 0.01 = 2000.0000000000002) are not
    bumped to the next integer.
    """
    return int(math.ceil(duration / sample_time - 1e-9)) + 1


def rms(values: ArrayLike) -> float:
    """Compute root mean square using numpy."""
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        return 0.0
    return float(np.sqrt(np.mean(arr ** 2)))


def distance(a: ArrayLike, b: ArrayLike) -> float:
    """Euclidean norm of the difference between two sequences (or a sequence and a scalar)."""
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.sqrt(np.sum(diff ** 2)))
