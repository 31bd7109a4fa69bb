"""Utility functions and helpers."""

from pid_lab.utils.validators import (
    PIDLabError,
    InvalidParameterError,
    SingularSystemError,
    DegenerateModelError,
    validate_positive,
    validate_non_negative,
    validate_finite,
    validate_range,
    validate_limits,
    validate_array_like,
)
from pid_lab.utils.math_utils import clamp, sample_count, rms, distance

__all__ = [
    "PIDLabError",
    "InvalidParameterError",
    "SingularSystemError",
    "DegenerateModelError",
    "validate_positive",
    "validate_non_negative",
    "validate_finite",
    "validate_range",
    "validate_limits",
    "validate_array_like",
    "clamp",
    "sample_count",
    "rms",
    "distance",
]
