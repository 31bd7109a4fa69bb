"""
Validation utilities and the library's error taxonomy.
Provides robust input validation with clear error messages.
"""

from typing import Any, Optional
import numbers

import numpy as np


class PIDLabError(Exception):
    """Base class for all errors raised by pid_lab."""
    pass


class InvalidParameterError(PIDLabError, ValueError):
    """A configuration value is outside its valid domain."""
    pass


class SingularSystemError(PIDLabError, ArithmeticError):
    """A linear system has a (numerically) zero pivot."""
    pass


class DegenerateModelError(PIDLabError, ValueError):
    """An identified model maps to non-physical continuous parameters."""
    pass


def _require_real(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(
            f"{name} must be a real number, got {type(value).__name__}"
        )
    value = float(value)
    if not np.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value}")
    return value


def validate_positive(value: float, name: str) -> float:
    """
    Validate that a value is strictly positive.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is not positive
    """
    value = _require_real(value, name)
    if value <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, name: str) -> float:
    """
    Validate that a value is non-negative (>= 0).

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is negative
    """
    value = _require_real(value, name)
    if value < 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {value}")
    return value


def validate_finite(value: float, name: str) -> float:
    """Validate that a value is a finite real number."""
    return _require_real(value, name)


def validate_range(
    value: float,
    name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    inclusive: bool = True
) -> float:
    """
    Validate that a value falls within a specified range.

    Args:
        value: The value to validate
        name: Parameter name for error messages
        min_val: Minimum allowed value (None for no lower bound)
        max_val: Maximum allowed value (None for no upper bound)
        inclusive: Whether bounds are inclusive

    Returns:
        The validated value

    Raises:
        InvalidParameterError: If value is outside the range
    """
    value = _require_real(value, name)

    if min_val is not None:
        if inclusive and value < min_val:
            raise InvalidParameterError(f"{name} must be >= {min_val}, got {value}")
        elif not inclusive and value <= min_val:
            raise InvalidParameterError(f"{name} must be > {min_val}, got {value}")

    if max_val is not None:
        if inclusive and value > max_val:
            raise InvalidParameterError(f"{name} must be <= {max_val}, got {value}")
        elif not inclusive and value >= max_val:
            raise InvalidParameterError(f"{name} must be < {max_val}, got {value}")

    return value


def validate_limits(
    lower: Optional[float],
    upper: Optional[float],
    name: str = "output"
) -> None:
    """Validate an optional (lower, upper) pair of saturation limits."""
    if lower is not None:
        _require_real(lower, f"{name}_min")
    if upper is not None:
        _require_real(upper, f"{name}_max")
    if lower is not None and upper is not None and lower >= upper:
        raise InvalidParameterError(
            f"{name}_min must be less than {name}_max, got [{lower}, {upper}]"
        )


def validate_array_like(value: Any, name: str, min_length: int = 0) -> np.ndarray:
    """
    Validate that a value is a one-dimensional array with minimum length.

    Args:
        value: The value to validate
        name: Parameter name for error messages
        min_length: Minimum required length

    Returns:
        The value as a float numpy array

    Raises:
        InvalidParameterError: If value is not array-like or too short
    """
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"{name} must be a numeric sequence, got {type(value).__name__}"
        ) from exc

    if arr.ndim != 1:
        raise InvalidParameterError(f"{name} must be one-dimensional, got shape {arr.shape}")

    if len(arr) < min_length:
        raise InvalidParameterError(
            f"{name} must have at least {min_length} elements, got {len(arr)}"
        )

    return arr
