"""
Signal filtering used inside the PID controller.
"""

from abc import ABC, abstractmethod

from pid_lab.utils.validators import InvalidParameterError


class BaseFilter(ABC):
    """Abstract base class for all filters."""

    @abstractmethod
    def update(self, value: float) -> float:
        """Update filter with new value and return filtered output."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset filter state."""
        pass

    @property
    @abstractmethod
    def output(self) -> float:
        """Current filter output."""
        pass


class ExponentialSmoother(BaseFilter):
    """
    First-order IIR low-pass filter.

    y[k] = smoothing * y[k-1] + (1 - smoothing) * x[k]

    The output starts at ``initial_output`` rather than at the first sample,
    so the first few outputs ramp up from rest.
    """

    def __init__(self, smoothing: float = 0.8, initial_output: float = 0.0):
        if not 0.0 <= smoothing < 1.0:
            raise InvalidParameterError("smoothing must be in [0, 1)")
        self._smoothing = smoothing
        self._initial_output = initial_output
        self._output = initial_output

    def update(self, value: float) -> float:
        self._output = self._smoothing * self._output + (1.0 - self._smoothing) * value
        return self._output

    def reset(self) -> None:
        self._output = self._initial_output

    @property
    def output(self) -> float:
        return self._output

    @property
    def smoothing(self) -> float:
        return self._smoothing
