"""
Base plant model abstract class.
Defines the interface for all plant/process models.
"""

from abc import ABC, abstractmethod

from pid_lab.utils.validators import validate_positive


class BasePlant(ABC):
    """
    Abstract base class for discrete-time plant/process models.

    A plant is advanced one sample at a time by :meth:`update`, which takes
    the control input applied during the current sample and returns the
    new output.
    """

    def __init__(self, sample_time: float = 0.01):
        """
        Initialize base plant.

        Args:
            sample_time: Sample time in seconds
        """
        self._dt = validate_positive(sample_time, "sample_time")
        self._output: float = 0.0
        self._time: float = 0.0

    @abstractmethod
    def update(self, control_input: float) -> float:
        """
        Update plant state with control input.

        Args:
            control_input: Control signal from controller

        Returns:
            Plant output
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset plant to initial state."""
        pass

    @property
    def output(self) -> float:
        """Current plant output."""
        return self._output

    @property
    def sample_time(self) -> float:
        """Sample time."""
        return self._dt

    @sample_time.setter
    def sample_time(self, value: float) -> None:
        """Set sample time."""
        self._dt = validate_positive(value, "sample_time")
        self._on_sample_time_changed()

    @property
    def time(self) -> float:
        """Current simulation time."""
        return self._time

    def _on_sample_time_changed(self) -> None:
        """Hook for subclasses that cache step-size dependent data."""
        pass
