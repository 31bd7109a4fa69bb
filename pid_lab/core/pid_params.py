"""
PID Controller Parameters Configuration.
Encapsulates all PID settings in a validated, immutable-friendly structure.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum
import json

from pid_lab.utils.validators import (
    InvalidParameterError,
    validate_non_negative,
    validate_positive,
    validate_range,
    validate_limits,
)


class AntiWindupMethod(Enum):
    """Anti-windup methods for integral term."""
    NONE = "none"
    CLAMPING = "clamping"  # Undo the integral increment while saturated


class DerivativeMode(Enum):
    """Derivative calculation mode."""
    ERROR = "error"  # Derivative of error (standard)
    MEASUREMENT = "measurement"  # Smoothed derivative of measurement (avoids derivative kick)


class IntegrationMethod(Enum):
    """Integration rule for the integral accumulator."""
    TRAPEZOIDAL = "trapezoidal"  # (e[k] + e[k-1]) * dt / 2
    RECTANGULAR = "rectangular"  # e[k] * dt


@dataclass(frozen=True)
class PIDParams:
    """
    PID Controller Parameters.

    Encapsulates all tunable and configuration parameters for a PID controller.
    Provides validation and serialization capabilities. Instances are frozen;
    use :meth:`copy` to derive a modified set.
    """

    # Core gains
    kp: float = 1.0  # Proportional gain
    ki: float = 0.0  # Integral gain
    kd: float = 0.0  # Derivative gain

    # Sample time
    sample_time: float = 0.01  # Sample time in seconds

    # Output limits (saturation)
    output_min: Optional[float] = None  # Minimum output limit
    output_max: Optional[float] = None  # Maximum output limit

    # Anti-windup configuration
    anti_windup: AntiWindupMethod = AntiWindupMethod.CLAMPING

    # Integral configuration
    integration_method: IntegrationMethod = IntegrationMethod.TRAPEZOIDAL

    # Derivative configuration
    derivative_mode: DerivativeMode = DerivativeMode.ERROR
    derivative_smoothing: float = 0.8  # Weight of the previous filtered derivative

    def __post_init__(self):
        """Validate parameters after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all parameters."""
        validate_non_negative(self.kp, "kp")
        validate_non_negative(self.ki, "ki")
        validate_non_negative(self.kd, "kd")
        validate_positive(self.sample_time, "sample_time")
        validate_limits(self.output_min, self.output_max, "output")
        validate_range(self.derivative_smoothing, "derivative_smoothing", 0.0, 1.0)
        if self.derivative_smoothing >= 1.0:
            raise InvalidParameterError("derivative_smoothing must be < 1")

        if not isinstance(self.anti_windup, AntiWindupMethod):
            raise InvalidParameterError(f"Unknown anti_windup: {self.anti_windup!r}")
        if not isinstance(self.integration_method, IntegrationMethod):
            raise InvalidParameterError(
                f"Unknown integration_method: {self.integration_method!r}"
            )
        if not isinstance(self.derivative_mode, DerivativeMode):
            raise InvalidParameterError(f"Unknown derivative_mode: {self.derivative_mode!r}")

    @property
    def gains(self) -> Dict[str, float]:
        """The three gains as a dictionary."""
        return {'kp': self.kp, 'ki': self.ki, 'kd': self.kd}

    def copy(self, **changes) -> 'PIDParams':
        """
        Create a copy with optional parameter changes.

        Args:
            **changes: Parameters to override

        Returns:
            New PIDParams instance
        """
        params = {
            'kp': self.kp,
            'ki': self.ki,
            'kd': self.kd,
            'sample_time': self.sample_time,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'anti_windup': self.anti_windup,
            'integration_method': self.integration_method,
            'derivative_mode': self.derivative_mode,
            'derivative_smoothing': self.derivative_smoothing,
        }
        params.update(changes)
        return PIDParams(**params)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary of parameters
        """
        return {
            'kp': self.kp,
            'ki': self.ki,
            'kd': self.kd,
            'sample_time': self.sample_time,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'anti_windup': self.anti_windup.value,
            'integration_method': self.integration_method.value,
            'derivative_mode': self.derivative_mode.value,
            'derivative_smoothing': self.derivative_smoothing,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PIDParams':
        """
        Create from dictionary.

        Args:
            data: Dictionary of parameters

        Returns:
            PIDParams instance
        """
        data = data.copy()

        # Convert enum strings to enums
        try:
            if 'anti_windup' in data and isinstance(data['anti_windup'], str):
                data['anti_windup'] = AntiWindupMethod(data['anti_windup'])
            if 'integration_method' in data and isinstance(data['integration_method'], str):
                data['integration_method'] = IntegrationMethod(data['integration_method'])
            if 'derivative_mode' in data and isinstance(data['derivative_mode'], str):
                data['derivative_mode'] = DerivativeMode(data['derivative_mode'])
        except ValueError as exc:
            raise InvalidParameterError(str(exc)) from exc

        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'PIDParams':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"PIDParams(Kp={self.kp:.4f}, Ki={self.ki:.4f}, Kd={self.kd:.4f}, "
            f"Ts={self.sample_time:.4f}s, "
            f"limits=[{self.output_min}, {self.output_max}], "
            f"anti_windup={self.anti_windup.value})"
        )


# Preset configurations
class PIDPresets:
    """
    Heuristic gain sets for the reference thermal process
    G(s) = 1 / (s^2 + s + 1) with a [0, 50] actuator.
    """

    @staticmethod
    def temperature_pi(sample_time: float = 0.01) -> PIDParams:
        """Hand-tuned PI loop: settles without steady-state error."""
        return PIDParams(
            kp=1.5, ki=1.0, kd=0.0,
            sample_time=sample_time,
            output_min=0.0, output_max=50.0
        )

    @staticmethod
    def no_overshoot_smooth(sample_time: float = 0.01) -> PIDParams:
        """Very smooth response, heavy derivative action."""
        return PIDParams(
            kp=2.0, ki=0.8, kd=8.0,
            sample_time=sample_time,
            output_min=0.0, output_max=50.0
        )

    @staticmethod
    def no_overshoot_balanced(sample_time: float = 0.01) -> PIDParams:
        """Balanced response without oscillation."""
        return PIDParams(
            kp=3.5, ki=1.5, kd=6.0,
            sample_time=sample_time,
            output_min=0.0, output_max=50.0
        )

    @staticmethod
    def no_overshoot_fast(sample_time: float = 0.01) -> PIDParams:
        """Fastest of the non-oscillating sets."""
        return PIDParams(
            kp=5.0, ki=2.0, kd=4.0,
            sample_time=sample_time,
            output_min=0.0, output_max=50.0
        )

    @staticmethod
    def elevator(sample_time: float = 0.01) -> PIDParams:
        """Position loop for a K=1, tau=2, zeta=0.7 hoist with +-1000 N force."""
        return PIDParams(
            kp=3.0, ki=0.5, kd=4.0,
            sample_time=sample_time,
            output_min=-1000.0, output_max=1000.0
        )

    @staticmethod
    def no_overshoot_sets(sample_time: float = 0.01) -> Dict[str, PIDParams]:
        """The three non-oscillating sets keyed by name."""
        return {
            'Very Smooth': PIDPresets.no_overshoot_smooth(sample_time),
            'Balanced': PIDPresets.no_overshoot_balanced(sample_time),
            'Fast Without Overshoot': PIDPresets.no_overshoot_fast(sample_time),
        }
