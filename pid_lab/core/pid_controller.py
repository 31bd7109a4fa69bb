"""
PID Controller Implementation.

Features:
- Proportional, Integral, Derivative control
- Trapezoidal or rectangular integration
- Derivative on error, or smoothed derivative on measurement
- Output saturation
- Conditional (clamping) anti-windup
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict

from pid_lab.core.pid_params import (
    PIDParams,
    AntiWindupMethod,
    DerivativeMode,
    IntegrationMethod,
)
from pid_lab.core.filters import ExponentialSmoother
from pid_lab.utils.math_utils import clamp
from pid_lab.utils.validators import validate_positive


@dataclass
class ControllerState:
    """Mutable state carried from one control step to the next."""
    integral: float = 0.0
    previous_error: float = 0.0
    previous_measurement: Optional[float] = None
    filtered_derivative: float = 0.0


@dataclass
class PIDStepInfo:
    """Diagnostics of the most recent control step."""
    setpoint: float = 0.0
    measurement: float = 0.0
    error: float = 0.0

    # Component outputs
    p_term: float = 0.0
    i_term: float = 0.0
    d_term: float = 0.0

    # Pre/post saturation output
    output_unsat: float = 0.0
    output: float = 0.0

    saturated: bool = False
    anti_windup_active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert step info to dictionary."""
        return asdict(self)


class PIDController:
    """
    PID controller stepped synchronously with a sampled plant.

    Each call to :meth:`update` performs one control step:

    1. error = setpoint - measurement
    2. P = kp * error
    3. integral += increment (trapezoidal or rectangular); I = ki * integral
    4. D = kd * (error - previous_error) / dt, or on measurement
       D = -kd * d where d is the exponentially smoothed measurement slope
    5. output = clamp(P + I + D, output_min, output_max)
    6. with clamping anti-windup, a saturated output discards the
       integral increment of this step
    7. the error and measurement are kept for the next step

    Example:
        >>> params = PIDParams(kp=1.5, ki=1.0, output_min=0, output_max=50)
        >>> pid = PIDController(params)
        >>> output = pid.update(setpoint=22.0, measurement=15.0)
    """

    def __init__(self, params: Optional[PIDParams] = None):
        """
        Initialize PID controller.

        Args:
            params: PID parameters (uses defaults if None)
        """
        self._params = params if params is not None else PIDParams()
        self._state = ControllerState()
        self._last_step = PIDStepInfo()
        self._smoother = ExponentialSmoother(self._params.derivative_smoothing)

    @property
    def params(self) -> PIDParams:
        """Get current parameters."""
        return self._params

    @property
    def state(self) -> ControllerState:
        """Get current controller state."""
        return self._state

    @property
    def last_step(self) -> PIDStepInfo:
        """Diagnostics of the most recent step."""
        return self._last_step

    @property
    def output(self) -> float:
        """Get current output."""
        return self._last_step.output

    @property
    def integral(self) -> float:
        """Get current integral accumulator."""
        return self._state.integral

    def update(
        self,
        setpoint: float,
        measurement: float,
        dt: Optional[float] = None
    ) -> float:
        """
        Update PID controller with new setpoint and measurement.

        Args:
            setpoint: Desired value
            measurement: Actual measured value
            dt: Step size (defaults to params.sample_time)

        Returns:
            Saturated control output

        Raises:
            InvalidParameterError: If dt is not positive
        """
        dt = self._params.sample_time if dt is None else validate_positive(dt, "dt")
        params = self._params
        state = self._state

        if state.previous_measurement is None:
            state.previous_measurement = measurement

        error = setpoint - measurement

        p_term = params.kp * error

        if params.integration_method == IntegrationMethod.TRAPEZOIDAL:
            increment = (error + state.previous_error) * dt / 2.0
        else:
            increment = error * dt
        candidate_integral = state.integral + increment
        i_term = params.ki * candidate_integral

        d_term = self._calculate_derivative(error, measurement, dt)

        output_unsat = p_term + i_term + d_term
        output = clamp(output_unsat, params.output_min, params.output_max)

        at_limit = (
            (params.output_max is not None and output >= params.output_max) or
            (params.output_min is not None and output <= params.output_min)
        )
        anti_windup_active = params.anti_windup == AntiWindupMethod.CLAMPING and at_limit
        if not anti_windup_active:
            state.integral = candidate_integral

        self._last_step = PIDStepInfo(
            setpoint=setpoint,
            measurement=measurement,
            error=error,
            p_term=p_term,
            i_term=i_term,
            d_term=d_term,
            output_unsat=output_unsat,
            output=output,
            saturated=output != output_unsat,
            anti_windup_active=anti_windup_active,
        )

        state.previous_error = error
        state.previous_measurement = measurement

        return output

    def _calculate_derivative(self, error: float, measurement: float, dt: float) -> float:
        """Derivative term for the configured mode."""
        params = self._params
        state = self._state

        if params.derivative_mode == DerivativeMode.MEASUREMENT:
            slope = (measurement - state.previous_measurement) / dt
            state.filtered_derivative = self._smoother.update(slope)
            # Sign flip: a rising measurement means a falling error
            return -params.kd * state.filtered_derivative

        return params.kd * (error - state.previous_error) / dt

    def set_params(self, params: PIDParams) -> None:
        """
        Replace controller parameters.

        The accumulated state is kept; call :meth:`reset` to start a new run.
        """
        self._params = params
        smoother = ExponentialSmoother(params.derivative_smoothing, self._smoother.output)
        self._smoother = smoother

    def set_gains(
        self,
        kp: Optional[float] = None,
        ki: Optional[float] = None,
        kd: Optional[float] = None
    ) -> None:
        """
        Update individual gains.

        Args:
            kp: New proportional gain (None to keep current)
            ki: New integral gain (None to keep current)
            kd: New derivative gain (None to keep current)
        """
        new_params = self._params.copy(
            kp=kp if kp is not None else self._params.kp,
            ki=ki if ki is not None else self._params.ki,
            kd=kd if kd is not None else self._params.kd
        )
        self.set_params(new_params)

    def reset(self, initial_measurement: Optional[float] = None) -> None:
        """
        Reset controller state.

        Args:
            initial_measurement: Measurement preceding the first step, used
                by the derivative-on-measurement path. When None, the first
                measurement passed to :meth:`update` is used.
        """
        self._state = ControllerState(previous_measurement=initial_measurement)
        self._last_step = PIDStepInfo()
        self._smoother = ExponentialSmoother(self._params.derivative_smoothing)

    def __repr__(self) -> str:
        return f"PIDController({self._params})"
