"""
Simulation configurations for closed-loop runs.
Defines the per-run configuration record and a library of preset scenarios.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from enum import Enum
import json

from pid_lab.core.pid_params import (
    PIDParams,
    PIDPresets,
    DerivativeMode,
    IntegrationMethod,
)
from pid_lab.plants.second_order import PlantParameters
from pid_lab.utils.math_utils import sample_count
from pid_lab.utils.validators import (
    InvalidParameterError,
    validate_positive,
    validate_finite,
    validate_limits,
)


class ControlMode(Enum):
    """Control law applied by the simulator."""
    OPEN_LOOP = "open_loop"  # Constant input (reference - ambient) * open_loop_gain
    PROPORTIONAL = "proportional"  # u = kp * error
    PID = "pid"  # Full PID controller


@dataclass(frozen=True)
class SimulationConfig:
    """
    Defines a complete simulation run.

    Specifies the plant, the operating point, timing, actuator limits and
    the control law. Built fresh for every run and passed explicitly to the
    simulator.
    """

    name: str = "Simulation"
    plant: PlantParameters = field(default_factory=PlantParameters)

    # Operating point
    reference: float = 1.0
    ambient: float = 0.0  # Constant forcing (bias) of the plant
    initial_output: float = 0.0

    # Timing
    duration: float = 20.0
    sample_time: float = 0.01

    # Actuator limits
    output_min: Optional[float] = None
    output_max: Optional[float] = None

    # Control law
    mode: ControlMode = ControlMode.PID
    gains: PIDParams = field(default_factory=PIDParams)
    open_loop_gain: float = 1.0

    def __post_init__(self):
        if not isinstance(self.plant, PlantParameters):
            raise InvalidParameterError("plant must be a PlantParameters instance")
        if not isinstance(self.mode, ControlMode):
            raise InvalidParameterError(f"Unknown mode: {self.mode!r}")
        if not isinstance(self.gains, PIDParams):
            raise InvalidParameterError("gains must be a PIDParams instance")
        validate_finite(self.reference, "reference")
        validate_finite(self.ambient, "ambient")
        validate_finite(self.initial_output, "initial_output")
        validate_finite(self.open_loop_gain, "open_loop_gain")
        validate_positive(self.duration, "duration")
        validate_positive(self.sample_time, "sample_time")
        validate_limits(self.output_min, self.output_max, "output")
        if self.n_samples < 3:
            raise InvalidParameterError(
                f"duration/sample_time yields {self.n_samples} samples, need at least 3"
            )

    @property
    def n_samples(self) -> int:
        """Trajectory length ceil(duration / sample_time) + 1."""
        return sample_count(self.duration, self.sample_time)

    @property
    def controller_params(self) -> PIDParams:
        """PID parameters aligned with this run's step size and actuator limits."""
        return self.gains.copy(
            sample_time=self.sample_time,
            output_min=self.output_min,
            output_max=self.output_max,
        )

    def copy(self, **changes) -> 'SimulationConfig':
        """Create a copy with optional field changes."""
        values = {
            'name': self.name,
            'plant': self.plant,
            'reference': self.reference,
            'ambient': self.ambient,
            'initial_output': self.initial_output,
            'duration': self.duration,
            'sample_time': self.sample_time,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'mode': self.mode,
            'gains': self.gains,
            'open_loop_gain': self.open_loop_gain,
        }
        values.update(changes)
        return SimulationConfig(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'name': self.name,
            'plant': self.plant.to_dict(),
            'reference': self.reference,
            'ambient': self.ambient,
            'initial_output': self.initial_output,
            'duration': self.duration,
            'sample_time': self.sample_time,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'mode': self.mode.value,
            'gains': self.gains.to_dict(),
            'open_loop_gain': self.open_loop_gain,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """Create from dictionary."""
        data = data.copy()
        if isinstance(data.get('plant'), dict):
            data['plant'] = PlantParameters(**data['plant'])
        if isinstance(data.get('gains'), dict):
            data['gains'] = PIDParams.from_dict(data['gains'])
        if isinstance(data.get('mode'), str):
            try:
                data['mode'] = ControlMode(data['mode'])
            except ValueError as exc:
                raise InvalidParameterError(str(exc)) from exc
        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'SimulationConfig':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))


class ScenarioLibrary:
    """Pre-defined simulation scenarios."""

    # Reference thermal process: G(s) = 1 / (s^2 + s + 1), heater limited to [0, 50] W
    THERMAL_PLANT = PlantParameters(gain=1.0, time_constant=1.0, damping_ratio=0.5)

    @staticmethod
    def temperature(
        mode: ControlMode = ControlMode.PID,
        pid: Optional[PIDParams] = None,
        duration: float = 20.0,
        sample_time: float = 0.01,
        name: Optional[str] = None
    ) -> SimulationConfig:
        """Room heated from 15 C ambient to a 22 C reference."""
        return SimulationConfig(
            name=name or f"Temperature ({mode.value})",
            plant=ScenarioLibrary.THERMAL_PLANT,
            reference=22.0,
            ambient=15.0,
            initial_output=15.0,
            duration=duration,
            sample_time=sample_time,
            output_min=0.0,
            output_max=50.0,
            mode=mode,
            gains=pid if pid is not None else PIDPresets.temperature_pi(sample_time),
            open_loop_gain=2.0,
        )

    @staticmethod
    def temperature_comparison(
        duration: float = 20.0,
        sample_time: float = 0.01
    ) -> List[SimulationConfig]:
        """Open loop, proportional and PID control of the same room."""
        return [
            ScenarioLibrary.temperature(
                ControlMode.OPEN_LOOP, duration=duration,
                sample_time=sample_time, name="Open Loop"
            ),
            ScenarioLibrary.temperature(
                ControlMode.PROPORTIONAL, duration=duration,
                sample_time=sample_time, name="P Control"
            ),
            ScenarioLibrary.temperature(
                ControlMode.PID, duration=duration,
                sample_time=sample_time, name="PID Control"
            ),
        ]

    @staticmethod
    def analytic_verification(
        gains: Dict[str, float],
        plant: Optional[PlantParameters] = None,
        duration: float = 50.0,
        sample_time: float = 0.01,
        name: str = "Pole Placement"
    ) -> SimulationConfig:
        """
        Thermal loop used to verify tuned gains.

        Uses rectangular integration and a smoothed derivative on the
        measurement, so the tuned derivative gain does not kick on the
        reference step.
        """
        pid = PIDParams(
            kp=gains['kp'], ki=gains['ki'], kd=gains['kd'],
            sample_time=sample_time,
            integration_method=IntegrationMethod.RECTANGULAR,
            derivative_mode=DerivativeMode.MEASUREMENT,
        )
        return ScenarioLibrary.temperature(
            ControlMode.PID, pid=pid, duration=duration,
            sample_time=sample_time, name=name
        ).copy(plant=plant or ScenarioLibrary.THERMAL_PLANT)

    @staticmethod
    def no_overshoot(
        duration: float = 40.0,
        sample_time: float = 0.01
    ) -> List[SimulationConfig]:
        """Heuristic gain sets that reach the reference without oscillating."""
        return [
            ScenarioLibrary.temperature(
                ControlMode.PID, pid=params, duration=duration,
                sample_time=sample_time, name=name
            )
            for name, params in PIDPresets.no_overshoot_sets(sample_time).items()
        ]

    @staticmethod
    def elevator(
        duration: float = 20.0,
        sample_time: float = 0.01
    ) -> SimulationConfig:
        """Elevator car driven from floor 0 to 10 m."""
        return SimulationConfig(
            name="Elevator",
            plant=PlantParameters(gain=1.0, time_constant=2.0, damping_ratio=0.7),
            reference=10.0,
            ambient=0.0,
            initial_output=0.0,
            duration=duration,
            sample_time=sample_time,
            output_min=-1000.0,
            output_max=1000.0,
            mode=ControlMode.PID,
            gains=PIDPresets.elevator(sample_time),
        )
