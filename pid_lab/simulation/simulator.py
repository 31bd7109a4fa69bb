"""
Closed-loop simulation engine.
Steps a discretized second-order plant together with its control law.
"""

from typing import Dict, Any, List, Iterable, Optional
from dataclasses import dataclass
import logging
import time

import numpy as np

from pid_lab.core.pid_controller import PIDController
from pid_lab.core.pid_params import PIDParams
from pid_lab.plants.second_order import SecondOrderPlant
from pid_lab.simulation.scenarios import SimulationConfig, ControlMode
from pid_lab.utils.math_utils import clamp
from pid_lab.utils.validators import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Trajectory:
    """
    Time series produced by one simulation run.

    All arrays have the same length N and index k corresponds to time
    k * sample_time. Arrays are read-only once the run has finished.
    """
    time: np.ndarray
    output: np.ndarray
    control: np.ndarray
    error: np.ndarray
    reference: float
    sample_time: float
    name: str = ""
    execution_time: float = 0.0

    def __post_init__(self):
        for label in ('time', 'output', 'control', 'error'):
            arr = np.array(getattr(self, label), dtype=float)
            arr.flags.writeable = False
            object.__setattr__(self, label, arr)

        n = len(self.time)
        for label in ('output', 'control', 'error'):
            if len(getattr(self, label)) != n:
                raise InvalidParameterError(
                    f"{label} has {len(getattr(self, label))} samples, time has {n}"
                )

    def __len__(self) -> int:
        return len(self.time)

    @property
    def duration(self) -> float:
        """Final simulated time."""
        return float(self.time[-1])

    @property
    def final_output(self) -> float:
        return float(self.output[-1])

    @property
    def final_error(self) -> float:
        return float(self.error[-1])

    @property
    def final_control(self) -> float:
        return float(self.control[-1])

    def to_dict(self) -> Dict[str, np.ndarray]:
        """Convert to dictionary format."""
        return {
            'time': self.time,
            'output': self.output,
            'control': self.control,
            'error': self.error,
        }


class Simulator:
    """
    Simulation engine for the discretized plant and its control law.

    The control law is selected by ``config.mode``: a constant open-loop
    input, proportional control or a full PID controller. Every run builds
    its own plant and controller, so runs never share mutable state.

    Example:
        >>> from pid_lab.simulation.scenarios import ScenarioLibrary
        >>> sim = Simulator()
        >>> traj = sim.run(ScenarioLibrary.temperature())
        >>> traj.final_error
    """

    def run(self, config: SimulationConfig) -> Trajectory:
        """
        Run a single simulation.

        Samples 0 and 1 hold the initial condition. For k >= 2 the error is
        taken against the previous output, the control law is evaluated and
        saturated, and the plant recurrence produces output[k].

        Args:
            config: Simulation configuration

        Returns:
            Trajectory containing all data
        """
        start_time = time.perf_counter()

        n_steps = config.n_samples
        dt = config.sample_time

        plant = SecondOrderPlant(
            config.plant,
            sample_time=dt,
            initial_output=config.initial_output,
            bias=config.ambient,
        )

        controller: Optional[PIDController] = None
        if config.mode == ControlMode.PID:
            controller = PIDController(config.controller_params)
            controller.reset(initial_measurement=config.initial_output)

        # Allocate arrays
        timestamps = np.arange(n_steps) * dt
        outputs = np.full(n_steps, float(config.initial_output))
        controls = np.zeros(n_steps)
        errors = np.zeros(n_steps)

        open_loop_input = clamp(
            (config.reference - config.ambient) * config.open_loop_gain,
            config.output_min,
            config.output_max,
        )
        if config.mode == ControlMode.OPEN_LOOP:
            controls[:] = open_loop_input

        for k in range(2, n_steps):
            error = config.reference - outputs[k - 1]

            if config.mode == ControlMode.PID:
                u = controller.update(config.reference, outputs[k - 1], dt)
            elif config.mode == ControlMode.PROPORTIONAL:
                u = clamp(config.gains.kp * error, config.output_min, config.output_max)
            else:
                u = open_loop_input

            errors[k] = error
            controls[k] = u
            outputs[k] = plant.update(u)

        execution_time = time.perf_counter() - start_time

        logger.debug(
            "Run '%s' (%s): %d samples in %.3f s, final output %.4f",
            config.name, config.mode.value, n_steps, execution_time, outputs[-1]
        )

        return Trajectory(
            time=timestamps,
            output=outputs,
            control=controls,
            error=errors,
            reference=config.reference,
            sample_time=dt,
            name=config.name,
            execution_time=execution_time,
        )

    def run_batch(self, configs: Iterable[SimulationConfig]) -> Dict[str, Trajectory]:
        """
        Run several independent configurations.

        Args:
            configs: Configurations to run; names must be unique

        Returns:
            Dictionary mapping configuration names to trajectories
        """
        results: Dict[str, Trajectory] = {}
        for config in configs:
            if config.name in results:
                raise InvalidParameterError(f"Duplicate configuration name: {config.name!r}")
            results[config.name] = self.run(config)

        logger.info("Completed batch of %d runs", len(results))
        return results

    def run_comparison(
        self,
        config: SimulationConfig,
        param_sets: Dict[str, PIDParams]
    ) -> Dict[str, Trajectory]:
        """
        Run one configuration with multiple parameter sets for comparison.

        Args:
            config: Base configuration (mode is forced to PID)
            param_sets: Dictionary mapping names to parameter sets

        Returns:
            Dictionary mapping names to trajectories
        """
        return self.run_batch(
            config.copy(name=name, gains=params, mode=ControlMode.PID)
            for name, params in param_sets.items()
        )

    @staticmethod
    def summarize(trajectory: Trajectory) -> Dict[str, Any]:
        """Performance metrics of a finished run."""
        from pid_lab.analyzer.metrics import compute_performance
        return compute_performance(trajectory).to_dict()
