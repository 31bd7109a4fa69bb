"""
PID Control Laboratory
======================

Discrete-time simulation, tuning and identification of PID loops around a
second-order plant:
- Discretized second-order plant model
- PID controller with saturation and clamping anti-windup
- Simulation of open-loop, proportional and PID control
- Analytic pole-placement tuning
- ARX least-squares identification
"""

from pid_lab.core.pid_controller import PIDController
from pid_lab.core.pid_params import PIDParams, PIDPresets
from pid_lab.plants.second_order import PlantParameters, SecondOrderPlant
from pid_lab.simulation.simulator import Simulator, Trajectory
from pid_lab.simulation.scenarios import SimulationConfig, ControlMode, ScenarioLibrary
from pid_lab.tuner.pole_placement import PoleTuner, TuningTargets
from pid_lab.identification.system_identifier import SystemIdentifier, ARXStructure
from pid_lab.utils.validators import (
    PIDLabError,
    InvalidParameterError,
    SingularSystemError,
    DegenerateModelError,
)

__version__ = "1.0.0"
__all__ = [
    "PIDController",
    "PIDParams",
    "PIDPresets",
    "PlantParameters",
    "SecondOrderPlant",
    "Simulator",
    "Trajectory",
    "SimulationConfig",
    "ControlMode",
    "ScenarioLibrary",
    "PoleTuner",
    "TuningTargets",
    "SystemIdentifier",
    "ARXStructure",
    "PIDLabError",
    "InvalidParameterError",
    "SingularSystemError",
    "DegenerateModelError",
]
