"""Simulation framework for closed-loop runs."""

from pid_lab.simulation.simulator import Simulator, Trajectory
from pid_lab.simulation.scenarios import SimulationConfig, ControlMode, ScenarioLibrary

__all__ = [
    "Simulator",
    "Trajectory",
    "SimulationConfig",
    "ControlMode",
    "ScenarioLibrary",
]
