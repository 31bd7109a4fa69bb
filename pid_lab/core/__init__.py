"""Core PID controller components."""

from pid_lab.core.pid_controller import PIDController, ControllerState, PIDStepInfo
from pid_lab.core.pid_params import (
    PIDParams,
    PIDPresets,
    AntiWindupMethod,
    DerivativeMode,
    IntegrationMethod,
)
from pid_lab.core.filters import ExponentialSmoother

__all__ = [
    "PIDController",
    "ControllerState",
    "PIDStepInfo",
    "PIDParams",
    "PIDPresets",
    "AntiWindupMethod",
    "DerivativeMode",
    "IntegrationMethod",
    "ExponentialSmoother",
]
