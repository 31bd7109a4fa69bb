"""
Control system analysis utilities using python-control library.
Builds the continuous plant and PID transfer functions and analyzes the
closed loop they form.
"""

from typing import Dict, Any, Union, Tuple
import numpy as np
import control as ct

from pid_lab.core.pid_params import PIDParams
from pid_lab.plants.second_order import PlantParameters

GainsLike = Union[PIDParams, Dict[str, float]]


def _gain_values(gains: GainsLike) -> Tuple[float, float, float]:
    if isinstance(gains, PIDParams):
        return gains.kp, gains.ki, gains.kd
    return float(gains['kp']), float(gains['ki']), float(gains['kd'])


class ControlSystemAnalyzer:
    """Analyze the plant + PID loop using python-control library."""

    @staticmethod
    def plant_tf(plant: PlantParameters) -> ct.TransferFunction:
        """G(s) = K / (tau^2 s^2 + 2 zeta tau s + 1)."""
        num, den = plant.transfer_function_coefficients()
        return ct.tf(num, den)

    @staticmethod
    def pid_tf(gains: GainsLike) -> ct.TransferFunction:
        """
        Ideal PID controller C(s) = (Kd s^2 + Kp s + Ki) / s.

        Without integral action the controller is the polynomial Kd s + Kp,
        so no spurious pole at the origin appears in the loop.
        """
        kp, ki, kd = _gain_values(gains)
        if ki == 0:
            num, den = [kd, kp], [1.0]
        else:
            num, den = [kd, kp, ki], [1.0, 0.0]
        num = list(np.trim_zeros(np.array(num, dtype=float), 'f')) or [0.0]
        return ct.tf(num, den)

    @staticmethod
    def closed_loop(plant: PlantParameters, gains: GainsLike) -> ct.TransferFunction:
        """Reference-to-output transfer function with unity feedback."""
        loop = ControlSystemAnalyzer.pid_tf(gains) * ControlSystemAnalyzer.plant_tf(plant)
        return ct.feedback(loop, 1)

    @staticmethod
    def closed_loop_poles(plant: PlantParameters, gains: GainsLike) -> np.ndarray:
        """Poles of the closed loop, sorted by real part."""
        poles = ct.poles(ControlSystemAnalyzer.closed_loop(plant, gains))
        return np.sort_complex(np.asarray(poles, dtype=complex))

    @staticmethod
    def characteristic_coefficients(plant: PlantParameters, gains: GainsLike) -> np.ndarray:
        """
        Closed-loop characteristic polynomial of the PID loop.

        tau^2 s^3 + (2 zeta tau + K Kd) s^2 + (1 + K Kp) s + K Ki
        """
        kp, ki, kd = _gain_values(gains)
        k = plant.gain
        tau = plant.time_constant
        return np.array([
            tau * tau,
            2.0 * plant.damping_ratio * tau + k * kd,
            1.0 + k * kp,
            k * ki,
        ])

    @staticmethod
    def is_stable(plant: PlantParameters, gains: GainsLike) -> bool:
        """Check if the closed loop is stable (all poles in left half-plane)."""
        poles = ControlSystemAnalyzer.closed_loop_poles(plant, gains)
        return bool(np.all(np.real(poles) < 0))

    @staticmethod
    def dc_gain(plant: PlantParameters, gains: GainsLike) -> float:
        """Closed-loop DC gain (1.0 for any stable loop with integral action)."""
        return float(np.real(ct.dcgain(ControlSystemAnalyzer.closed_loop(plant, gains))))

    @staticmethod
    def analyze_closed_loop(plant: PlantParameters, gains: GainsLike) -> Dict[str, Any]:
        """Comprehensive closed-loop analysis."""
        poles = ControlSystemAnalyzer.closed_loop_poles(plant, gains)
        return {
            'poles': poles,
            'is_stable': bool(np.all(np.real(poles) < 0)),
            'dominant_pole': poles[np.argmax(np.real(poles))],
            'characteristic_coefficients': ControlSystemAnalyzer.characteristic_coefficients(
                plant, gains
            ),
        }


def closed_loop_poles(plant: PlantParameters, gains: GainsLike) -> np.ndarray:
    """Poles of feedback(C * G, 1) for the given plant and PID gains."""
    return ControlSystemAnalyzer.closed_loop_poles(plant, gains)
