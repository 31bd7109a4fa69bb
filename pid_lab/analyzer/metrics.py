"""
Performance metrics calculation for PID control analysis.
Uses numpy for efficient vectorized calculations.
"""

from typing import Dict, Any
from dataclasses import dataclass, asdict
import math

import numpy as np

from pid_lab.utils.validators import InvalidParameterError, validate_array_like
from pid_lab.utils.math_utils import rms, distance

# Percent overshoot limits of the damping estimate
_NO_OVERSHOOT = 0.001
_FULL_OVERSHOOT = 1.0


def integral_squared_error(traj) -> float:
    """ISE = sum(error^2) * dt."""
    return float(np.sum(np.square(traj.error)) * traj.sample_time)


def _band(traj, tolerance: float) -> float:
    if tolerance <= 0:
        raise InvalidParameterError(f"tolerance must be positive, got {tolerance}")
    return tolerance * abs(traj.reference)


def settling_time(traj, tolerance: float = 0.02, method: str = "backward") -> float:
    """
    Time after which the output stays within tolerance * |reference|.

    The backward scan finds the last sample outside the band and returns the
    time of the sample after it; it returns time[0] when the output never
    leaves the band. The forward scan returns the first time from which every
    later sample is inside the band. Both return the final time when the last
    sample is outside.

    Args:
        traj: Simulation trajectory
        tolerance: Band half-width relative to the reference
        method: "backward" or "forward"
    """
    band = _band(traj, tolerance)
    outside = np.abs(traj.output - traj.reference) > band
    timestamps = traj.time

    if method == "backward":
        outside_indices = np.where(outside)[0]
        if len(outside_indices) == 0:
            return float(timestamps[0])
        last_outside = outside_indices[-1]
        return float(timestamps[min(last_outside + 1, len(timestamps) - 1)])

    if method == "forward":
        # settled[k] is True when every sample from k on is inside the band
        settled = np.logical_and.accumulate(~outside[::-1])[::-1]
        settled_indices = np.where(settled)[0]
        if len(settled_indices) == 0:
            return float(timestamps[-1])
        return float(timestamps[settled_indices[0]])

    raise InvalidParameterError(f"Unknown settling method: {method!r}")


def first_entry_time(traj, tolerance: float = 0.02) -> float:
    """
    Time of the first sample strictly inside the tolerance band.

    A quick estimate that ignores later excursions; final time when the
    output never enters the band.
    """
    band = _band(traj, tolerance)
    inside = np.where(np.abs(traj.output - traj.reference) < band)[0]
    if len(inside) == 0:
        return float(traj.time[-1])
    return float(traj.time[inside[0]])


def overshoot(traj) -> float:
    """Peak excursion above the reference, in output units."""
    return max(0.0, float(np.max(traj.output)) - traj.reference)


def steady_state_error(traj) -> float:
    return abs(float(traj.output[-1]) - traj.reference)


def observed_damping(traj) -> float:
    """
    Damping ratio implied by the measured overshoot.

    Inverts Mp = exp(-zeta * pi / sqrt(1 - zeta^2)) with
    Mp = overshoot / reference. Returns 1.0 for (practically) no overshoot
    and 0.01 when the overshoot reaches the reference itself.
    """
    if traj.reference == 0:
        return 1.0
    mp = overshoot(traj) / traj.reference
    if mp <= _NO_OVERSHOOT:
        return 1.0
    if mp >= _FULL_OVERSHOOT:
        return 0.01
    log_mp = math.log(mp)
    return math.sqrt(log_mp ** 2 / (math.pi ** 2 + log_mp ** 2))


@dataclass
class PerformanceMetrics:
    """Time-domain performance of one simulation run."""
    ise: float
    settling_time: float
    first_entry_time: float
    overshoot: float
    steady_state_error: float
    observed_damping: float
    final_output: float
    final_control: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def compute_performance(traj, tolerance: float = 0.02) -> PerformanceMetrics:
    """Calculate all trajectory metrics."""
    return PerformanceMetrics(
        ise=integral_squared_error(traj),
        settling_time=settling_time(traj, tolerance),
        first_entry_time=first_entry_time(traj, tolerance),
        overshoot=overshoot(traj),
        steady_state_error=steady_state_error(traj),
        observed_damping=observed_damping(traj),
        final_output=float(traj.output[-1]),
        final_control=float(traj.control[-1]),
    )


def compare_runs(trajectories: Dict[str, Any], tolerance: float = 0.02) -> Dict[str, PerformanceMetrics]:
    """Compare multiple simulation results keyed by name."""
    return {
        name: compute_performance(traj, tolerance)
        for name, traj in trajectories.items()
    }


@dataclass(frozen=True)
class ValidationMetrics:
    """Goodness of fit of a model output against measurements."""
    r_squared: float
    rmse: float
    fit_percent: float
    n_samples: int

    @classmethod
    def from_outputs(cls, measured, predicted) -> 'ValidationMetrics':
        """
        Compare measured and predicted outputs.

        R^2 = 1 - SSE/SST and fit = (1 - ||y - y_hat|| / ||y - mean(y)||) * 100.
        Both are NaN when the measured output is constant.

        Raises:
            InvalidParameterError: If the arrays differ in length or are empty
        """
        y = validate_array_like(measured, "measured", min_length=1)
        y_hat = validate_array_like(predicted, "predicted", min_length=1)
        if len(y) != len(y_hat):
            raise InvalidParameterError(
                f"measured and predicted lengths differ: {len(y)} vs {len(y_hat)}"
            )

        residual = y - y_hat
        sse = float(np.sum(residual ** 2))
        sst = float(np.sum((y - np.mean(y)) ** 2))

        r_squared = 1.0 - sse / sst if sst > 0 else float('nan')
        spread = distance(y, np.mean(y))
        fit_percent = (
            (1.0 - distance(y, y_hat) / spread) * 100.0
            if spread > 0 else float('nan')
        )

        return cls(
            r_squared=r_squared,
            rmse=rms(residual),
            fit_percent=fit_percent,
            n_samples=len(y),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
