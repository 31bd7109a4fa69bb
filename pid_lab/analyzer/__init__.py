"""Performance metrics and closed-loop analysis."""

from pid_lab.analyzer.metrics import (
    integral_squared_error,
    settling_time,
    first_entry_time,
    overshoot,
    steady_state_error,
    observed_damping,
    PerformanceMetrics,
    compute_performance,
    compare_runs,
    ValidationMetrics,
)
from pid_lab.analyzer.control_analysis import ControlSystemAnalyzer, closed_loop_poles

__all__ = [
    "integral_squared_error",
    "settling_time",
    "first_entry_time",
    "overshoot",
    "steady_state_error",
    "observed_damping",
    "PerformanceMetrics",
    "compute_performance",
    "compare_runs",
    "ValidationMetrics",
    "ControlSystemAnalyzer",
    "closed_loop_poles",
]
