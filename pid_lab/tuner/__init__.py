"""PID tuning by pole placement."""

from pid_lab.tuner.pole_placement import (
    PoleTuner,
    TuningTargets,
    TuningResult,
    DesiredPoles,
    simplified_gains,
    expected_closed_loop_poles,
)

__all__ = [
    "PoleTuner",
    "TuningTargets",
    "TuningResult",
    "DesiredPoles",
    "simplified_gains",
    "expected_closed_loop_poles",
]
