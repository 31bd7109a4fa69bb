#!/usr/bin/env python3
"""
Pole Placement Tuning Demo

Computes PID gains for the thermal plant from damping and natural
frequency targets, checks the resulting closed-loop poles and verifies
each gain set in simulation. Finishes with the hand-tuned no-overshoot
presets for comparison.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

from pid_lab import Simulator, ScenarioLibrary, PoleTuner, TuningTargets
from pid_lab.analyzer import ControlSystemAnalyzer, compare_runs, compute_performance


def format_pole(p: complex) -> str:
    if abs(p.imag) < 1e-9:
        return f"{p.real:.4f}"
    return f"{p.real:.4f} {'+' if p.imag >= 0 else '-'} {abs(p.imag):.4f}j"


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    plant = ScenarioLibrary.THERMAL_PLANT
    tuner = PoleTuner(plant)
    sim = Simulator()

    print("=" * 60)
    print("Analytic Pole Placement")
    print("=" * 60)
    print(f"\nPlant: K={plant.gain}, tau={plant.time_constant} s, zeta={plant.damping_ratio}")

    results = tuner.tune_all(TuningTargets.analytic_set())

    for name, result in results.items():
        targets = result.targets
        print(f"\n{name} (zeta={targets.damping_ratio}, wn={targets.natural_frequency} rad/s)")
        print(f"  Desired poles: {', '.join(format_pole(p) for p in result.desired.poles)}")
        print(f"  Extra pole:    -{result.desired.extra_pole:.4f}")
        print(f"  Gains: Kp={result.kp:.4f}  Ki={result.ki:.4f}  Kd={result.kd:.4f}")
        if result.floored:
            print(f"  Floored: {', '.join(result.floored)}")

        poles = ControlSystemAnalyzer.closed_loop_poles(plant, result.gains)
        print(f"  Closed-loop poles: {', '.join(format_pole(p) for p in poles)}")
        print(f"  Stable: {ControlSystemAnalyzer.is_stable(plant, result.gains)}")

        traj = sim.run(ScenarioLibrary.analytic_verification(result.gains, name=name))
        metrics = compute_performance(traj)
        print(f"  Verification: settle={metrics.settling_time:.2f} s  "
              f"overshoot={metrics.overshoot:.3f} C  observed zeta={metrics.observed_damping:.2f}")

    print("\n" + "=" * 60)
    print("No-Overshoot Presets")
    print("=" * 60 + "\n")

    presets = compare_runs(sim.run_batch(ScenarioLibrary.no_overshoot()))
    for name, m in presets.items():
        print(f"{name:<24} settle={m.settling_time:6.2f} s  overshoot={m.overshoot:.4f} C  "
              f"SS error={m.steady_state_error:.4f}")


if __name__ == "__main__":
    main()
