#!/usr/bin/env python3
"""
Basic PID Control Demo

Heats a room from 15 C to 22 C and compares open-loop, proportional and
PID control of the same plant.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

from pid_lab import Simulator, ScenarioLibrary
from pid_lab.analyzer import compare_runs


def print_metrics(metrics):
    print(f"{'Run':<14}{'ISE':>10}{'Settle [s]':>12}{'Overshoot':>11}"
          f"{'SS Error':>10}{'Zeta':>7}{'u final':>9}")
    print("-" * 73)
    for name, m in metrics.items():
        print(f"{name:<14}{m.ise:>10.2f}{m.settling_time:>12.2f}{m.overshoot:>11.3f}"
              f"{m.steady_state_error:>10.4f}{m.observed_damping:>7.2f}{m.final_control:>9.2f}")


def main():
    """Run the temperature comparison."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Temperature Control: Open Loop vs P vs PID")
    print("=" * 60)

    configs = ScenarioLibrary.temperature_comparison()
    plant = configs[0].plant
    print(f"\nPlant: K={plant.gain}, tau={plant.time_constant} s, zeta={plant.damping_ratio}")
    print(f"Reference: {configs[0].reference} C, ambient: {configs[0].ambient} C")
    print(f"Heater limits: [{configs[0].output_min}, {configs[0].output_max}]")

    sim = Simulator()
    results = sim.run_batch(configs)

    for name, traj in results.items():
        print(f"\n{name}: {len(traj)} samples in {traj.execution_time * 1000:.1f} ms")
        print(f"  Final temperature: {traj.final_output:.3f} C")
        print(f"  Final error: {traj.final_error:.4f}")

    print("\n" + "=" * 60)
    print("Performance Metrics")
    print("=" * 60 + "\n")
    print_metrics(compare_runs(results))

    print("\n" + "=" * 60)
    print("Elevator Positioning")
    print("=" * 60)

    elevator = sim.run(ScenarioLibrary.elevator())
    summary = Simulator.summarize(elevator)
    print(f"\nFinal position: {elevator.final_output:.3f} m")
    print(f"Overshoot: {summary['overshoot']:.3f} m")
    print(f"Settling time (2%): {summary['settling_time']:.2f} s")


if __name__ == "__main__":
    main()
