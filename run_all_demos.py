#!/usr/bin/env python3
"""
Run All Demos - Launcher for the PID lab demonstrations.

Pass a demo number to run one demo, or no argument for a menu.
"""

import importlib
import sys
from pathlib import Path

# Ensure we can import from the project
sys.path.insert(0, str(Path(__file__).parent))

DEMOS = {
    '1': ('examples.demo_basic', 'Temperature Control Comparison'),
    '2': ('examples.demo_tuning', 'Pole Placement Tuning'),
    '3': ('examples.demo_system_identification', 'ARX System Identification'),
}


def print_header():
    """Print welcome header."""
    print("\n" + "=" * 70)
    print("   PID CONTROL LABORATORY - DEMONSTRATION SUITE")
    print("=" * 70)


def print_menu():
    """Print demo menu."""
    print("\nAvailable Demonstrations:")
    print("-" * 40)
    print("  1. Temperature Control Comparison")
    print("     - Open loop, P and PID on the thermal plant")
    print("     - ISE, settling time, overshoot")
    print("     - Elevator positioning")
    print()
    print("  2. Pole Placement Tuning")
    print("     - Gains from damping and frequency targets")
    print("     - Closed-loop poles via python-control")
    print("     - No-overshoot presets")
    print()
    print("  3. ARX System Identification")
    print("     - Multisine excitation experiment")
    print("     - Least-squares fit and validation")
    print("     - Recommended PI gains")
    print()
    print("  4. Run ALL demos")
    print("  0. Exit")
    print("-" * 40)


def run_demo(demo_name: str) -> bool:
    """Run a specific demo."""
    if demo_name not in DEMOS:
        print("Invalid selection.")
        return False

    module_name, title = DEMOS[demo_name]

    print(f"\n{'=' * 70}")
    print(f"   Running: {title}")
    print('=' * 70)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        print(f"Failed to import demo: {e}")
        print("Make sure all dependencies are installed: pip install -e .")
        return False

    module.main()
    return True


def run_all_demos():
    """Run all demos in sequence."""
    for key in DEMOS:
        run_demo(key)
        print("\n" + "-" * 70)

    print("\n" + "=" * 70)
    print("   ALL DEMONSTRATIONS COMPLETE")
    print("=" * 70)


def main():
    """Main entry point."""
    print_header()

    if len(sys.argv) > 1:
        choice = sys.argv[1]
        if choice == 'all':
            run_all_demos()
        else:
            run_demo(choice)
        return

    while True:
        print_menu()

        choice = input("\nEnter your choice (0-4): ").strip()

        if choice == '0':
            print("\nGoodbye.\n")
            break
        elif choice == '4':
            run_all_demos()
        elif choice in DEMOS:
            run_demo(choice)
        else:
            print("\nInvalid choice. Please enter 0-4.")


if __name__ == "__main__":
    main()
