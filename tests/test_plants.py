"""
Unit tests for the second-order plant model.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_lab.plants.second_order import (
    PlantParameters,
    SecondOrderPlant,
    discretize,
    discretize_values,
)
from pid_lab.utils.validators import InvalidParameterError


class TestPlantParameters:
    """Test suite for PlantParameters."""

    def test_defaults(self):
        """Test default parameters."""
        params = PlantParameters()
        assert params.gain == 1.0
        assert params.time_constant == 1.0
        assert params.damping_ratio == 0.5

    def test_invalid_time_constant(self):
        """Test non-positive time constants are rejected."""
        with pytest.raises(InvalidParameterError):
            PlantParameters(time_constant=0.0)
        with pytest.raises(InvalidParameterError):
            PlantParameters(time_constant=-1.0)

    def test_invalid_damping(self):
        """Test negative damping is rejected."""
        with pytest.raises(InvalidParameterError):
            PlantParameters(damping_ratio=-0.1)

    def test_transfer_function(self):
        """Test continuous transfer function coefficients."""
        num, den = PlantParameters(2.0, 1.5, 0.6).transfer_function_coefficients()
        assert num == [2.0]
        assert den == pytest.approx([2.25, 1.8, 1.0])

    def test_underdamped_poles(self):
        """Test complex open-loop poles."""
        poles = PlantParameters(1.0, 1.0, 0.5).poles()
        expected = [complex(-0.5, np.sqrt(3) / 2), complex(-0.5, -np.sqrt(3) / 2)]
        assert np.allclose(sorted(poles, key=lambda p: p.imag), sorted(expected, key=lambda p: p.imag))

    def test_overdamped_poles(self):
        """Test real open-loop poles."""
        poles = PlantParameters(1.0, 1.0, 1.25).poles()
        assert sorted(p.real for p in poles) == pytest.approx([-2.0, -0.5])
        assert all(p.imag == 0 for p in poles)


class TestDiscretization:
    """Test suite for the discretization coefficients."""

    def test_coefficients(self):
        """Test c0, c1, c2 for the reference thermal plant."""
        c = discretize(PlantParameters(1.0, 1.0, 0.5), 0.01)
        assert c.c0 == pytest.approx(10101.0)
        assert c.c1 == pytest.approx(-20100.0)
        assert c.c2 == pytest.approx(10000.0)

    def test_coefficient_sum(self):
        """Test c0 + c1 + c2 = 1 / tau^2."""
        c = discretize_values(1.2, 1.5, 0.6, 0.05)
        assert c.c0 + c.c1 + c.c2 == pytest.approx(1.0 / 2.25)

    def test_invalid_sample_time(self):
        """Test non-positive sample times are rejected."""
        with pytest.raises(InvalidParameterError):
            discretize(PlantParameters(), 0.0)
        with pytest.raises(InvalidParameterError):
            discretize_values(1.0, 1.0, 0.5, -0.01)

    def test_invalid_time_constant(self):
        """Test raw scalar discretization rejects tau <= 0."""
        with pytest.raises(InvalidParameterError):
            discretize_values(1.0, 0.0, 0.5, 0.01)


class TestSecondOrderPlant:
    """Test suite for SecondOrderPlant."""

    def test_initialization(self):
        """Test plant initialization."""
        plant = SecondOrderPlant(PlantParameters(1.0, 2.0, 0.7), sample_time=0.01, initial_output=3.0)
        assert plant.params.time_constant == 2.0
        assert plant.output == 3.0
        assert plant.sample_time == 0.01

    def test_recurrence(self):
        """Test one step of the difference equation."""
        params = PlantParameters(1.0, 1.0, 0.5)
        plant = SecondOrderPlant(params, sample_time=0.01, initial_output=15.0, bias=15.0)
        c = plant.coefficients

        y = plant.update(7.0)
        expected = (-c.c1 * 15.0 - c.c2 * 15.0 + 7.0 + 15.0) / c.c0
        assert y == pytest.approx(expected)

    def test_equilibrium_holds(self):
        """Test output stays at the bias level with zero input."""
        plant = SecondOrderPlant(PlantParameters(), sample_time=0.01, initial_output=15.0, bias=15.0)
        for _ in range(100):
            y = plant.update(0.0)
        assert y == pytest.approx(15.0, rel=1e-12)

    def test_step_response_final_value(self):
        """Test steady state K * u + bias."""
        plant = SecondOrderPlant(PlantParameters(2.0, 0.5, 0.7), sample_time=0.01, bias=1.0)
        for _ in range(2000):
            y = plant.update(3.0)
        assert y == pytest.approx(7.0, abs=1e-6)

    def test_underdamped_oscillation(self):
        """Test underdamped system overshoots."""
        plant = SecondOrderPlant(PlantParameters(1.0, 0.5, 0.2), sample_time=0.01)

        outputs = [plant.update(1.0) for _ in range(500)]

        assert max(outputs) > 1.0

    def test_overdamped(self):
        """Test overdamped system rises monotonically."""
        plant = SecondOrderPlant(PlantParameters(1.0, 0.5, 2.0), sample_time=0.01)

        outputs = [plant.update(1.0) for _ in range(500)]

        for i in range(1, len(outputs)):
            assert outputs[i] >= outputs[i - 1] - 1e-12
        assert max(outputs) < 1.0

    def test_reset(self):
        """Test reset restores the seed samples."""
        plant = SecondOrderPlant(PlantParameters(), sample_time=0.01, initial_output=2.0)
        first = plant.update(5.0)
        plant.update(5.0)
        assert plant.time == pytest.approx(0.02)
        plant.reset()
        assert plant.output == 2.0
        assert plant.time == 0.0
        assert plant.update(5.0) == first

    def test_sample_time_change_recomputes_coefficients(self):
        """Test coefficients follow the sample time."""
        plant = SecondOrderPlant(PlantParameters(), sample_time=0.01)
        plant.sample_time = 0.1
        assert plant.coefficients == discretize(PlantParameters(), 0.1)

    def test_set_params(self):
        """Test replacing the parameters recomputes coefficients."""
        plant = SecondOrderPlant(PlantParameters(), sample_time=0.01)
        new_params = PlantParameters(2.0, 3.0, 0.9)
        plant.set_params(new_params)
        assert plant.coefficients == discretize(new_params, 0.01)

    def test_simulate_open_loop(self):
        """Test the open-loop helper matches manual stepping."""
        params = PlantParameters(1.2, 1.5, 0.6)
        inputs = np.linspace(0.0, 3.0, 50)

        plant = SecondOrderPlant(params, sample_time=0.05, initial_output=1.0)
        y = plant.simulate_open_loop(inputs)

        manual = SecondOrderPlant(params, sample_time=0.05, initial_output=1.0)
        expected = [1.0, 1.0] + [manual.update(u) for u in inputs[2:]]

        assert y[0] == y[1] == 1.0
        assert np.allclose(y, expected)
        assert plant.output == 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
