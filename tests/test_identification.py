"""
Unit tests for ARX identification and excitation data.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_lab.identification.system_identifier import (
    ARXStructure,
    ARXModel,
    SystemIdentifier,
    build_regression,
)
from pid_lab.identification.excitation import (
    ExperimentalData,
    generate_excitation_data,
    REFERENCE_PLANT,
)
from pid_lab.plants.second_order import PlantParameters, discretize
from pid_lab.utils.validators import (
    InvalidParameterError,
    SingularSystemError,
    DegenerateModelError,
)


A1, A2, B1 = -1.5, 0.7, 0.5


def arx_data(n=400, seed=0):
    """Noise-free data from y[k] = 1.5 y[k-1] - 0.7 y[k-2] + 0.5 u[k-1]."""
    rng = np.random.default_rng(seed)
    u = rng.standard_normal(n)
    y = np.zeros(n)
    for k in range(2, n):
        y[k] = -A1 * y[k - 1] - A2 * y[k - 2] + B1 * u[k - 1]
    return u, y


class TestRegression:
    """Test suite for the regression matrix."""

    def test_shape_and_rows(self):
        """Test rows start at max(na, nb + nk - 1)."""
        u = np.arange(10.0)
        y = np.arange(10.0) * 10
        phi, target = build_regression(u, y, ARXStructure(2, 1, 1))

        assert phi.shape == (8, 3)
        assert np.array_equal(phi[0], [-y[1], -y[0], u[1]])
        assert np.array_equal(target, y[2:])

    def test_longer_input_history(self):
        """Test delayed multi-tap structures."""
        structure = ARXStructure(na=2, nb=3, nk=2)
        assert structure.start == 4

        u = np.arange(12.0)
        y = np.arange(12.0) + 100
        phi, target = build_regression(u, y, structure)

        assert phi.shape == (8, 5)
        assert np.array_equal(phi[0], [-y[3], -y[2], u[2], u[1], u[0]])
        assert target[0] == y[4]

    def test_too_few_samples(self):
        """Test short records are rejected."""
        with pytest.raises(InvalidParameterError):
            build_regression(np.ones(4), np.ones(4), ARXStructure())

    def test_length_mismatch(self):
        """Test u and y must have the same length."""
        with pytest.raises(InvalidParameterError):
            build_regression(np.ones(10), np.ones(9), ARXStructure())

    def test_invalid_structure(self):
        """Test non-positive orders are rejected."""
        with pytest.raises(InvalidParameterError):
            ARXStructure(na=0)
        with pytest.raises(InvalidParameterError):
            ARXStructure(nb=1.5)


class TestARXModel:
    """Test suite for ARXModel."""

    def test_fit_recovers_coefficients(self):
        """Test noise-free data recovers the generating coefficients."""
        u, y = arx_data()
        model = SystemIdentifier(sample_time=0.1).fit(u, y)

        assert model.a == pytest.approx((A1, A2), abs=1e-9)
        assert model.b == pytest.approx((B1,), abs=1e-9)

    def test_fit_independent_of_units(self):
        """Test the same experiment recorded in smaller units gives the same model."""
        u, y = arx_data()
        for scale in (1e-3, 1e-7):
            model = SystemIdentifier(sample_time=0.1).fit(u * scale, y * scale)
            assert model.a == pytest.approx((A1, A2), abs=1e-8)
            assert model.b == pytest.approx((B1,), abs=1e-8)

    def test_simulate_reproduces_data(self):
        """Test free-run simulation of the true model reproduces the data."""
        u, y = arx_data()
        model = ARXModel(ARXStructure(), (A1, A2), (B1,), 0.1)
        y_hat = model.simulate(u, y)

        assert y_hat[0] == y[0] and y_hat[1] == y[1]
        assert np.allclose(y_hat, y)

    def test_simulate_seeds_from_measurement(self):
        """Test the first samples are copied from the measured output."""
        model = ARXModel(ARXStructure(), (A1, A2), (B1,), 0.1)
        y_hat = model.simulate(np.zeros(5), [3.0, 4.0, 99.0, 99.0, 99.0])

        assert y_hat[0] == 3.0
        assert y_hat[1] == 4.0
        assert y_hat[2] == pytest.approx(1.5 * 4.0 - 0.7 * 3.0)

    def test_bilinear_conversion(self):
        """Test den0, den1, den2 and the recovered K, tau, zeta."""
        model = ARXModel(ARXStructure(), (A1, A2), (B1,), 0.1)
        cont = model.to_continuous()

        assert cont.den0 == pytest.approx(0.2)
        assert cont.den1 == pytest.approx(6.0)
        assert cont.den2 == pytest.approx(1280.0)
        assert cont.num0 == B1
        assert cont.gain == pytest.approx(2.5)
        assert cont.time_constant == pytest.approx(80.0)
        assert cont.damping_ratio == pytest.approx(6.0 / (2 * 80.0 * 0.2))

    def test_parameter_errors(self):
        """Test percent errors against a known plant."""
        cont = ARXModel(ARXStructure(), (A1, A2), (B1,), 0.1).to_continuous()

        errors = cont.parameter_errors(PlantParameters(gain=2.0, time_constant=40.0, damping_ratio=0.25))
        assert errors['gain'] == pytest.approx(25.0)
        assert errors['time_constant'] == pytest.approx(100.0)
        assert errors['damping_ratio'] == pytest.approx(25.0)

        undamped = cont.parameter_errors(PlantParameters(gain=2.0, time_constant=40.0, damping_ratio=0.0))
        assert np.isnan(undamped['damping_ratio'])

    def test_degenerate_den0(self):
        """Test a pole at z = 1 is rejected."""
        model = ARXModel(ARXStructure(), (-1.5, 0.5), (B1,), 0.1)
        with pytest.raises(DegenerateModelError):
            model.to_continuous()

    def test_degenerate_negative_ratio(self):
        """Test den2 / den0 < 0 is rejected."""
        model = ARXModel(ARXStructure(), (-2.5, 1.2), (B1,), 0.1)
        with pytest.raises(DegenerateModelError):
            model.to_continuous()

    def test_degenerate_is_value_error(self):
        """Test the error family."""
        model = ARXModel(ARXStructure(), (-1.5, 0.5), (B1,), 0.1)
        with pytest.raises(ValueError):
            model.to_continuous()

    def test_conversion_requires_second_order(self):
        """Test first-order models cannot be converted."""
        model = ARXModel(ARXStructure(na=1), (-0.9,), (0.1,), 0.1)
        with pytest.raises(InvalidParameterError):
            model.to_continuous()

    def test_coefficient_count(self):
        """Test coefficients must match the structure."""
        with pytest.raises(InvalidParameterError):
            ARXModel(ARXStructure(), (A1,), (B1,), 0.1)


class TestSystemIdentifier:
    """Test suite for SystemIdentifier."""

    def test_constant_input_is_singular(self):
        """Test a record without excitation cannot be identified."""
        with pytest.raises(SingularSystemError):
            SystemIdentifier(0.1).fit(np.zeros(50), np.zeros(50))

    def test_identify_training_metrics(self):
        """Test a noise-free fit is validated on the training data."""
        u, y = arx_data()
        result = SystemIdentifier(0.1).identify(u, y)

        assert not result.held_out
        assert result.metrics.r_squared == pytest.approx(1.0, abs=1e-9)
        assert result.metrics.fit_percent == pytest.approx(100.0, abs=1e-6)
        assert len(result.simulated_output) == len(y)

    def test_identify_held_out(self):
        """Test metrics are computed on a held-out record."""
        u, y = arx_data(n=400, seed=0)
        u_val, y_val = arx_data(n=200, seed=1)
        result = SystemIdentifier(0.1).identify(u, y, validation=(u_val, y_val))

        assert result.held_out
        assert result.metrics.n_samples == 200
        assert result.metrics.r_squared > 0.999999

    def test_identify_plant_data(self):
        """Test the discretized plant is recovered from noise-free data."""
        data = generate_excitation_data(
            REFERENCE_PLANT, duration=50.0, sample_time=0.1,
            seed=3, noise_ratio=0.0
        )
        identifier = SystemIdentifier(0.1, ARXStructure(na=2, nb=1, nk=0))
        result = identifier.identify(data.input, data.output)

        c = discretize(REFERENCE_PLANT, 0.1)
        assert result.model.a == pytest.approx((c.c1 / c.c0, c.c2 / c.c0), rel=1e-6)
        assert result.continuous.gain == pytest.approx(REFERENCE_PLANT.gain, rel=1e-3)
        assert result.metrics.r_squared > 0.9999

    def test_recommended_gains(self):
        """Test PI gains are recommended for the identified model."""
        data = generate_excitation_data(duration=50.0, sample_time=0.1, seed=3, noise_ratio=0.0)
        result = SystemIdentifier(0.1, ARXStructure(nk=0)).identify(data.input, data.output)

        assert set(result.recommended_gains) == {"Fast", "Balanced", "Conservative"}
        for gains in result.recommended_gains.values():
            assert gains['kp'] >= 0.1
            assert gains['ki'] >= 0.01
            assert gains['kd'] == 0.0
        assert "SYSTEM IDENTIFICATION RESULTS" in result.summary()


class TestExcitationData:
    """Test suite for generated experiments."""

    def test_shape(self):
        """Test record length and time grid."""
        data = generate_excitation_data(duration=50.0, sample_time=0.01, seed=0)
        assert len(data) == 5001
        assert data.time[-1] == pytest.approx(50.0)
        assert data.sample_time == 0.01

    def test_input_limits(self):
        """Test the excitation is clipped to [0, 6]."""
        data = generate_excitation_data(seed=0)
        assert np.all(data.input >= 0.0)
        assert np.all(data.input <= 6.0)
        assert np.mean(data.input) == pytest.approx(3.0, abs=0.3)

    def test_plant_starts_at_rest(self):
        """Test the clean output starts from zero."""
        data = generate_excitation_data(seed=0)
        assert data.clean_output[0] == data.clean_output[1] == 0.0

    def test_reproducible(self):
        """Test equal seeds give equal records."""
        a = generate_excitation_data(duration=10.0, seed=7)
        b = generate_excitation_data(duration=10.0, seed=7)
        c = generate_excitation_data(duration=10.0, seed=8)
        assert np.array_equal(a.output, b.output)
        assert not np.array_equal(a.output, c.output)

    def test_noise_level(self):
        """Test measurement noise is 5 % of the clean output's deviation."""
        data = generate_excitation_data(seed=0)
        noise = data.output - data.clean_output
        expected = 0.05 * np.std(data.clean_output)
        assert np.std(noise) == pytest.approx(expected, rel=0.1)

    def test_split(self):
        """Test splitting into training and validation records."""
        data = generate_excitation_data(duration=10.0, seed=0)
        train, val = data.split(0.7)
        assert len(train) + len(val) == len(data)
        assert train.true_plant == val.true_plant == REFERENCE_PLANT

    def test_length_check(self):
        """Test mismatched arrays are rejected."""
        with pytest.raises(InvalidParameterError):
            ExperimentalData(time=np.arange(5.0), input=np.zeros(5), output=np.zeros(4))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
