"""
Unit tests for the Gaussian elimination solver.
"""

import pytest
import numpy as np
import scipy.linalg
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_lab.identification.linear_solver import solve, least_squares
from pid_lab.utils.validators import PIDLabError, InvalidParameterError, SingularSystemError


class TestSolve:
    """Test suite for solve()."""

    def test_matches_scipy(self):
        """Test against scipy on a well-conditioned system."""
        A = np.array([[4.0, -2.0, 1.0], [3.0, 6.0, -4.0], [2.0, 1.0, 8.0]])
        b = np.array([12.0, -25.0, 32.0])
        assert np.allclose(solve(A, b), scipy.linalg.solve(A, b))

    def test_requires_pivoting(self):
        """Test a zero leading entry is handled by row exchange."""
        A = [[0.0, 1.0], [1.0, 0.0]]
        b = [2.0, 3.0]
        assert np.allclose(solve(A, b), [3.0, 2.0])

    def test_small_pivot_stability(self):
        """Test partial pivoting on a tiny leading entry."""
        A = np.array([[1e-10, 1.0], [1.0, 1.0]])
        b = np.array([1.0, 2.0])
        assert np.allclose(solve(A, b), scipy.linalg.solve(A, b))

    def test_random_systems(self):
        """Test random well-conditioned systems."""
        rng = np.random.default_rng(42)
        for n in (1, 3, 6):
            A = rng.standard_normal((n, n)) + n * np.eye(n)
            b = rng.standard_normal(n)
            assert np.allclose(solve(A, b), scipy.linalg.solve(A, b))

    def test_small_scale_system(self):
        """Test a well-conditioned system with tiny entries is not singular."""
        A = np.eye(2) * 1e-13
        b = np.array([1e-13, 2e-13])
        assert np.allclose(solve(A, b), [1.0, 2.0])
        assert np.allclose(solve(A, b), scipy.linalg.solve(A, b))

    def test_scale_invariance(self):
        """Test scaling the whole system leaves the solution unchanged."""
        A = np.array([[4.0, -2.0, 1.0], [3.0, 6.0, -4.0], [2.0, 1.0, 8.0]])
        b = np.array([12.0, -25.0, 32.0])
        expected = solve(A, b)
        for scale in (1e-20, 1e-8, 1e8):
            assert np.allclose(solve(A * scale, b * scale), expected)

    def test_inputs_not_modified(self):
        """Test the caller's arrays are left untouched."""
        A = np.array([[2.0, 1.0], [1.0, 3.0]])
        b = np.array([1.0, 2.0])
        A_copy, b_copy = A.copy(), b.copy()
        solve(A, b)
        assert np.array_equal(A, A_copy)
        assert np.array_equal(b, b_copy)

    def test_singular(self):
        """Test a singular matrix raises SingularSystemError."""
        A = [[1.0, 2.0], [2.0, 4.0]]
        with pytest.raises(SingularSystemError):
            solve(A, [1.0, 2.0])

    def test_singular_is_arithmetic_error(self):
        """Test the error family."""
        with pytest.raises(ArithmeticError):
            solve(np.zeros((2, 2)), np.zeros(2))

    def test_errors_share_base_class(self):
        """Test library errors can be caught as PIDLabError."""
        with pytest.raises(PIDLabError):
            solve([[1.0, 1.0], [1.0, 1.0]], [1.0, 2.0])
        with pytest.raises(PIDLabError):
            solve(np.ones((2, 3)), np.ones(2))

    def test_shape_mismatch(self):
        """Test non-square and mismatched systems are rejected."""
        with pytest.raises(InvalidParameterError):
            solve(np.ones((2, 3)), np.ones(2))
        with pytest.raises(InvalidParameterError):
            solve(np.eye(2), np.ones(3))


class TestLeastSquares:
    """Test suite for least_squares()."""

    def test_exact_fit(self):
        """Test an overdetermined consistent system is solved exactly."""
        rng = np.random.default_rng(0)
        Phi = rng.standard_normal((50, 3))
        theta = np.array([1.5, -0.7, 0.25])
        assert np.allclose(least_squares(Phi, Phi @ theta), theta)

    def test_matches_scipy_lstsq(self):
        """Test against scipy on a noisy system."""
        rng = np.random.default_rng(1)
        Phi = rng.standard_normal((200, 4))
        Y = Phi @ np.array([0.5, 2.0, -1.0, 3.0]) + 0.1 * rng.standard_normal(200)
        expected, *_ = scipy.linalg.lstsq(Phi, Y)
        assert np.allclose(least_squares(Phi, Y), expected)

    def test_rank_deficient(self):
        """Test collinear regressors raise SingularSystemError."""
        x = np.arange(10.0)
        Phi = np.column_stack([x, 2.0 * x])
        with pytest.raises(SingularSystemError):
            least_squares(Phi, x)

    def test_shape_mismatch(self):
        """Test target length must match the rows of Phi."""
        with pytest.raises(InvalidParameterError):
            least_squares(np.ones((5, 2)), np.ones(4))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
