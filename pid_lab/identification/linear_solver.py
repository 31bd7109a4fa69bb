"""
Dense linear solvers used by the least-squares identifier.

Gaussian elimination with partial pivoting on small normal-equation
systems. Inputs are never modified.
"""

import numpy as np

from pid_lab.utils.validators import InvalidParameterError, SingularSystemError

DEFAULT_PIVOT_TOLERANCE = 1e-12


def solve(A, b, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> np.ndarray:
    """
    Solve A x = b by Gaussian elimination with partial pivoting.

    At every column the row with the largest absolute value among the
    remaining rows becomes the pivot row.

    Args:
        A: Square coefficient matrix (n x n)
        b: Right-hand side (n,)
        pivot_tolerance: Smallest acceptable pivot relative to the largest
            absolute entry of A

    Returns:
        Solution vector x

    Raises:
        InvalidParameterError: If the shapes do not match
        SingularSystemError: If a pivot is numerically zero relative to the
            scale of A
    """
    a = np.array(A, dtype=float)
    rhs = np.array(b, dtype=float)

    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise InvalidParameterError(f"A must be square, got shape {a.shape}")
    n = a.shape[0]
    if rhs.shape != (n,):
        raise InvalidParameterError(f"b must have shape ({n},), got {rhs.shape}")
    if n == 0:
        raise InvalidParameterError("Empty system")

    threshold = pivot_tolerance * float(np.max(np.abs(a)))

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(a[col:, col])))
        pivot = a[pivot_row, col]
        if abs(pivot) <= threshold:
            raise SingularSystemError(
                f"Pivot {pivot:.3e} in column {col} is below tolerance {threshold:.1e}"
            )

        if pivot_row != col:
            a[[col, pivot_row]] = a[[pivot_row, col]]
            rhs[[col, pivot_row]] = rhs[[pivot_row, col]]

        factors = a[col + 1:, col] / a[col, col]
        a[col + 1:, col:] -= np.outer(factors, a[col, col:])
        rhs[col + 1:] -= factors * rhs[col]

    # Back substitution
    x = np.zeros(n)
    for row in range(n - 1, -1, -1):
        x[row] = (rhs[row] - a[row, row + 1:] @ x[row + 1:]) / a[row, row]
    return x


def least_squares(Phi, Y, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> np.ndarray:
    """
    Least-squares solution of Phi theta = Y via the normal equations.

    Solves (Phi^T Phi) theta = Phi^T Y with :func:`solve`.
    """
    phi = np.asarray(Phi, dtype=float)
    y = np.asarray(Y, dtype=float)
    if phi.ndim != 2:
        raise InvalidParameterError(f"Phi must be two-dimensional, got shape {phi.shape}")
    if y.shape != (phi.shape[0],):
        raise InvalidParameterError(
            f"Y must have shape ({phi.shape[0]},), got {y.shape}"
        )
    return solve(phi.T @ phi, phi.T @ y, pivot_tolerance)
