"""Per-segment polynomial coefficients for piecewise interpolation.

Every builder returns an array of shape ``(n - 1, 4)`` whose row ``i`` holds
``(a_i, b_i, c_i, d_i)`` such that the segment polynomial is
``a_i + b_i t + c_i t^2 + d_i t^3`` with ``t = x - x_i``.

References
----------
- Burden & Faires (2011), "Numerical Analysis", 9th ed., Section 3.5:
  Cubic Spline Interpolation (Algorithm 3.4, natural spline).
- Conte & de Boor (1980), "Elementary Numerical Analysis", Section 3.3:
  tridiagonal systems (Thomas algorithm).
"""

from __future__ import annotations

import numpy as np


def solve_tridiagonal(lower: np.ndarray, diag: np.ndarray,
                      upper: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Solve a tridiagonal system with the Thomas algorithm.

    Forward elimination followed by back-substitution, O(n) time.  No
    pivoting is performed, which is stable for the diagonally dominant
    systems produced by spline construction.

    Parameters
    ----------
    lower : ndarray of shape (n,)
        Sub-diagonal; ``lower[0]`` is ignored.
    diag : ndarray of shape (n,)
        Main diagonal.
    upper : ndarray of shape (n,)
        Super-diagonal; ``upper[n - 1]`` is ignored.
    rhs : ndarray of shape (n,)
        Right-hand side.

    Returns
    -------
    ndarray of shape (n,)
        Solution vector.

    Raises
    ------
    ValueError
        If the arrays differ in length or a zero pivot is encountered.
    """
    n = len(diag)
    if not (len(lower) == len(upper) == len(rhs) == n):
        raise ValueError(
            f"Tridiagonal bands must have equal length, got "
            f"{len(lower)}, {n}, {len(upper)}, {len(rhs)}"
        )
    if n == 0:
        return np.empty(0)

    c_prime = np.empty(n)
    d_prime = np.empty(n)

    if diag[0] == 0.0:
        raise ValueError("Zero pivot in tridiagonal solve at row 0")
    c_prime[0] = upper[0] / diag[0] if n > 1 else 0.0
    d_prime[0] = rhs[0] / diag[0]

    for i in range(1, n):
        denom = diag[i] - lower[i] * c_prime[i - 1]
        if denom == 0.0:
            raise ValueError(f"Zero pivot in tridiagonal solve at row {i}")
        c_prime[i] = upper[i] / denom if i < n - 1 else 0.0
        d_prime[i] = (rhs[i] - lower[i] * d_prime[i - 1]) / denom

    solution = np.empty(n)
    solution[-1] = d_prime[-1]
    for i in range(n - 2, -1, -1):
        solution[i] = d_prime[i] - c_prime[i] * solution[i + 1]
    return solution


def linear_coefficients(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Chords between consecutive knots."""
    coeffs = np.zeros((len(x) - 1, 4))
    coeffs[:, 0] = y[:-1]
    coeffs[:, 1] = np.diff(y) / np.diff(x)
    return coeffs


def constant_forward_coefficients(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Each segment takes the value of its right-hand knot."""
    coeffs = np.zeros((len(x) - 1, 4))
    coeffs[:, 0] = y[1:]
    return coeffs


def constant_backward_coefficients(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Each segment keeps the value of its left-hand knot."""
    coeffs = np.zeros((len(x) - 1, 4))
    coeffs[:, 0] = y[:-1]
    return coeffs


def quadratic_coefficients(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Three-point quadratic fit per segment.

    Segment ``i`` passes through knots ``i`` and ``i + 1`` plus a borrowed
    knot: ``i + 2`` whenever it exists, otherwise ``i - 1`` (the last
    segment).  Requires at least three knots.
    """
    n_seg = len(x) - 1
    if n_seg < 2:
        raise ValueError(
            f"Quadratic coefficients need at least 3 knots, got {len(x)}"
        )
    idx = np.arange(n_seg)
    borrowed = np.where(idx + 2 <= n_seg, idx + 2, idx - 1)

    h = x[1:] - x[:-1]
    s = x[borrowed] - x[:-1]
    chord = (y[1:] - y[:-1]) / h
    borrowed_chord = (y[borrowed] - y[:-1]) / s

    # p(t) = a + b t + c t^2 gives (p(t) - a) / t = b + c t at t = h and t = s
    c = (borrowed_chord - chord) / (s - h)
    b = chord - c * h

    coeffs = np.zeros((n_seg, 4))
    coeffs[:, 0] = y[:-1]
    coeffs[:, 1] = b
    coeffs[:, 2] = c
    return coeffs


def natural_second_derivatives(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Knot second derivatives ``M`` of the natural cubic spline.

    Solves, for each interior knot ``i``::

        h[i-1] M[i-1] + 2 (h[i-1] + h[i]) M[i] + h[i] M[i+1]
            = 6 ((y[i+1] - y[i]) / h[i] - (y[i] - y[i-1]) / h[i-1])

    with ``M[0] = M[n-1] = 0``.
    """
    n = len(x)
    moments = np.zeros(n)
    if n < 3:
        return moments

    h = np.diff(x)
    chord = np.diff(y) / h

    lower = h[:-1].copy()
    diag = 2.0 * (h[:-1] + h[1:])
    upper = h[1:].copy()
    rhs = 6.0 * (chord[1:] - chord[:-1])
    lower[0] = 0.0
    upper[-1] = 0.0

    moments[1:-1] = solve_tridiagonal(lower, diag, upper, rhs)
    return moments


def cubic_coefficients(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Natural cubic spline coefficients (zero curvature at both ends)."""
    moments = natural_second_derivatives(x, y)
    h = np.diff(x)
    m_left = moments[:-1]
    m_right = moments[1:]

    coeffs = np.empty((len(x) - 1, 4))
    coeffs[:, 0] = y[:-1]
    coeffs[:, 1] = np.diff(y) / h - h * (2.0 * m_left + m_right) / 6.0
    coeffs[:, 2] = m_left / 2.0
    coeffs[:, 3] = (m_right - m_left) / (6.0 * h)
    return coeffs


def evaluate_polynomial(coeffs: np.ndarray, t: float) -> float:
    """Evaluate ``a + b t + c t^2 + d t^3`` by Horner's rule."""
    a, b, c, d = coeffs
    return float(a + t * (b + t * (c + t * d)))


def evaluate_polynomial_derivative(coeffs: np.ndarray, t: float, order: int) -> float:
    """Evaluate the ``order``-th derivative (1, 2 or 3) of a segment polynomial."""
    _, b, c, d = coeffs
    if order == 1:
        return float(b + t * (2.0 * c + 3.0 * d * t))
    elif order == 2:
        return float(2.0 * c + 6.0 * d * t)
    elif order == 3:
        return float(6.0 * d)
    else:
        raise ValueError(f"Derivative order {order} not supported (use 1, 2 or 3)")
