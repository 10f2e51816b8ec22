"""Shared test fixtures for pynumerics tests."""

import math

import pytest

from pynumerics import (
    ExtrapolationStrategy,
    InterpolationType,
    Interpolator,
    RootFinderBuilder,
    RootFindingMethod,
)


# ---------------------------------------------------------------------------
# Test data
# ---------------------------------------------------------------------------

LINE_X = [0.0, 1.0, 2.0, 3.0]
LINE_Y = [0.0, 2.0, 4.0, 6.0]

# Non-uniform knots sampled from sin(x)
SIN_X = [0.0, 0.4, 1.1, 1.5, 2.3, 2.9, 3.6, 4.0]
SIN_Y = [math.sin(v) for v in SIN_X]

ALL_KINDS = list(InterpolationType)


def cubic_poly(x):
    """x^3 - x - 2, single real root near 1.5213797."""
    return x ** 3 - x - 2.0


def cubic_poly_prime(x):
    return 3.0 * x ** 2 - 1.0


CUBIC_ROOT = 1.5213797068045676


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def linear_line():
    """Linear interpolant through (0,0),(1,2),(2,4),(3,6), no extrapolation."""
    return Interpolator(LINE_X, LINE_Y, InterpolationType.LINEAR)


@pytest.fixture
def cubic_sin():
    """Natural cubic spline through non-uniform samples of sin(x)."""
    return Interpolator(SIN_X, SIN_Y, InterpolationType.CUBIC)


@pytest.fixture
def cubic_sin_extend():
    """Natural cubic spline of sin(x) with polynomial extension."""
    return Interpolator(
        SIN_X, SIN_Y, InterpolationType.CUBIC, ExtrapolationStrategy.EXTEND
    )


@pytest.fixture
def newton_builder():
    """Newton-Raphson builder for x^3 - x - 2 from x0 = 400."""
    return (
        RootFinderBuilder(RootFindingMethod.NEWTON_RAPHSON)
        .function(cubic_poly)
        .derivative(cubic_poly_prime)
        .initial_guess(400.0)
        .tolerance(1e-6)
        .max_iterations(100)
    )
