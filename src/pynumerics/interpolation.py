"""Univariate piecewise-polynomial interpolation over a fixed knot set.

The :class:`Interpolator` validates its knots, derives the polynomial
coefficients of every segment once at construction, and answers queries by
binary search plus Horner evaluation.  All state is read-only after
construction, so one instance can be shared between threads.

References
----------
- de Boor (2001), "A Practical Guide to Splines", revised ed., Springer,
  Chapters IV-V.
- Burden & Faires (2011), "Numerical Analysis", 9th ed., Section 3.5.
"""

from __future__ import annotations

import math
import os
import pickle
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

from pynumerics._coefficients import (
    constant_backward_coefficients,
    constant_forward_coefficients,
    cubic_coefficients,
    evaluate_polynomial,
    evaluate_polynomial_derivative,
    linear_coefficients,
    quadratic_coefficients,
)
from pynumerics.exceptions import DomainError
from pynumerics.knots import KnotTable


class InterpolationType(Enum):
    """Polynomial form used on each segment."""

    LINEAR = "linear"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"
    CONSTANT_FORWARD = "constant_forward"
    CONSTANT_BACKWARD = "constant_backward"

    @property
    def min_points(self) -> int:
        """Minimum number of knots needed to build this type."""
        return _MIN_POINTS[self]


_MIN_POINTS = {
    InterpolationType.LINEAR: 2,
    InterpolationType.QUADRATIC: 3,
    InterpolationType.CUBIC: 4,
    InterpolationType.CONSTANT_FORWARD: 2,
    InterpolationType.CONSTANT_BACKWARD: 2,
}

_COEFFICIENT_BUILDERS = {
    InterpolationType.LINEAR: linear_coefficients,
    InterpolationType.QUADRATIC: quadratic_coefficients,
    InterpolationType.CUBIC: cubic_coefficients,
    InterpolationType.CONSTANT_FORWARD: constant_forward_coefficients,
    InterpolationType.CONSTANT_BACKWARD: constant_backward_coefficients,
}


class ExtrapolationStrategy(Enum):
    """Policy for queries outside ``[x_0, x_{n-1}]``.

    ``NONE`` rejects them and ``CONSTANT`` clamps to the boundary value.
    ``EXTEND`` evaluates the boundary segment's full polynomial beyond its
    interval.

    ``LINEAR`` draws a line through the boundary knot with slope ``b``, the
    linear coefficient of the boundary segment.  Below the range that is
    ``y_0 + b_0 (x - x_0)``.  Above it the line is anchored at the last
    knot, ``y_{n-1} + b_{n-2} (x - x_{n-1})``, and not at the segment's
    left end ``x_{n-2}``: the segment's curvature terms are dropped, and
    only an anchor at ``x_{n-1}`` keeps the extrapolant continuous there.
    """

    NONE = "none"
    CONSTANT = "constant"
    LINEAR = "linear"
    EXTEND = "extend"


@dataclass(frozen=True)
class Segment:
    """Polynomial piece on ``[left, right]`` in local coordinate ``t = x - left``."""

    left: float
    right: float
    a: float
    b: float
    c: float
    d: float

    @property
    def coefficients(self) -> Tuple[float, float, float, float]:
        return self.a, self.b, self.c, self.d

    def __call__(self, x: float) -> float:
        t = x - self.left
        return self.a + t * (self.b + t * (self.c + t * self.d))


class Interpolator:
    """Piecewise-polynomial interpolant through a set of knots.

    Parameters
    ----------
    x : sequence of float
        Knot abscissae, strictly increasing.
    y : sequence of float
        Knot ordinates.
    kind : InterpolationType, optional
        Segment polynomial form (default ``LINEAR``).
    extrapolation : ExtrapolationStrategy, optional
        Out-of-range policy (default ``NONE``).

    Raises
    ------
    ConstructionError
        If the knot data is invalid for ``kind``.

    Examples
    --------
    >>> interp = Interpolator([0, 1, 2, 3], [0, 2, 4, 6])
    >>> interp.interpolate(0.5)
    1.0
    >>> interp = Interpolator([0, 1, 2, 3], [0, 2, 4, 6],
    ...                       extrapolation=ExtrapolationStrategy.CONSTANT)
    >>> interp.interpolate(4.0)
    6.0
    """

    def __init__(
        self,
        x: Sequence[float],
        y: Sequence[float],
        kind: InterpolationType = InterpolationType.LINEAR,
        extrapolation: ExtrapolationStrategy = ExtrapolationStrategy.NONE,
    ):
        if not isinstance(kind, InterpolationType):
            raise TypeError(
                f"kind must be an InterpolationType, got {type(kind).__name__}"
            )
        if not isinstance(extrapolation, ExtrapolationStrategy):
            raise TypeError(
                f"extrapolation must be an ExtrapolationStrategy, "
                f"got {type(extrapolation).__name__}"
            )
        self._kind = kind
        self._extrapolation = extrapolation
        self._knots = KnotTable(x, y, min_points=kind.min_points)
        self._coefficients = self._build_coefficients()

    def _build_coefficients(self) -> np.ndarray:
        coeffs = _COEFFICIENT_BUILDERS[self._kind](self._knots.x, self._knots.y)
        coeffs.flags.writeable = False
        return coeffs

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def knots(self) -> KnotTable:
        return self._knots

    @property
    def kind(self) -> InterpolationType:
        return self._kind

    @property
    def extrapolation(self) -> ExtrapolationStrategy:
        return self._extrapolation

    @property
    def domain(self) -> Tuple[float, float]:
        """``(x_0, x_{n-1})``."""
        return self._knots.domain

    @property
    def num_segments(self) -> int:
        return len(self._coefficients)

    @property
    def coefficients(self) -> np.ndarray:
        """Read-only ``(n - 1, 4)`` array of ``(a, b, c, d)`` per segment."""
        return self._coefficients

    @property
    def segments(self) -> Tuple[Segment, ...]:
        """One :class:`Segment` per knot interval, left to right."""
        x = self._knots.x
        return tuple(
            Segment(float(x[i]), float(x[i + 1]), *(float(v) for v in row))
            for i, row in enumerate(self._coefficients)
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _check_query(self, x: float) -> float:
        x = float(x)
        if not math.isfinite(x):
            raise DomainError(
                x, self.domain, f"Cannot interpolate at non-finite x = {x}"
            )
        return x

    def interpolate(self, x: float) -> float:
        """Evaluate the interpolant at ``x``.

        Knots are reproduced exactly.  Between knots the containing
        segment's polynomial is evaluated; outside the knot range the
        configured :class:`ExtrapolationStrategy` applies.

        Parameters
        ----------
        x : float
            Query point.

        Returns
        -------
        float
            Interpolated (or extrapolated) value.

        Raises
        ------
        DomainError
            If ``x`` is NaN/Inf, or lies outside the knot range under
            ``ExtrapolationStrategy.NONE``.
        """
        x = self._check_query(x)
        if not self._knots.contains(x):
            return self._extrapolate(x)

        k = self._knots.knot_index(x)
        if k >= 0:
            return float(self._knots.y[k])
        i = self._knots.locate(x)
        return evaluate_polynomial(self._coefficients[i], x - self._knots.x[i])

    def __call__(self, x: float) -> float:
        return self.interpolate(x)

    def _extrapolate(self, x: float) -> float:
        below = x < self._knots.x[0]
        strategy = self._extrapolation
        if strategy is ExtrapolationStrategy.NONE:
            lo, hi = self.domain
            raise DomainError(
                x, self.domain,
                f"x = {x} is outside [{lo}, {hi}] and extrapolation is disabled",
            )
        elif strategy is ExtrapolationStrategy.CONSTANT:
            return float(self._knots.y[0] if below else self._knots.y[-1])
        elif strategy is ExtrapolationStrategy.LINEAR:
            if below:
                anchor_x, anchor_y = self._knots.x[0], self._knots.y[0]
                slope = self._coefficients[0, 1]
            else:
                anchor_x, anchor_y = self._knots.x[-1], self._knots.y[-1]
                slope = self._coefficients[-1, 1]
            return float(anchor_y + slope * (x - anchor_x))
        elif strategy is ExtrapolationStrategy.EXTEND:
            i = 0 if below else self.num_segments - 1
            return evaluate_polynomial(self._coefficients[i], x - self._knots.x[i])
        raise AssertionError(f"Unhandled extrapolation strategy {strategy!r}")

    def derivative(self, x: float, order: int = 1) -> float:
        """Evaluate the ``order``-th derivative of the interpolant at ``x``.

        Inside the knot range the derivative of the containing segment's
        polynomial is returned; at an interior knot the right-hand segment
        is used, and at the last knot the last segment.  Outside the range
        the derivative follows the extrapolation policy (zero for
        ``CONSTANT``, the boundary slope for ``LINEAR``, the boundary
        segment's derivative for ``EXTEND``).

        Parameters
        ----------
        x : float
            Query point.
        order : int, optional
            Derivative order, 1, 2 or 3 (default 1).

        Returns
        -------
        float
            Derivative value.

        Raises
        ------
        ValueError
            If ``order`` is not 1, 2 or 3.
        DomainError
            Under the same conditions as :meth:`interpolate`.
        """
        if order not in (1, 2, 3):
            raise ValueError(f"Derivative order {order} not supported (use 1, 2 or 3)")
        x = self._check_query(x)

        if not self._knots.contains(x):
            strategy = self._extrapolation
            if strategy is ExtrapolationStrategy.NONE:
                lo, hi = self.domain
                raise DomainError(
                    x, self.domain,
                    f"x = {x} is outside [{lo}, {hi}] and extrapolation is disabled",
                )
            elif strategy is ExtrapolationStrategy.CONSTANT:
                return 0.0
            elif strategy is ExtrapolationStrategy.LINEAR:
                if order > 1:
                    return 0.0
                i = 0 if x < self._knots.x[0] else self.num_segments - 1
                return float(self._coefficients[i, 1])

        i = self._knots.locate(x)
        return evaluate_polynomial_derivative(
            self._coefficients[i], x - self._knots.x[i], order
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def __reduce__(self):
        # Pickle the knots and policies only; coefficients are rebuilt.
        from pynumerics._version import __version__

        return (
            _rebuild_interpolator,
            (
                np.array(self._knots.x),
                np.array(self._knots.y),
                self._kind.value,
                self._extrapolation.value,
                __version__,
            ),
        )

    def save(self, path: str | os.PathLike) -> None:
        """Pickle the interpolator to ``path``.

        Only the knots, the interpolation type and the extrapolation
        strategy are stored; :meth:`load` recomputes the coefficients.
        """
        with open(os.fspath(path), "wb") as f:
            pickle.dump(self, f, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "Interpolator":
        """Load an interpolator written by :meth:`save`.

        Unpickling runs arbitrary code, so only load trusted files.

        Raises
        ------
        TypeError
            If the file holds something other than an interpolator.

        Warns
        -----
        UserWarning
            If the file was written by another pynumerics release.
        """
        with open(os.fspath(path), "rb") as f:
            obj = pickle.load(f)  # noqa: S301
        if not isinstance(obj, cls):
            raise TypeError(
                f"Expected a {cls.__name__} instance, "
                f"got {type(obj).__name__}"
            )
        return obj

    # ------------------------------------------------------------------
    # Printing
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Interpolator("
            f"kind={self._kind.name}, "
            f"extrapolation={self._extrapolation.name}, "
            f"knots={len(self._knots)})"
        )

    def __str__(self) -> str:
        lo, hi = self.domain
        lines = [
            f"Interpolator ({self._kind.name.lower()})",
            f"  Knots:         {len(self._knots)}",
            f"  Segments:      {self.num_segments}",
            f"  Domain:        [{lo}, {hi}]",
            f"  Extrapolation: {self._extrapolation.name.lower()}",
        ]
        return "\n".join(lines)


def _rebuild_interpolator(x, y, kind, extrapolation, saved_version):
    """Unpickling hook for :class:`Interpolator`."""
    from pynumerics._version import __version__

    if saved_version != __version__:
        warnings.warn(
            f"Interpolator was pickled by pynumerics {saved_version} and is "
            f"being rebuilt by {__version__}; coefficients are recomputed "
            f"from the stored knots.",
            UserWarning,
            stacklevel=2,
        )
    return Interpolator(
        x, y, InterpolationType(kind), ExtrapolationStrategy(extrapolation)
    )
