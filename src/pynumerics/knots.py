"""Validated, immutable storage of interpolation knots."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from pynumerics.exceptions import ConstructionError, ConstructionErrorKind


class KnotTable:
    """Ordered ``(x, y)`` knot pairs with strictly increasing ``x``.

    Both coordinate arrays are stored as read-only ``float64`` copies, so a
    table can be shared freely once constructed.

    Parameters
    ----------
    x : sequence of float
        Knot abscissae.  Must be strictly increasing.
    y : sequence of float
        Knot ordinates, one per abscissa.
    min_points : int, optional
        Minimum number of knots required (default 2).

    Raises
    ------
    ConstructionError
        If the lengths differ, there are fewer than ``min_points`` knots,
        any value is NaN/Inf, or ``x`` is not strictly increasing.

    Examples
    --------
    >>> table = KnotTable([0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
    >>> len(table)
    3
    >>> table.locate(1.5)
    1
    """

    def __init__(self, x: Sequence[float], y: Sequence[float], min_points: int = 2):
        x_arr = np.array(x, dtype=float)
        y_arr = np.array(y, dtype=float)

        if x_arr.ndim != 1 or y_arr.ndim != 1:
            raise ConstructionError(
                ConstructionErrorKind.LENGTH_MISMATCH,
                f"x and y must be one-dimensional, got shapes "
                f"{x_arr.shape} and {y_arr.shape}",
            )
        if len(x_arr) != len(y_arr):
            raise ConstructionError(
                ConstructionErrorKind.LENGTH_MISMATCH,
                f"x and y must have the same length, got {len(x_arr)} "
                f"and {len(y_arr)}",
            )
        if len(x_arr) < max(min_points, 2):
            raise ConstructionError(
                ConstructionErrorKind.INSUFFICIENT_POINTS,
                f"At least {max(min_points, 2)} knots are required, "
                f"got {len(x_arr)}",
            )
        if not (np.all(np.isfinite(x_arr)) and np.all(np.isfinite(y_arr))):
            raise ConstructionError(
                ConstructionErrorKind.NON_FINITE_VALUES,
                "Knot values must be finite (no NaN/Inf)",
            )
        steps = np.diff(x_arr)
        if np.any(steps <= 0):
            bad = int(np.argmax(steps <= 0))
            raise ConstructionError(
                ConstructionErrorKind.NON_MONOTONIC_KNOTS,
                f"x must be strictly increasing; x[{bad}]={x_arr[bad]} "
                f"is followed by x[{bad + 1}]={x_arr[bad + 1]}",
            )

        x_arr.flags.writeable = False
        y_arr.flags.writeable = False
        self._x = x_arr
        self._y = y_arr

    @property
    def x(self) -> np.ndarray:
        """Knot abscissae (read-only)."""
        return self._x

    @property
    def y(self) -> np.ndarray:
        """Knot ordinates (read-only)."""
        return self._y

    @property
    def domain(self) -> Tuple[float, float]:
        """``(x_0, x_{n-1})``, the interpolation range."""
        return float(self._x[0]), float(self._x[-1])

    def __len__(self) -> int:
        return len(self._x)

    def contains(self, value: float) -> bool:
        """Return True if ``value`` lies inside the closed knot range."""
        return self._x[0] <= value <= self._x[-1]

    def locate(self, value: float) -> int:
        """Index of the segment containing ``value``.

        Returns the last ``i`` with ``x_i <= value``, clamped to
        ``[0, n - 2]`` so that the right boundary and points beyond either
        end map onto the boundary segments.
        """
        idx = int(np.searchsorted(self._x, value, side="right")) - 1
        return min(max(idx, 0), len(self._x) - 2)

    def knot_index(self, value: float) -> int:
        """Index ``k`` with ``x_k == value``, or -1 if ``value`` is not a knot."""
        idx = int(np.searchsorted(self._x, value, side="left"))
        if idx < len(self._x) and self._x[idx] == value:
            return idx
        return -1

    def __getstate__(self) -> dict:
        return {"x": np.array(self._x), "y": np.array(self._y)}

    def __setstate__(self, state: dict) -> None:
        x_arr = np.array(state["x"], dtype=float)
        y_arr = np.array(state["y"], dtype=float)
        x_arr.flags.writeable = False
        y_arr.flags.writeable = False
        self._x = x_arr
        self._y = y_arr

    def __repr__(self) -> str:
        lo, hi = self.domain
        return f"KnotTable(n={len(self)}, domain=[{lo}, {hi}])"
