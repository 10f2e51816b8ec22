"""Tests for KnotTable construction and segment lookup."""

import math
import pickle

import numpy as np
import pytest

from pynumerics import (
    ConstructionError,
    ConstructionErrorKind,
    InterpolationType,
    Interpolator,
    KnotTable,
)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    def test_valid_table(self):
        table = KnotTable([0.0, 1.0, 3.0], [1.0, 2.0, 0.5])
        assert len(table) == 3
        assert table.domain == (0.0, 3.0)

    def test_length_mismatch(self):
        """Mismatched x/y lengths should raise LENGTH_MISMATCH."""
        with pytest.raises(ConstructionError, match="same length") as excinfo:
            KnotTable([0.0, 1.0, 2.0], [0.0, 1.0])
        assert excinfo.value.kind is ConstructionErrorKind.LENGTH_MISMATCH

    def test_length_mismatch_checked_before_count(self):
        """A single x against two y values is a mismatch, not too few points."""
        with pytest.raises(ConstructionError) as excinfo:
            KnotTable([0.0], [0.0, 1.0])
        assert excinfo.value.kind is ConstructionErrorKind.LENGTH_MISMATCH

    def test_two_dimensional_input(self):
        with pytest.raises(ConstructionError) as excinfo:
            KnotTable([[0.0, 1.0]], [[0.0, 1.0]])
        assert excinfo.value.kind is ConstructionErrorKind.LENGTH_MISMATCH

    def test_single_point(self):
        with pytest.raises(ConstructionError, match="At least 2") as excinfo:
            KnotTable([1.0], [1.0])
        assert excinfo.value.kind is ConstructionErrorKind.INSUFFICIENT_POINTS

    def test_min_points(self):
        with pytest.raises(ConstructionError) as excinfo:
            KnotTable([0.0, 1.0, 2.0], [0.0, 1.0, 2.0], min_points=4)
        assert excinfo.value.kind is ConstructionErrorKind.INSUFFICIENT_POINTS

    def test_duplicate_knot(self):
        """Ties in x should raise NON_MONOTONIC_KNOTS."""
        with pytest.raises(ConstructionError, match="strictly increasing") as excinfo:
            KnotTable([0.0, 1.0, 1.0, 2.0], [0.0, 1.0, 2.0, 3.0])
        assert excinfo.value.kind is ConstructionErrorKind.NON_MONOTONIC_KNOTS

    def test_decreasing_knots(self):
        with pytest.raises(ConstructionError) as excinfo:
            KnotTable([0.0, 2.0, 1.0], [0.0, 1.0, 2.0])
        assert excinfo.value.kind is ConstructionErrorKind.NON_MONOTONIC_KNOTS

    def test_nan_value(self):
        with pytest.raises(ConstructionError, match="finite") as excinfo:
            KnotTable([0.0, 1.0, 2.0], [0.0, math.nan, 2.0])
        assert excinfo.value.kind is ConstructionErrorKind.NON_FINITE_VALUES

    def test_construction_error_is_value_error(self):
        with pytest.raises(ValueError):
            KnotTable([0.0, 1.0], [0.0])


# ---------------------------------------------------------------------------
# Minimum points per interpolation type
# ---------------------------------------------------------------------------

class TestMinimumPoints:
    @pytest.mark.parametrize("kind, required", [
        (InterpolationType.LINEAR, 2),
        (InterpolationType.CONSTANT_FORWARD, 2),
        (InterpolationType.CONSTANT_BACKWARD, 2),
        (InterpolationType.QUADRATIC, 3),
        (InterpolationType.CUBIC, 4),
    ])
    def test_min_points_property(self, kind, required):
        assert kind.min_points == required

    @pytest.mark.parametrize("kind", list(InterpolationType))
    def test_one_short_is_rejected(self, kind):
        n = kind.min_points - 1
        x = list(range(n))
        with pytest.raises(ConstructionError) as excinfo:
            Interpolator(x, x, kind)
        assert excinfo.value.kind is ConstructionErrorKind.INSUFFICIENT_POINTS

    @pytest.mark.parametrize("kind", list(InterpolationType))
    def test_exact_minimum_is_accepted(self, kind):
        n = kind.min_points
        interp = Interpolator(list(range(n)), [v * v for v in range(n)], kind)
        assert interp.num_segments == n - 1


# ---------------------------------------------------------------------------
# Immutability and lookup
# ---------------------------------------------------------------------------

class TestImmutability:
    def test_arrays_are_read_only(self):
        table = KnotTable([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        with pytest.raises(ValueError):
            table.x[0] = 5.0
        with pytest.raises(ValueError):
            table.y[1] = 5.0

    def test_input_is_copied(self):
        """Mutating the caller's array must not change the table."""
        x = np.array([0.0, 1.0, 2.0])
        y = np.array([0.0, 1.0, 4.0])
        table = KnotTable(x, y)
        x[1] = 10.0
        y[1] = 10.0
        assert table.x[1] == 1.0
        assert table.y[1] == 1.0


class TestLocate:
    @pytest.fixture
    def table(self):
        return KnotTable([0.0, 1.0, 2.0, 4.0], [0.0, 1.0, 0.0, 1.0])

    @pytest.mark.parametrize("value, expected", [
        (0.0, 0),
        (0.5, 0),
        (1.0, 1),
        (1.999, 1),
        (3.0, 2),
        (4.0, 2),   # right boundary clamps to last segment
        (-1.0, 0),  # below range clamps to first segment
        (9.0, 2),   # above range clamps to last segment
    ])
    def test_locate(self, table, value, expected):
        assert table.locate(value) == expected

    def test_knot_index(self, table):
        assert table.knot_index(2.0) == 2
        assert table.knot_index(4.0) == 3
        assert table.knot_index(1.5) == -1
        assert table.knot_index(5.0) == -1

    def test_contains(self, table):
        assert table.contains(0.0)
        assert table.contains(4.0)
        assert not table.contains(-1e-12)
        assert not table.contains(4.000001)

    def test_pickled_table_stays_read_only(self, table):
        restored = pickle.loads(pickle.dumps(table))
        np.testing.assert_array_equal(restored.x, table.x)
        np.testing.assert_array_equal(restored.y, table.y)
        with pytest.raises(ValueError):
            restored.x[0] = -1.0
        with pytest.raises(ValueError):
            restored.y[0] = -1.0
