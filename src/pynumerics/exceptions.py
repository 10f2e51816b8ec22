"""Exception types raised by the interpolation and root-finding engines."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple


class ConstructionErrorKind(Enum):
    """Reason a :class:`~pynumerics.knots.KnotTable` could not be built."""

    LENGTH_MISMATCH = "length_mismatch"
    INSUFFICIENT_POINTS = "insufficient_points"
    NON_FINITE_VALUES = "non_finite_values"
    NON_MONOTONIC_KNOTS = "non_monotonic_knots"


class FailureReason(Enum):
    """Reason a root-finding run ended in the ``FAILED`` state."""

    ZERO_DERIVATIVE = "zero_derivative"
    STALLED_SECANT = "stalled_secant"
    NO_SIGN_CHANGE = "no_sign_change"
    NON_FINITE_VALUE = "non_finite_value"


class ConstructionError(ValueError):
    """Raised when knot data is malformed or insufficient.

    Parameters
    ----------
    kind : ConstructionErrorKind
        Which validation rule was violated.
    message : str
        Human-readable description.
    """

    def __init__(self, kind: ConstructionErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class DomainError(ValueError):
    """Raised when a query cannot be resolved under the extrapolation policy."""

    def __init__(self, value: float, domain: Tuple[float, float], message: str):
        super().__init__(message)
        self.value = value
        self.domain = domain


class BuilderError(ValueError):
    """Raised by ``build()`` when a required solver field is missing or invalid."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class SolverError(RuntimeError):
    """Raised when a root-finding run ends in the ``FAILED`` state.

    Attributes
    ----------
    reason : FailureReason
        Why the run failed.
    iterations : int
        Number of iterations performed before the failure.
    estimate : float or None
        The estimate the solver held when it failed (``None`` if no
        iteration produced one).
    """

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        iterations: int = 0,
        estimate: Optional[float] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.iterations = iterations
        self.estimate = estimate
