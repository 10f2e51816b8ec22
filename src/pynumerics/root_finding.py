"""Iterative root finding for scalar functions.

A :class:`RootFinder` is assembled with :class:`RootFinderBuilder`, which
collects a :class:`SolverConfiguration` and validates it once in
:meth:`RootFinderBuilder.build`.  :meth:`RootFinder.find_root` then drives
one of three schemes to a terminal state:

``INITIALIZED -> ITERATING -> {CONVERGED | MAX_ITERATIONS_EXCEEDED | FAILED}``

Reaching the iteration cap is reported through the returned
:class:`RootOutcome`, not raised, since the last estimate is often usable.
Failures raise :class:`~pynumerics.exceptions.SolverError`.

References
----------
- Burden & Faires (2011), "Numerical Analysis", 9th ed., Sections 2.1-2.3:
  Bisection, Newton's method, Secant method.
"""

from __future__ import annotations

import math
import numbers
import warnings
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from pynumerics.convergence import ConvergenceLog, IterationRecord
from pynumerics.exceptions import BuilderError, FailureReason, SolverError

# Derivatives (Newton) below this magnitude are treated as zero.
_DERIVATIVE_FLOOR = float(np.finfo(float).eps)
_TINY = float(np.finfo(float).tiny)


class RootFindingMethod(Enum):
    """Iterative scheme used by a :class:`RootFinder`."""

    NEWTON_RAPHSON = "newton_raphson"
    SECANT = "secant"
    BISECTION = "bisection"

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]


_METHOD_LABELS = {
    RootFindingMethod.NEWTON_RAPHSON: "Newton-Raphson",
    RootFindingMethod.SECANT: "Secant",
    RootFindingMethod.BISECTION: "Bisection",
}


class SolverState(Enum):
    """Lifecycle state of a :class:`RootFinder`."""

    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SolverState.CONVERGED,
            SolverState.MAX_ITERATIONS_EXCEEDED,
            SolverState.FAILED,
        )


@dataclass(frozen=True)
class RootOutcome:
    """Result of a completed root-finding run.

    Attributes
    ----------
    status : SolverState
        ``CONVERGED`` or ``MAX_ITERATIONS_EXCEEDED``.
    root : float
        Converged root, or the last estimate when the cap was reached.
    iterations : int
        Number of iterations performed.
    function_value : float
        ``f(root)``.
    """

    status: SolverState
    root: float
    iterations: int
    function_value: float

    @property
    def converged(self) -> bool:
        return self.status is SolverState.CONVERGED


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _finite_pair(values, field: str) -> Tuple[float, float]:
    try:
        first, second = values
    except (TypeError, ValueError):
        raise BuilderError(field, f"{field} must be a pair of numbers, got {values!r}") from None
    if not (_is_real(first) and _is_real(second)):
        raise BuilderError(field, f"{field} must be a pair of numbers, got {values!r}")
    first, second = float(first), float(second)
    if not (math.isfinite(first) and math.isfinite(second)):
        raise BuilderError(field, f"{field} must be finite, got ({first}, {second})")
    if first == second:
        raise BuilderError(field, f"{field} must hold two distinct values, got ({first}, {second})")
    return first, second


@dataclass
class SolverConfiguration:
    """Settings collected by :class:`RootFinderBuilder`.

    Only the fields required by ``method`` need to be set; they are checked
    together by :meth:`validate`.

    Attributes
    ----------
    method : RootFindingMethod
        Iterative scheme.
    function : callable
        Target ``f(x) -> float``.
    derivative : callable, optional
        ``f'(x) -> float``; required for Newton-Raphson.
    bracket : (float, float), optional
        Interval with a sign change; required for bisection.
    initial_guess : float, optional
        Starting point; required for Newton-Raphson.
    initial_guesses : (float, float), optional
        Two starting points; required for the secant method.
    tolerance : float
        Positive convergence tolerance.
    max_iterations : int
        Positive iteration cap.
    log_convergence : bool
        Record an :class:`~pynumerics.convergence.IterationRecord` per
        iteration (default False).
    """

    method: RootFindingMethod
    function: Optional[Callable[[float], float]] = None
    derivative: Optional[Callable[[float], float]] = None
    bracket: Optional[Tuple[float, float]] = None
    initial_guess: Optional[float] = None
    initial_guesses: Optional[Tuple[float, float]] = None
    tolerance: Optional[float] = None
    max_iterations: Optional[int] = None
    log_convergence: bool = False

    def validate(self) -> "SolverConfiguration":
        """Check the configuration and return a normalized copy.

        Returns
        -------
        SolverConfiguration
            Copy with numeric fields converted to float and the bracket
            ordered as ``(lo, hi)``.

        Raises
        ------
        BuilderError
            If a field required by ``method`` is missing or invalid.
        """
        if not isinstance(self.method, RootFindingMethod):
            raise BuilderError(
                "method",
                f"method must be a RootFindingMethod, got {self.method!r}",
            )
        if self.function is None:
            raise BuilderError("function", "Function must be specified")
        if not callable(self.function):
            raise BuilderError("function", "Function must be callable")

        if self.tolerance is None:
            raise BuilderError("tolerance", "Tolerance must be specified")
        if not _is_real(self.tolerance) or not (
            math.isfinite(self.tolerance) and self.tolerance > 0
        ):
            raise BuilderError(
                "tolerance",
                f"Tolerance must be a positive finite number, got {self.tolerance!r}",
            )

        if self.max_iterations is None:
            raise BuilderError("max_iterations", "Max iterations must be specified")
        if (
            not isinstance(self.max_iterations, numbers.Integral)
            or isinstance(self.max_iterations, bool)
            or self.max_iterations < 1
        ):
            raise BuilderError(
                "max_iterations",
                f"Max iterations must be a positive integer, got {self.max_iterations!r}",
            )

        changes = {
            "tolerance": float(self.tolerance),
            "max_iterations": int(self.max_iterations),
            "log_convergence": bool(self.log_convergence),
        }

        if self.method is RootFindingMethod.NEWTON_RAPHSON:
            if self.derivative is None:
                raise BuilderError(
                    "derivative",
                    "Derivative must be specified for the Newton-Raphson method",
                )
            if not callable(self.derivative):
                raise BuilderError("derivative", "Derivative must be callable")
            if self.initial_guess is None:
                raise BuilderError(
                    "initial_guess",
                    "Initial guess must be specified for the Newton-Raphson method",
                )
            if not _is_real(self.initial_guess) or not math.isfinite(self.initial_guess):
                raise BuilderError(
                    "initial_guess",
                    f"Initial guess must be a finite number, got {self.initial_guess!r}",
                )
            changes["initial_guess"] = float(self.initial_guess)
        elif self.method is RootFindingMethod.SECANT:
            if self.initial_guesses is None:
                raise BuilderError(
                    "initial_guesses",
                    "Two initial guesses must be specified for the secant method",
                )
            changes["initial_guesses"] = _finite_pair(self.initial_guesses, "initial_guesses")
        elif self.method is RootFindingMethod.BISECTION:
            if self.bracket is None:
                raise BuilderError(
                    "bracket",
                    "Bracket must be specified for the bisection method",
                )
            lo, hi = _finite_pair(self.bracket, "bracket")
            changes["bracket"] = (min(lo, hi), max(lo, hi))

        return replace(self, **changes)


class RootFinderBuilder:
    """Fluent assembly of a :class:`RootFinder`.

    Parameters
    ----------
    method : RootFindingMethod
        Iterative scheme to configure.

    Examples
    --------
    >>> finder = (
    ...     RootFinderBuilder(RootFindingMethod.BISECTION)
    ...     .function(lambda x: x * x - 2.0)
    ...     .bracket(0.0, 2.0)
    ...     .tolerance(1e-10)
    ...     .max_iterations(100)
    ...     .build()
    ... )
    >>> round(finder.find_root().root, 8)
    1.41421356
    """

    def __init__(self, method: RootFindingMethod):
        self._config = SolverConfiguration(method=method)

    def function(self, function: Callable[[float], float]) -> "RootFinderBuilder":
        self._config.function = function
        return self

    def derivative(self, derivative: Callable[[float], float]) -> "RootFinderBuilder":
        self._config.derivative = derivative
        return self

    def bracket(self, a: float, b: float) -> "RootFinderBuilder":
        self._config.bracket = (a, b)
        return self

    def initial_guess(self, guess: float) -> "RootFinderBuilder":
        self._config.initial_guess = guess
        return self

    def initial_guesses(self, x0: float, x1: float) -> "RootFinderBuilder":
        self._config.initial_guesses = (x0, x1)
        return self

    def tolerance(self, tol: float) -> "RootFinderBuilder":
        self._config.tolerance = tol
        return self

    def max_iterations(self, max_iterations: int) -> "RootFinderBuilder":
        self._config.max_iterations = max_iterations
        return self

    def log_convergence(self, enabled: bool = True) -> "RootFinderBuilder":
        self._config.log_convergence = enabled
        return self

    @property
    def config(self) -> SolverConfiguration:
        """Copy of the configuration collected so far (unvalidated)."""
        return replace(self._config)

    def build(self) -> "RootFinder":
        """Validate the configuration and create the root finder.

        Raises
        ------
        BuilderError
            If a field required by the selected method is missing or invalid.
        """
        return RootFinder(self._config)


class RootFinder:
    """Single-use iterative root finder.

    Construct through :class:`RootFinderBuilder`, or directly from a
    :class:`SolverConfiguration`.  An instance runs once: after
    :meth:`find_root` reaches a terminal state, later calls return the same
    outcome (or raise the same error) without iterating again.  An instance
    must not be driven from several threads at once.

    Parameters
    ----------
    config : SolverConfiguration
        Solver settings; validated on construction.

    Raises
    ------
    BuilderError
        If the configuration is incomplete.
    """

    def __init__(self, config: SolverConfiguration):
        self._config = config.validate()
        self._state = SolverState.INITIALIZED
        self._iterations = 0
        self._log: Optional[ConvergenceLog] = (
            ConvergenceLog() if self._config.log_convergence else None
        )
        self._outcome: Optional[RootOutcome] = None
        self._error: Optional[SolverError] = None

    @property
    def config(self) -> SolverConfiguration:
        return self._config

    @property
    def method(self) -> RootFindingMethod:
        return self._config.method

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def iterations(self) -> int:
        """Iterations performed so far."""
        return self._iterations

    def convergence_log(self) -> Optional[ConvergenceLog]:
        """Return a copy of the iteration trace, or None if logging is disabled.

        The copy is detached from the solver; changing it leaves the
        solver's own trace untouched.
        """
        return None if self._log is None else self._log.copy()

    def find_root(self, verbose: bool = False) -> RootOutcome:
        """Run the configured scheme to a terminal state.

        Parameters
        ----------
        verbose : bool, optional
            If True, print the outcome and, when logging is enabled, the
            convergence table.  Default is False.

        Returns
        -------
        RootOutcome
            ``CONVERGED`` or ``MAX_ITERATIONS_EXCEEDED`` outcome.

        Raises
        ------
        SolverError
            If the run fails (zero derivative, stalled secant, no sign
            change across the bracket, or a non-finite value).

        Warns
        -----
        RuntimeWarning
            If the iteration cap is reached before convergence.
        """
        if self._outcome is not None:
            return self._outcome
        if self._error is not None:
            raise self._error
        if self._state is SolverState.ITERATING:
            raise RuntimeError("find_root() is already running on this instance")

        runners = {
            RootFindingMethod.NEWTON_RAPHSON: self._newton_raphson,
            RootFindingMethod.SECANT: self._secant,
            RootFindingMethod.BISECTION: self._bisection,
        }
        self._state = SolverState.ITERATING
        try:
            outcome = runners[self.method]()
        except SolverError as exc:
            self._state = SolverState.FAILED
            self._error = exc
            if verbose:
                print(f"{self.method.label} failed after {exc.iterations} iterations: {exc}")
                self._display_log()
            raise
        except Exception:
            # User function raised: leave the instance re-runnable.
            self._state = SolverState.INITIALIZED
            self._iterations = 0
            if self._log is not None:
                self._log.clear()
            raise

        self._outcome = outcome
        self._state = outcome.status
        if outcome.status is SolverState.MAX_ITERATIONS_EXCEEDED:
            warnings.warn(
                f"{self.method.label} did not converge within "
                f"{self._config.max_iterations} iterations; last estimate "
                f"{outcome.root!r}",
                RuntimeWarning,
                stacklevel=2,
            )
        if verbose:
            verb = "converged to" if outcome.converged else "stopped at"
            print(
                f"{self.method.label} {verb} {outcome.root:.15g} "
                f"in {outcome.iterations} iterations "
                f"(f = {outcome.function_value:.3e})"
            )
            self._display_log()
        return outcome

    # ------------------------------------------------------------------
    # Shared iteration helpers
    # ------------------------------------------------------------------

    def _display_log(self) -> None:
        if self._log is not None:
            self._log.display()

    def _record(self, iteration: int, estimate: float, fx: float, step: float) -> None:
        self._iterations = iteration
        if self._log is not None:
            self._log.append(IterationRecord(iteration, estimate, fx, step))

    def _failure(self, reason: FailureReason, message: str,
                 estimate: Optional[float]) -> SolverError:
        return SolverError(reason, message, iterations=self._iterations, estimate=estimate)

    def _evaluate(self, x: float) -> float:
        return float(self._config.function(x))

    def _non_finite(self, what: str, x: float, value: float) -> SolverError:
        return self._failure(
            FailureReason.NON_FINITE_VALUE,
            f"{what} evaluated to {value} at x = {x!r}",
            x,
        )

    def _conclude(self, status: SolverState, root: float,
                  fx: Optional[float] = None) -> RootOutcome:
        if fx is None:
            fx = self._evaluate(root)
            if not math.isfinite(fx):
                raise self._non_finite("f(x)", root, fx)
        return RootOutcome(status, root, self._iterations, fx)

    # ------------------------------------------------------------------
    # Schemes
    # ------------------------------------------------------------------

    def _newton_raphson(self) -> RootOutcome:
        cfg = self._config
        x = cfg.initial_guess
        for it in range(1, cfg.max_iterations + 1):
            fx = self._evaluate(x)
            if not math.isfinite(fx):
                self._record(it, x, fx, math.nan)
                raise self._non_finite("f(x)", x, fx)
            if fx == 0.0:
                self._record(it, x, fx, 0.0)
                return self._conclude(SolverState.CONVERGED, x, fx)

            dfx = float(cfg.derivative(x))
            if not math.isfinite(dfx):
                self._record(it, x, fx, math.nan)
                raise self._non_finite("f'(x)", x, dfx)
            if abs(dfx) < _DERIVATIVE_FLOOR:
                self._record(it, x, fx, math.nan)
                raise self._failure(
                    FailureReason.ZERO_DERIVATIVE,
                    f"Derivative f'({x!r}) = {dfx} is too close to zero",
                    x,
                )

            x_next = x - fx / dfx
            self._record(it, x, fx, x_next - x)
            if not math.isfinite(x_next):
                raise self._non_finite("Newton step", x, x_next)
            if abs(x_next - x) < cfg.tolerance:
                return self._conclude(SolverState.CONVERGED, x_next)
            x = x_next
        return self._conclude(SolverState.MAX_ITERATIONS_EXCEEDED, x)

    def _secant(self) -> RootOutcome:
        cfg = self._config
        x_prev, x = cfg.initial_guesses
        f_prev = self._evaluate(x_prev)
        if not math.isfinite(f_prev):
            raise self._non_finite("f(x)", x_prev, f_prev)
        if f_prev == 0.0:
            return self._conclude(SolverState.CONVERGED, x_prev, f_prev)

        for it in range(1, cfg.max_iterations + 1):
            fx = self._evaluate(x)
            if not math.isfinite(fx):
                self._record(it, x, fx, math.nan)
                raise self._non_finite("f(x)", x, fx)
            if fx == 0.0:
                self._record(it, x, fx, 0.0)
                return self._conclude(SolverState.CONVERGED, x, fx)

            denom = fx - f_prev
            if abs(denom) <= max(_DERIVATIVE_FLOOR * max(abs(fx), abs(f_prev)), _TINY):
                self._record(it, x, fx, math.nan)
                raise self._failure(
                    FailureReason.STALLED_SECANT,
                    f"Secant denominator f({x!r}) - f({x_prev!r}) = {denom} "
                    f"is too close to zero",
                    x,
                )

            x_next = x - fx * (x - x_prev) / denom
            self._record(it, x, fx, x_next - x)
            if not math.isfinite(x_next):
                raise self._non_finite("Secant step", x, x_next)
            if abs(x_next - x) < cfg.tolerance:
                return self._conclude(SolverState.CONVERGED, x_next)
            x_prev, f_prev, x = x, fx, x_next
        return self._conclude(SolverState.MAX_ITERATIONS_EXCEEDED, x)

    def _bisection(self) -> RootOutcome:
        cfg = self._config
        a, b = cfg.bracket
        fa = self._evaluate(a)
        if not math.isfinite(fa):
            raise self._non_finite("f(x)", a, fa)
        fb = self._evaluate(b)
        if not math.isfinite(fb):
            raise self._non_finite("f(x)", b, fb)
        if fa == 0.0:
            return self._conclude(SolverState.CONVERGED, a, fa)
        if fb == 0.0:
            return self._conclude(SolverState.CONVERGED, b, fb)
        if (fa > 0.0) == (fb > 0.0):
            raise self._failure(
                FailureReason.NO_SIGN_CHANGE,
                f"f(a) and f(b) must have opposite signs, got "
                f"f({a!r}) = {fa} and f({b!r}) = {fb}",
                None,
            )
        if b - a < cfg.tolerance:
            return self._conclude(SolverState.CONVERGED, a + (b - a) / 2.0)

        for it in range(1, cfg.max_iterations + 1):
            half = (b - a) / 2.0
            mid = a + half
            fm = self._evaluate(mid)
            if not math.isfinite(fm):
                self._record(it, mid, fm, math.nan)
                raise self._non_finite("f(x)", mid, fm)
            self._record(it, mid, fm, half)
            if fm == 0.0:
                return self._conclude(SolverState.CONVERGED, mid, fm)

            if (fm > 0.0) == (fa > 0.0):
                a, fa = mid, fm
            else:
                b = mid
            if b - a < cfg.tolerance:
                return self._conclude(SolverState.CONVERGED, a + (b - a) / 2.0)
        return self._conclude(SolverState.MAX_ITERATIONS_EXCEEDED, a + (b - a) / 2.0)

    def __repr__(self) -> str:
        return (
            f"RootFinder("
            f"method={self.method.name}, "
            f"state={self._state.name}, "
            f"iterations={self._iterations})"
        )
