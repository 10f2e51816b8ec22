"""pynumerics: piecewise-polynomial interpolation and scalar root finding.

Provides the :class:`Interpolator` class for linear, quadratic, natural
cubic and step interpolation over a fixed set of knots with a configurable
extrapolation policy, and the :class:`RootFinder` class (assembled with
:class:`RootFinderBuilder`) for Newton-Raphson, secant and bisection root
finding with an optional convergence trace.

Example
-------
>>> from pynumerics import Interpolator, InterpolationType
>>> spline = Interpolator([0, 1, 2, 3], [0, 1, 8, 27], InterpolationType.CUBIC)
>>> spline.interpolate(2.0)
8.0
>>> from pynumerics import RootFinderBuilder, RootFindingMethod
>>> finder = (
...     RootFinderBuilder(RootFindingMethod.NEWTON_RAPHSON)
...     .function(lambda x: x**3 - x - 2)
...     .derivative(lambda x: 3 * x**2 - 1)
...     .initial_guess(1.5)
...     .tolerance(1e-10)
...     .max_iterations(50)
...     .build()
... )
>>> round(finder.find_root().root, 7)
1.5213797
"""

from pynumerics._version import __version__
from pynumerics.convergence import ConvergenceLog, IterationRecord
from pynumerics.exceptions import (
    BuilderError,
    ConstructionError,
    ConstructionErrorKind,
    DomainError,
    FailureReason,
    SolverError,
)
from pynumerics.interpolation import (
    ExtrapolationStrategy,
    InterpolationType,
    Interpolator,
    Segment,
)
from pynumerics.knots import KnotTable
from pynumerics.root_finding import (
    RootFinder,
    RootFinderBuilder,
    RootFindingMethod,
    RootOutcome,
    SolverConfiguration,
    SolverState,
)

__all__ = [
    "BuilderError",
    "ConstructionError",
    "ConstructionErrorKind",
    "ConvergenceLog",
    "DomainError",
    "ExtrapolationStrategy",
    "FailureReason",
    "InterpolationType",
    "Interpolator",
    "IterationRecord",
    "KnotTable",
    "RootFinder",
    "RootFinderBuilder",
    "RootFindingMethod",
    "RootOutcome",
    "Segment",
    "SolverConfiguration",
    "SolverError",
    "SolverState",
    "__version__",
]
