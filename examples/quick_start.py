"""Quick start example: interpolate sampled data, then find a root."""

import math

from pynumerics import (
    ExtrapolationStrategy,
    InterpolationType,
    Interpolator,
    RootFinderBuilder,
    RootFindingMethod,
)

# Sample sin(x) on a few uneven knots
x = [0.0, 0.4, 1.1, 1.5, 2.3, 2.9, 3.6, 4.0]
y = [math.sin(v) for v in x]

for kind in (InterpolationType.LINEAR, InterpolationType.QUADRATIC,
             InterpolationType.CUBIC):
    interp = Interpolator(x, y, kind, ExtrapolationStrategy.LINEAR)
    point = 2.0
    approx = interp.interpolate(point)
    print(f"{kind.name:<10} f({point}) = {approx:.8f}  "
          f"error = {abs(approx - math.sin(point)):.2e}")

# Natural cubic spline: curvature vanishes at the end knots
spline = Interpolator(x, y, InterpolationType.CUBIC)
print(f"\nf''(0) = {spline.derivative(0.0, order=2):.2e}, "
      f"f''(4) = {spline.derivative(4.0, order=2):.2e}")

# Root of the spline near pi, found by bisection on the interpolant
finder = (
    RootFinderBuilder(RootFindingMethod.BISECTION)
    .function(spline)
    .bracket(2.5, 3.9)
    .tolerance(1e-10)
    .max_iterations(100)
    .log_convergence()
    .build()
)
outcome = finder.find_root(verbose=True)
print(f"\nSpline root: {outcome.root:.10f}  (pi = {math.pi:.10f})")

# Newton-Raphson with the exact derivative
newton = (
    RootFinderBuilder(RootFindingMethod.NEWTON_RAPHSON)
    .function(lambda v: v ** 3 - v - 2.0)
    .derivative(lambda v: 3.0 * v ** 2 - 1.0)
    .initial_guess(400.0)
    .tolerance(1e-6)
    .max_iterations(100)
    .build()
)
result = newton.find_root()
print(f"x^3 - x - 2 = 0 at x = {result.root:.7f} ({result.iterations} iterations)")
