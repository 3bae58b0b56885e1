"""Volume of revolution by numerical integration.

Rotation about the x-axis family (``y = axis_value``) uses the disk/washer
method, rotation about the y-axis family (``x = axis_value``) the shell
method. Both integrate linear interpolants of the region profiles with
Simpson's 1/3 rule.
"""

from __future__ import annotations

import math
from bisect import bisect_right

from .config import MIN_SIMPSON_STEPS
from .latex import build_disk_formula_latex, build_shell_formula_latex
from .logging_config import get_logger
from .types import (
    AXIS_X,
    AXIS_Y,
    METHOD_DISK,
    METHOD_SHELL,
    ComputedRegion,
    FormulaDescriptor,
    ProfilePoint,
    RevolutionResult,
    YFunction,
)

logger = get_logger("volume")


def create_interpolator(points: list[ProfilePoint]) -> YFunction:
    """Piecewise-linear interpolant through x-sorted profile points.

    Clamped to the end values outside the sampled range; an empty profile
    interpolates to 0.
    """
    xs = [p.x for p in points]
    ys = [p.y for p in points]

    def interpolate(x: float) -> float:
        if not xs:
            return 0.0
        if len(xs) == 1 or x <= xs[0]:
            return ys[0]
        if x >= xs[-1]:
            return ys[-1]
        hi = bisect_right(xs, x)
        lo = hi - 1
        span = xs[hi] - xs[lo] or 1.0
        t = (x - xs[lo]) / span
        return ys[lo] + t * (ys[hi] - ys[lo])

    return interpolate


def simpsons_rule(f: YFunction, a: float, b: float, n: int) -> float:
    """Integrate ``f`` over [a, b] with Simpson's 1/3 rule on ``n`` intervals.

    ``n`` is rounded up to the next even number. Non-finite samples count as
    zero instead of poisoning the sum.
    """
    if n % 2:
        n += 1
    h = (b - a) / n

    total = 0.0
    for i in range(n + 1):
        val = f(a + i * h)
        if not math.isfinite(val):
            continue
        if i == 0 or i == n:
            total += val
        else:
            total += (2 if i % 2 == 0 else 4) * val
    return h / 3 * total


def _washer_integrand(upper: YFunction, lower: YFunction, axis_value: float) -> YFunction:
    def integrand(x: float) -> float:
        y_up, y_lo = upper(x), lower(x)
        d1, d2 = abs(y_up - axis_value), abs(y_lo - axis_value)
        outer, inner = max(d1, d2), min(d1, d2)
        # Axis inside the region: solid disk
        if min(y_up, y_lo) <= axis_value <= max(y_up, y_lo):
            return outer * outer
        return outer * outer - inner * inner

    return integrand


def _shell_integrand(upper: YFunction, lower: YFunction, axis_value: float) -> YFunction:
    def integrand(x: float) -> float:
        return abs(x - axis_value) * abs(upper(x) - lower(x))

    return integrand


def compute_volume(
    region: ComputedRegion, axis: str, axis_value: float = 0.0
) -> RevolutionResult:
    """Volume of the solid obtained by revolving ``region``.

    Args:
        region: Region from :func:`volumetrik_pkg.region.compute_region`
        axis: ``"x"`` to revolve about ``y = axis_value`` (disk/washer),
            ``"y"`` to revolve about ``x = axis_value`` (shell)
        axis_value: Offset of the rotation axis

    Returns:
        RevolutionResult with a non-negative volume and a display formula

    Raises:
        ValueError: If ``axis`` is neither ``"x"`` nor ``"y"``
    """
    if axis == AXIS_X:
        method, factor = METHOD_DISK, math.pi
        latex = build_disk_formula_latex(axis_value, region.x_min, region.x_max)
    elif axis == AXIS_Y:
        method, factor = METHOD_SHELL, 2 * math.pi
        latex = build_shell_formula_latex(axis_value, region.x_min, region.x_max)
    else:
        raise ValueError(f"Unknown rotation axis: {axis!r} (expected 'x' or 'y')")

    n = len(region.upper_profile)
    if n < 2:
        formula = FormulaDescriptor(
            method, axis, axis_value, region.x_min, region.x_max, "V = 0"
        )
        return RevolutionResult(0.0, method, formula, region)

    upper = create_interpolator(region.upper_profile)
    lower = create_interpolator(region.lower_profile)
    if axis == AXIS_X:
        integrand = _washer_integrand(upper, lower, axis_value)
    else:
        integrand = _shell_integrand(upper, lower, axis_value)

    steps = max(n * 2, MIN_SIMPSON_STEPS)
    integral = simpsons_rule(integrand, region.x_min, region.x_max, steps)
    volume = abs(factor * integral)
    logger.debug(
        "%s volume over [%g, %g] with %d steps: %g",
        method,
        region.x_min,
        region.x_max,
        steps,
        volume,
    )

    formula = FormulaDescriptor(
        method=method,
        axis=axis,
        axis_value=axis_value,
        x_min=region.x_min,
        x_max=region.x_max,
        latex=latex,
    )
    return RevolutionResult(volume=volume, method=method, formula=formula, region=region)
