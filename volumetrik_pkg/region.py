"""Region builder: upper/lower boundary profiles of the area between curves.

The general builder walks x across the bounds and, at every step, considers
each pair of vertically adjacent curves as a candidate boundary. Curve
crossings keep changing which pair is innermost, so instead of taking the
global max/min (which would merge disjoint sub-regions) it tracks the
identity of the active pair:

1. keep the previous pair while it is still adjacent;
2. otherwise prefer a pair sharing one curve with it whose height is closest
   to the previous height;
3. otherwise take the closest-height pair overall.

The first valid step takes the tallest pair. Three or more curves crossing
at the same x have no principled tie-break; the first candidate in sorted
order wins.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import REGION_RESOLUTION
from .curves import compile_curve, eval_curve
from .diagnostics import DiagnosticContext
from .inverse import InverseOptions, try_create_inverse_function
from .logging_config import get_logger
from .types import (
    X_CONST,
    X_OF_Y,
    CompiledCurve,
    ComputedRegion,
    Curve,
    ProfilePoint,
    RegionError,
    YFunction,
)

logger = get_logger("region")

ZERO_SNAP = 1e-10


@dataclass
class _Candidate:
    top: int
    bottom: int
    top_y: float
    bottom_y: float

    @property
    def height(self) -> float:
        return self.top_y - self.bottom_y

    @property
    def pair(self) -> tuple[int, int]:
        return self.top, self.bottom


def as_y_function(
    cc: CompiledCurve,
    inverse_options: InverseOptions | None = None,
    diagnostics: DiagnosticContext | None = None,
) -> YFunction:
    """Express a non-vertical curve as a function of x."""
    if cc.curve.kind == X_OF_Y:
        return try_create_inverse_function(
            cc, inverse_options, diagnostics=diagnostics
        )
    return lambda x: eval_curve(cc, x)


def _closest_height(candidates: list[_Candidate], prev_height: float) -> _Candidate:
    return min(candidates, key=lambda c: abs(c.height - prev_height))


def _select_pair(
    candidates: list[_Candidate],
    active: tuple[int, int] | None,
    prev_height: float,
) -> _Candidate:
    if active is None:
        return max(candidates, key=lambda c: c.height)

    for candidate in candidates:
        if candidate.pair == active:
            return candidate

    top, bottom = active
    one_sided = [c for c in candidates if c.top == top or c.bottom == bottom]
    if one_sided:
        return _closest_height(one_sided, prev_height)
    return _closest_height(candidates, prev_height)


def compute_region(
    curves: list[Curve],
    x_min: float,
    x_max: float,
    resolution: int = REGION_RESOLUTION,
    diagnostics: DiagnosticContext | None = None,
    inverse_options: InverseOptions | None = None,
) -> ComputedRegion:
    """Compute the region enclosed by ``curves`` between ``x_min`` and ``x_max``.

    Two or more vertical lines (``x = c``) clip the bounds to their outermost
    values; a single vertical line cannot close a region and is ignored.

    Args:
        curves: At least two curves
        x_min: Requested lower bound
        x_max: Requested upper bound
        resolution: Number of steps across the effective bounds
        diagnostics: Context receiving deduplicated warnings for curves
            that cannot be inverted
        inverse_options: Sampling window for ``x = g(y)`` curves

    Returns:
        ComputedRegion with index-aligned upper and lower profiles

    Raises:
        RegionError: Fewer than two curves, empty bounds after clipping, or
            fewer than two valid sample points
        CompileError: A curve expression cannot be compiled
    """
    if len(curves) < 2:
        raise RegionError(
            "At least 2 curves are needed to define a region.", "TOO_FEW_CURVES"
        )

    compiled = [compile_curve(c) for c in curves]

    vertical = sorted(cc.const_value for cc in compiled if cc.curve.kind == X_CONST)
    functions = [
        as_y_function(cc, inverse_options, diagnostics)
        for cc in compiled
        if cc.curve.kind != X_CONST
    ]

    effective_min, effective_max = x_min, x_max
    if len(vertical) >= 2:
        effective_min = max(effective_min, vertical[0])
        effective_max = min(effective_max, vertical[-1])

    if not effective_min < effective_max:
        raise RegionError(
            "Invalid bounds: x_min >= x_max after processing vertical lines.",
            "INVALID_BOUNDS",
        )

    upper: list[ProfilePoint] = []
    lower: list[ProfilePoint] = []
    dx = (effective_max - effective_min) / resolution
    active: tuple[int, int] | None = None
    prev_height = 0.0

    for i in range(resolution + 1):
        x = effective_min + i * dx
        values = []
        for idx, fn in enumerate(functions):
            y = fn(x)
            if math.isfinite(y):
                values.append((y, idx))
        if len(values) < 2:
            continue
        values.sort(key=lambda v: v[0])

        candidates = [
            _Candidate(top=hi[1], bottom=lo[1], top_y=hi[0], bottom_y=lo[0])
            for lo, hi in zip(values, values[1:])
        ]
        best = _select_pair(candidates, active, prev_height)

        upper.append(ProfilePoint(x, best.top_y))
        lower.append(ProfilePoint(x, best.bottom_y))
        if best.pair != active and active is not None:
            logger.debug("Boundary pair %s -> %s at x=%g", active, best.pair, x)
        active = best.pair
        prev_height = best.height

    if len(upper) < 2:
        raise RegionError("No valid points found for the bounded region.")

    return ComputedRegion(
        upper_profile=upper,
        lower_profile=lower,
        x_min=effective_min,
        x_max=effective_max,
    )


def compute_region_two_curves(
    f1: YFunction,
    f2: YFunction,
    x_min: float,
    x_max: float,
    resolution: int = REGION_RESOLUTION,
) -> ComputedRegion:
    """Region between exactly two y(x) functions.

    End points that fall just outside a curve's domain (``sqrt(x-1)`` at
    ``x = 1`` after rounding) are recovered by sampling just inside, and values
    within ZERO_SNAP of zero are snapped to zero.
    """
    span = max(x_max - x_min, 1.0)
    nudge = max(1e-12, span * 1e-12)

    def snap(v: float) -> float:
        return 0.0 if math.isfinite(v) and abs(v) < ZERO_SNAP else v

    def value_near(fn: YFunction, x: float, side: str | None) -> float:
        y = fn(x)
        if math.isfinite(y):
            return snap(y)
        if side == "right":
            offsets = [x + nudge, x + 10 * nudge]
        elif side == "left":
            offsets = [x - nudge, x - 10 * nudge]
        else:
            offsets = [x + nudge, x - nudge, x + 10 * nudge, x - 10 * nudge]
        for px in offsets:
            y = fn(px)
            if math.isfinite(y):
                return snap(y)
        return math.nan

    upper: list[ProfilePoint] = []
    lower: list[ProfilePoint] = []

    def push(x: float, side: str | None) -> None:
        y1, y2 = value_near(f1, x, side), value_near(f2, x, side)
        if not (math.isfinite(y1) and math.isfinite(y2)):
            return
        upper.append(ProfilePoint(x, max(y1, y2)))
        lower.append(ProfilePoint(x, min(y1, y2)))

    dx = (x_max - x_min) / resolution
    push(x_min, "right")
    for i in range(1, resolution):
        push(x_min + i * dx, None)
    push(x_max, "left")

    if len(upper) < 2:
        raise RegionError("No valid points found for the bounded region.")
    return ComputedRegion(upper, lower, x_min, x_max)


def compute_region_envelope(
    functions: list[YFunction],
    x_min: float,
    x_max: float,
    resolution: int = REGION_RESOLUTION,
) -> ComputedRegion:
    """Region between the global max and min of N y(x) functions.

    Unlike :func:`compute_region` this merges disjoint sub-regions; it suits
    inputs known to enclose a single region.
    """
    upper: list[ProfilePoint] = []
    lower: list[ProfilePoint] = []
    dx = (x_max - x_min) / resolution

    for i in range(resolution + 1):
        x = x_min + i * dx
        values = [v for v in (fn(x) for fn in functions) if math.isfinite(v)]
        if len(values) < 2:
            continue
        upper.append(ProfilePoint(x, max(values)))
        lower.append(ProfilePoint(x, min(values)))

    if len(upper) < 2:
        raise RegionError("No valid points found for the bounded region.")
    return ComputedRegion(upper, lower, x_min, x_max)
