"""Intersection search between two y(x) functions by scan and bisection."""

from __future__ import annotations

from .config import (
    BISECTION_ROUNDS,
    BISECTION_TOLERANCE,
    INTERSECTION_DEDUP_TOLERANCE,
    TOUCH_TOLERANCE,
)
from .types import YFunction


def find_intersections(
    f1: YFunction,
    f2: YFunction,
    a: float,
    b: float,
    scan_steps: int = 500,
) -> list[float]:
    """Find approximate x-values in [a, b] where ``f1`` and ``f2`` cross.

    ``f1 - f2`` is sampled at ``scan_steps`` evenly spaced points. Each sign
    change is refined by bisection; samples where the difference is already
    below TOUCH_TOLERANCE without a sign change are recorded as tangent points.

    Returns:
        Unsorted x-values; nearly coincident curves may produce duplicates
        (see :func:`dedupe_intersections`)
    """

    def diff(x: float) -> float:
        return f1(x) - f2(x)

    intersections: list[float] = []
    dx = (b - a) / scan_steps
    prev_diff = diff(a)

    for i in range(1, scan_steps + 1):
        x = a + i * dx
        current = diff(x)

        if prev_diff * current < 0:
            lo, hi = x - dx, x
            lo_diff = prev_diff
            for _ in range(BISECTION_ROUNDS):
                mid = (lo + hi) / 2
                mid_diff = diff(mid)
                if abs(mid_diff) < BISECTION_TOLERANCE:
                    lo = hi = mid
                    break
                if mid_diff * lo_diff < 0:
                    hi = mid
                else:
                    lo, lo_diff = mid, mid_diff
            intersections.append((lo + hi) / 2)
        elif abs(current) < TOUCH_TOLERANCE:
            intersections.append(x)

        prev_diff = current

    return intersections


def dedupe_intersections(
    xs: list[float], tolerance: float = INTERSECTION_DEDUP_TOLERANCE
) -> list[float]:
    """Sort x-values and merge those closer than ``tolerance``."""
    unique: list[float] = []
    for x in sorted(xs):
        if not unique or abs(x - unique[-1]) > tolerance:
            unique.append(x)
    return unique
