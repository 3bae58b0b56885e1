"""Best-effort x-bounds from vertical lines and pairwise curve intersections."""

from __future__ import annotations

import math

from .config import (
    AUTO_DETECT_SCAN_STEPS,
    AUTO_DETECT_SEARCH_MAX,
    AUTO_DETECT_SEARCH_MIN,
    FALLBACK_X_MAX,
    FALLBACK_X_MIN,
)
from .curves import compile_curve
from .diagnostics import DiagnosticContext
from .intersections import find_intersections
from .inverse import InverseOptions
from .logging_config import get_logger
from .region import as_y_function
from .types import X_CONST, Bounds, CompileError, Curve

logger = get_logger("bounds")


def auto_detect_bounds(
    curves: list[Curve],
    search_range: tuple[float, float] = (AUTO_DETECT_SEARCH_MIN, AUTO_DETECT_SEARCH_MAX),
    inverse_options: InverseOptions | None = None,
    diagnostics: DiagnosticContext | None = None,
) -> Bounds:
    """Propose integration bounds for ``curves``.

    Collects every ``x = c`` value and every pairwise intersection of the
    remaining curves inside ``search_range`` and returns their extremes,
    rounded to four decimals. With fewer than two such values the fixed
    fallback range is returned instead of failing.
    """
    compiled = []
    for curve in curves:
        try:
            compiled.append(compile_curve(curve))
        except CompileError as exc:
            logger.debug("Skipping curve %s in auto_detect_bounds: %s", curve.id, exc)

    xs = [
        cc.const_value
        for cc in compiled
        if cc.curve.kind == X_CONST and math.isfinite(cc.const_value)
    ]
    functions = [
        as_y_function(cc, inverse_options, diagnostics)
        for cc in compiled
        if cc.curve.kind != X_CONST
    ]

    lo, hi = search_range
    for i, f1 in enumerate(functions):
        for f2 in functions[i + 1 :]:
            xs.extend(find_intersections(f1, f2, lo, hi, AUTO_DETECT_SCAN_STEPS))

    if len(xs) < 2:
        logger.debug("Auto-detect found %d x-values; using fallback bounds", len(xs))
        return Bounds(FALLBACK_X_MIN, FALLBACK_X_MAX)

    return Bounds(round(min(xs), 4), round(max(xs), 4))
