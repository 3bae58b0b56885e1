"""Numeric inverses for curves given as x = g(y).

The region and bound engines need every curve as a function of x. Curves of
kind ``x_of_y`` are sampled over a y-window, sorted by x, and inverted by
binary search plus linear interpolation.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from dataclasses import dataclass
from typing import Callable

from .config import INVERSE_SAMPLE_COUNT, INVERSE_Y_MAX, INVERSE_Y_MIN
from .curves import eval_curve
from .diagnostics import DiagnosticContext
from .logging_config import get_logger
from .types import CompiledCurve, InverseUnavailableError, YFunction

logger = get_logger("inverse")


@dataclass
class InverseOptions:
    """Sampling window for :func:`create_inverse_function`."""

    y_min: float = INVERSE_Y_MIN
    y_max: float = INVERSE_Y_MAX
    sample_count: int = INVERSE_SAMPLE_COUNT


def create_inverse_function(
    cc: CompiledCurve, options: InverseOptions | None = None
) -> YFunction:
    """Build an approximate inverse ``x -> y`` for an ``x = g(y)`` curve.

    Targets outside the sampled x-range clamp to the nearest end sample.

    Raises:
        InverseUnavailableError: If no finite sample exists in the y-window;
            widen ``options.y_min``/``options.y_max`` for such curves
    """
    options = options or InverseOptions()
    dy = (options.y_max - options.y_min) / options.sample_count

    samples = []
    for i in range(options.sample_count + 1):
        y = options.y_min + i * dy
        x = eval_curve(cc, y)
        if math.isfinite(x):
            samples.append((x, y))

    if not samples:
        raise InverseUnavailableError(
            f"No finite samples found in y-range [{options.y_min}, {options.y_max}] "
            f'for "{cc.curve.expression}". Consider widening the sampling window.'
        )

    samples.sort(key=lambda s: s[0])
    xs = [s[0] for s in samples]
    ys = [s[1] for s in samples]

    def inverse(target_x: float) -> float:
        if target_x <= xs[0]:
            return ys[0]
        if target_x >= xs[-1]:
            return ys[-1]
        hi = bisect_left(xs, target_x)
        if xs[hi] == target_x:
            return ys[hi]
        lo = hi - 1
        x0, x1 = xs[lo], xs[hi]
        if x1 == x0:
            return ys[lo]
        t = (target_x - x0) / (x1 - x0)
        return ys[lo] + t * (ys[hi] - ys[lo])

    return inverse


def _undefined(_x: float) -> float:
    return math.nan


def try_create_inverse_function(
    cc: CompiledCurve,
    options: InverseOptions | None = None,
    on_error: Callable[[Exception], None] | None = None,
    diagnostics: DiagnosticContext | None = None,
) -> YFunction:
    """Best-effort variant of :func:`create_inverse_function`.

    On failure returns a function that is NaN everywhere. The error goes to
    ``on_error`` when given, otherwise to the deduplicated diagnostics
    channel, so re-running on every edit reports a bad curve only once.
    """
    try:
        return create_inverse_function(cc, options)
    except InverseUnavailableError as exc:
        if on_error is not None:
            on_error(exc)
        elif diagnostics is not None:
            diagnostics.warn_once(
                "try_create_inverse_function",
                cc.curve.expression,
                f'Could not build inverse for "{cc.curve.expression}": {exc}',
            )
        else:
            logger.debug("Inverse unavailable for %r: %s", cc.curve.expression, exc)
        return _undefined
