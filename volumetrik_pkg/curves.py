"""Curve-level operations: equation parsing, compilation and sampling.

This module handles:
- Classifying a raw equation into one of the four curve kinds
- Detecting constant right-hand sides empirically (``y = 2*pi`` is constant)
- Compiling curves once and evaluating them without raising
- Sampling curves for 2D drawing with exact domain-edge detection
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from .config import (
    SAMPLE_CURVE_STEPS,
    SAMPLE_CURVE_Y_MAX,
    SAMPLE_CURVE_Y_MIN,
    VERTICAL_LINE_EXTENT,
)
from .evaluator import compile_expression
from .latex import normalize_expression, split_equation
from .logging_config import get_logger
from .types import (
    X_CONST,
    X_OF_Y,
    Y_CONST,
    Y_OF_X,
    CompiledCurve,
    CompileError,
    Curve,
    ProfilePoint,
)

logger = get_logger("curves")

EDGE_BISECTION_ROUNDS = 60
EDGE_TOLERANCE = 1e-12


@dataclass
class ParsedEquation:
    """Kind and canonical right-hand side of a parsed equation."""

    kind: str
    expression: str


def _variable_regex(variable: str) -> re.Pattern[str]:
    # Letter boundaries only, so 'x' inside 'exp' or 'max' does not count
    return re.compile(rf"(?<![a-zA-Z]){re.escape(variable)}(?![a-zA-Z])")


def is_constant_expression(expr: str, variable: str) -> bool:
    """Return True if ``expr`` evaluates to a finite value without ``variable``."""
    if _variable_regex(variable).search(expr):
        return False
    try:
        evaluable = compile_expression(expr)
    except CompileError:
        return False
    return math.isfinite(evaluable.evaluate({}))


def parse_equation(raw: str) -> ParsedEquation | None:
    """Parse ``"y = sqrt(x-1)"`` or ``"x = y^2"`` style input.

    Returns:
        ParsedEquation, or None for empty input, an unsupported left-hand side
        or an empty right-hand side
    """
    trimmed = raw.strip() if raw else ""
    if not trimmed:
        return None

    parts = split_equation(normalize_expression(trimmed))
    if parts is None:
        return None
    lhs, expression = parts
    if not expression:
        return None

    if lhs == "y":
        if is_constant_expression(expression, "x"):
            return ParsedEquation(Y_CONST, expression)
        return ParsedEquation(Y_OF_X, expression)
    if is_constant_expression(expression, "y"):
        return ParsedEquation(X_CONST, expression)
    return ParsedEquation(X_OF_Y, expression)


def make_curve(raw: str, curve_id: str = "1", color: str | None = None) -> Curve | None:
    """Build a Curve from raw user input, or None when it does not parse."""
    parsed = parse_equation(raw)
    if parsed is None:
        return None
    return Curve(
        id=curve_id,
        kind=parsed.kind,
        expression=parsed.expression,
        raw_equation=raw,
        color=color,
    )


def compile_curve(curve: Curve) -> CompiledCurve:
    """Compile a curve for repeated evaluation.

    Raises:
        CompileError: If a constant does not evaluate to a finite number, or a
            function expression cannot be compiled
    """
    if curve.kind in (X_CONST, Y_CONST):
        # Same check as is_constant_expression, so every constant kind compiles
        try:
            value = compile_expression(curve.expression).evaluate({})
        except CompileError:
            value = math.nan
        if math.isnan(value):
            raise CompileError(
                f"Cannot parse constant: {curve.expression}", "INVALID_CONSTANT"
            )
        return CompiledCurve(curve=curve, const_value=value)

    try:
        evaluable = compile_expression(curve.expression)
    except CompileError as exc:
        raise CompileError(
            f'Cannot parse expression "{curve.expression}": {exc.message}', exc.code
        ) from exc
    return CompiledCurve(curve=curve, evaluable=evaluable)


def eval_curve(cc: CompiledCurve, value: float) -> float:
    """Evaluate a compiled curve at its parameter (x, or y for ``x_of_y``)."""
    if cc.const_value is not None:
        return cc.const_value
    if cc.evaluable is None:
        return math.nan
    variable = "y" if cc.curve.kind == X_OF_Y else "x"
    return cc.evaluable.evaluate({variable: value})


def sample_curve(
    curve: Curve,
    x_min: float,
    x_max: float,
    steps: int = SAMPLE_CURVE_STEPS,
) -> list[ProfilePoint]:
    """Sample a curve for drawing.

    Undefined points are dropped. For ``y_of_x`` curves every transition
    between defined and undefined samples is refined by bisection, so
    ``y = sqrt(x-1)`` starts exactly at ``(1, 0)``.
    """
    try:
        cc = compile_curve(curve)
    except CompileError as exc:
        logger.debug("Skipping curve %s in sample_curve: %s", curve.id, exc)
        return []

    if curve.kind == X_CONST:
        return [
            ProfilePoint(cc.const_value, -VERTICAL_LINE_EXTENT),
            ProfilePoint(cc.const_value, VERTICAL_LINE_EXTENT),
        ]
    if curve.kind == Y_CONST:
        return [ProfilePoint(x_min, cc.const_value), ProfilePoint(x_max, cc.const_value)]

    if curve.kind == X_OF_Y:
        dy = (SAMPLE_CURVE_Y_MAX - SAMPLE_CURVE_Y_MIN) / steps
        points = []
        for i in range(steps + 1):
            y = SAMPLE_CURVE_Y_MIN + i * dy
            x = eval_curve(cc, y)
            if math.isfinite(x):
                points.append(ProfilePoint(x, y))
        return points

    dx = (x_max - x_min) / steps
    raw_ys = [eval_curve(cc, x_min + i * dx) for i in range(steps + 1)]

    points: list[ProfilePoint] = []
    prev_defined = math.isfinite(raw_ys[0])
    for i, y in enumerate(raw_ys):
        x = x_min + i * dx
        defined = math.isfinite(y)
        if i > 0 and defined != prev_defined:
            prev_x = x_min + (i - 1) * dx
            edge = (
                _bisect_domain_edge(cc, prev_x, x)
                if defined
                else _bisect_domain_edge(cc, x, prev_x)
            )
            if edge is not None:
                points.append(edge)
        if defined:
            points.append(ProfilePoint(x, y))
        prev_defined = defined
    return points


def _bisect_domain_edge(
    cc: CompiledCurve, x_undefined: float, x_defined: float
) -> ProfilePoint | None:
    best_y = eval_curve(cc, x_defined)
    if not math.isfinite(best_y):
        return None
    best_x = x_defined
    for _ in range(EDGE_BISECTION_ROUNDS):
        mid = (x_undefined + x_defined) / 2
        y_mid = eval_curve(cc, mid)
        if math.isfinite(y_mid):
            x_defined = best_x = mid
            best_y = y_mid
        else:
            x_undefined = mid
        if abs(x_defined - x_undefined) < EDGE_TOLERANCE:
            break
    return ProfilePoint(best_x, best_y)
