"""Public API for Volumetrik - returns structured objects without side effects."""

from __future__ import annotations

import math

from .config import (
    ANGULAR_SEGMENTS,
    DEFAULT_CURVE_COLORS,
    HEX_COLOR_REGEX,
    REGION_RESOLUTION,
)
from .curves import make_curve
from .diagnostics import DiagnosticContext
from .evaluator import compile_expression
from .inverse import InverseOptions
from .latex import format_volume, normalize_expression
from .logging_config import get_logger
from .mesh import generate_revolution_geometry
from .region import compute_region
from .types import (
    AXIS_X,
    AXIS_Y,
    CompileError,
    Curve,
    EvalResult,
    InverseUnavailableError,
    RegionError,
    RevolutionReport,
    ValidationError,
)
from .volume import compute_volume

logger = get_logger("api")


def parse_curves(
    equations: list[str], colors: list[str] | None = None
) -> list[Curve]:
    """Parse raw equations into curves, skipping blank or unsupported lines.

    Curve ids are the 1-based positions of the equations in the input, so a
    skipped line leaves a gap. Colours default to the standard palette.

    Example:
        >>> from volumetrik_pkg.api import parse_curves
        >>> [c.kind for c in parse_curves(["y = x^2", "y = 4", "z = 1"])]
        ['y_of_x', 'y_const']
    """
    palette = colors or list(DEFAULT_CURVE_COLORS)
    curves = []
    for index, raw in enumerate(equations):
        color = palette[index % len(palette)]
        curve = make_curve(raw, curve_id=str(index + 1), color=color)
        if curve is None:
            logger.debug("Ignoring unparseable equation %r", raw)
            continue
        curves.append(curve)
    return curves


def _validate(axis: str, resolution: int, segments: int, x_min: float, x_max: float) -> None:
    if axis not in (AXIS_X, AXIS_Y):
        raise ValidationError(f"Axis must be 'x' or 'y', got '{axis}'", "INVALID_AXIS")
    if resolution < 1:
        raise ValidationError("Resolution must be at least 1", "INVALID_RESOLUTION")
    if segments < 1:
        raise ValidationError("Angular segments must be at least 1", "INVALID_SEGMENTS")
    if not (math.isfinite(x_min) and math.isfinite(x_max)):
        raise ValidationError("Bounds must be finite numbers", "INVALID_BOUNDS")


def _validate_colors(curves: list[Curve]) -> None:
    for curve in curves:
        if curve.color is not None and not HEX_COLOR_REGEX.match(curve.color.strip()):
            raise ValidationError(
                f"Curve {curve.id} colour must be #rrggbb, got '{curve.color}'",
                "INVALID_COLOR",
            )


def compute(
    equations: list[str],
    x_min: float,
    x_max: float,
    axis: str = AXIS_X,
    axis_value: float = 0.0,
    resolution: int = REGION_RESOLUTION,
    mesh: bool = False,
    segments: int = ANGULAR_SEGMENTS,
    colors: list[str] | None = None,
    diagnostics: DiagnosticContext | None = None,
    inverse_options: InverseOptions | None = None,
) -> RevolutionReport:
    """Parse curves, build their region and compute the volume of revolution.

    Args:
        equations: Raw equations such as ``["y = x^2", "y = 4"]``
        x_min: Lower x-bound
        x_max: Upper x-bound
        axis: ``"x"`` (about ``y = axis_value``) or ``"y"`` (about ``x = axis_value``)
        axis_value: Offset of the rotation axis
        resolution: Region sampling steps
        mesh: Also generate the triangle mesh
        segments: Angular segments of the mesh
        colors: Per-curve colours; the first two colour the mesh
        diagnostics: Deduplicating warning channel (one per session)
        inverse_options: Sampling window for ``x = g(y)`` curves

    Returns:
        RevolutionReport; ``ok`` is False with ``error``/``error_code`` set
        when the inputs do not define a region

    Example:
        >>> from volumetrik_pkg.api import compute
        >>> compute(["y = x", "y = x^2"], 0, 1, axis="y").volume_display
        'π/6'
    """
    curves = parse_curves(equations, colors)
    try:
        _validate(axis, resolution, segments, x_min, x_max)
        _validate_colors(curves)
        region = compute_region(
            curves,
            x_min,
            x_max,
            resolution=resolution,
            diagnostics=diagnostics,
            inverse_options=inverse_options,
        )
        result = compute_volume(region, axis, axis_value)
    except (ValidationError, CompileError, RegionError, InverseUnavailableError) as exc:
        logger.info("Computation failed (%s): %s", exc.code, exc.message)
        return RevolutionReport(
            ok=False, curves=curves, error=exc.message, error_code=exc.code
        )

    display, _ = format_volume(result.volume)
    report = RevolutionReport(
        ok=True, curves=curves, region=region, result=result, volume_display=display
    )
    if mesh:
        outer_color = curves[0].color
        inner_color = curves[1].color if len(curves) > 1 else curves[0].color
        report.mesh = generate_revolution_geometry(
            region,
            axis,
            axis_value,
            angular_segments=segments,
            outer_color=outer_color,
            inner_color=inner_color,
        )
    return report


def evaluate_expression(expression: str) -> EvalResult:
    """Evaluate a constant expression such as ``"pi/2"`` or ``"\\sqrt{2}"``.

    Example:
        >>> from volumetrik_pkg.api import evaluate_expression
        >>> evaluate_expression("2^10").value
        1024.0
    """
    normalized = normalize_expression(expression or "")
    try:
        evaluable = compile_expression(normalized)
    except CompileError as exc:
        return EvalResult(ok=False, expression=normalized, error=exc.message)

    if not evaluable.is_constant:
        names = ", ".join(evaluable.variables)
        return EvalResult(
            ok=False,
            expression=normalized,
            error=f"Expression has free variables: {names}",
        )

    value = evaluable.evaluate({})
    if math.isnan(value):
        return EvalResult(
            ok=False,
            expression=normalized,
            error="Expression is undefined or not a real number",
        )
    return EvalResult(ok=True, value=value, expression=normalized)
