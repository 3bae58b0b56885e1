"""Editable document state: curve inputs, bounds and rotation settings.

A :class:`Session` owns everything that would otherwise be process-wide
state (the curve id counter and the warning deduplication set), so two
sessions never interfere with each other.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .api import compute, parse_curves
from .bounds import auto_detect_bounds
from .config import (
    ANGULAR_SEGMENTS,
    DEFAULT_CURVE_COLORS,
    HEX_COLOR_REGEX,
    MAX_CURVES,
    REGION_RESOLUTION,
)
from .diagnostics import DiagnosticContext
from .logging_config import get_logger
from .presets import get_preset
from .types import AXIS_X, AXIS_Y, Bounds, RevolutionReport, ValidationError

logger = get_logger("session")

DEFAULT_EQUATIONS = ("y = x^2", "y = x")


@dataclass(frozen=True)
class CurveInput:
    """One row of the curve editor."""

    id: str
    equation: str
    color: str


class Session:
    """A single revolution document."""

    def __init__(self, diagnostics: DiagnosticContext | None = None):
        self.diagnostics = diagnostics or DiagnosticContext()
        self._next_id = 1
        self.curve_inputs: list[CurveInput] = []
        self.x_min = 0.0
        self.x_max = 1.0
        self.axis = AXIS_X
        self.axis_value = 0.0
        self.resolution = REGION_RESOLUTION
        self.angular_segments = ANGULAR_SEGMENTS
        self.last_report: RevolutionReport | None = None
        self._load_defaults()

    def _make_id(self) -> str:
        curve_id = str(self._next_id)
        self._next_id += 1
        return curve_id

    def _load_defaults(self) -> None:
        self.curve_inputs = [
            CurveInput(self._make_id(), equation, DEFAULT_CURVE_COLORS[i])
            for i, equation in enumerate(DEFAULT_EQUATIONS)
        ]

    def add_curve(self, equation: str = "") -> CurveInput | None:
        """Append a curve; returns None when MAX_CURVES are already present."""
        if len(self.curve_inputs) >= MAX_CURVES:
            logger.debug("Curve limit of %d reached", MAX_CURVES)
            return None
        color = DEFAULT_CURVE_COLORS[len(self.curve_inputs) % len(DEFAULT_CURVE_COLORS)]
        entry = CurveInput(self._make_id(), equation, color)
        self.curve_inputs.append(entry)
        return entry

    def update_curve(
        self, curve_id: str, equation: str | None = None, color: str | None = None
    ) -> CurveInput:
        """Replace the curve ``curve_id`` with an edited copy.

        Raises:
            ValidationError: If no curve has that id, or the colour is not hex
        """
        for index, entry in enumerate(self.curve_inputs):
            if entry.id != curve_id:
                continue
            changes = {}
            if equation is not None:
                changes["equation"] = equation
            if color is not None:
                if not HEX_COLOR_REGEX.match(color.strip()):
                    raise ValidationError(
                        f"Colour must be #rrggbb, got '{color}'", "INVALID_COLOR"
                    )
                changes["color"] = color
            updated = replace(entry, **changes)
            self.curve_inputs[index] = updated
            return updated
        raise ValidationError(f"No curve with id '{curve_id}'", "UNKNOWN_CURVE")

    def remove_curve(self, curve_id: str) -> bool:
        before = len(self.curve_inputs)
        self.curve_inputs = [c for c in self.curve_inputs if c.id != curve_id]
        return len(self.curve_inputs) < before

    def set_bounds(self, x_min: float, x_max: float) -> None:
        self.x_min, self.x_max = float(x_min), float(x_max)

    def set_axis(self, axis: str, axis_value: float = 0.0) -> None:
        if axis not in (AXIS_X, AXIS_Y):
            raise ValidationError(f"Axis must be 'x' or 'y', got '{axis}'", "INVALID_AXIS")
        self.axis, self.axis_value = axis, float(axis_value)

    def auto_bounds(self) -> Bounds:
        """Replace the bounds with auto-detected ones and return them."""
        curves = parse_curves([c.equation for c in self.curve_inputs])
        bounds = auto_detect_bounds(curves, diagnostics=self.diagnostics)
        self.set_bounds(bounds.x_min, bounds.x_max)
        return bounds

    def load_preset(self, name: str) -> None:
        """Replace curves, bounds and axis with those of a preset.

        Raises:
            ValidationError: If the preset does not exist
        """
        preset = get_preset(name)
        self.curve_inputs = [
            CurveInput(self._make_id(), equation, DEFAULT_CURVE_COLORS[i % len(DEFAULT_CURVE_COLORS)])
            for i, equation in enumerate(preset.equations)
        ]
        self.set_bounds(preset.x_min, preset.x_max)
        self.set_axis(preset.axis, preset.axis_value)
        self.last_report = None
        self.diagnostics.reset()

    def reset(self) -> None:
        """Restore the default document. Ids keep increasing."""
        self._load_defaults()
        self.x_min, self.x_max = 0.0, 1.0
        self.axis, self.axis_value = AXIS_X, 0.0
        self.resolution = REGION_RESOLUTION
        self.angular_segments = ANGULAR_SEGMENTS
        self.last_report = None
        self.diagnostics.reset()

    def compute(self, mesh: bool = False) -> RevolutionReport:
        """Compute region, volume and optionally the mesh for the current state."""
        report = compute(
            [c.equation for c in self.curve_inputs],
            self.x_min,
            self.x_max,
            axis=self.axis,
            axis_value=self.axis_value,
            resolution=self.resolution,
            mesh=mesh,
            segments=self.angular_segments,
            colors=[c.color for c in self.curve_inputs],
            diagnostics=self.diagnostics,
        )
        self.last_report = report
        return report
