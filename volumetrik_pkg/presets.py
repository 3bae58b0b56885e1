"""Worked examples that can be loaded into a session or run from the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from .types import AXIS_X, AXIS_Y, ValidationError


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    equations: tuple[str, ...]
    x_min: float
    x_max: float
    axis: str
    axis_value: float = 0.0


PRESETS: dict[str, Preset] = {
    "washer": Preset(
        name="washer",
        description="Parabola under a horizontal line, revolved about the x-axis",
        equations=("y = x^2", "y = 4"),
        x_min=-2.0,
        x_max=2.0,
        axis=AXIS_X,
    ),
    "sine": Preset(
        name="sine",
        description="One arch of the sine curve, revolved about the x-axis",
        equations=("y = sin(x)", "y = 0"),
        x_min=0.0,
        x_max=3.14159,
        axis=AXIS_X,
    ),
    "shell": Preset(
        name="shell",
        description="Region between y = x and y = x^2, revolved about the y-axis",
        equations=("y = x", "y = x^2"),
        x_min=0.0,
        x_max=1.0,
        axis=AXIS_Y,
    ),
}


def get_preset(name: str) -> Preset:
    """Look up a preset by name.

    Raises:
        ValidationError: If no preset has that name
    """
    try:
        return PRESETS[name.strip().lower()]
    except KeyError:
        available = ", ".join(sorted(PRESETS))
        raise ValidationError(
            f"Unknown preset '{name}'. Available: {available}", "UNKNOWN_PRESET"
        ) from None


def list_presets() -> list[Preset]:
    return list(PRESETS.values())
