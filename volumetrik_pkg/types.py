"""Type definitions, result dataclasses and error types shared by the engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    import numpy as np

    from .evaluator import Evaluable

# Curve kinds
Y_OF_X = "y_of_x"
X_OF_Y = "x_of_y"
X_CONST = "x_const"
Y_CONST = "y_const"
CURVE_KINDS = (Y_OF_X, X_OF_Y, X_CONST, Y_CONST)
CONSTANT_KINDS = (X_CONST, Y_CONST)

# Rotation axes and integration methods
AXIS_X = "x"
AXIS_Y = "y"
METHOD_DISK = "disk"
METHOD_SHELL = "shell"


@dataclass
class Curve:
    """A single curve as entered by the user.

    Curves are never mutated after parsing; editing a curve produces a new
    instance (see ``dataclasses.replace``).
    """

    id: str
    kind: str
    expression: str
    raw_equation: str
    color: str | None = None

    @property
    def variable(self) -> str | None:
        """Free variable of the expression, or None for constant kinds."""
        if self.kind == Y_OF_X:
            return "x"
        if self.kind == X_OF_Y:
            return "y"
        return None


@dataclass
class CompiledCurve:
    """A Curve bundled with its compiled evaluator or cached constant value."""

    curve: Curve
    evaluable: Evaluable | None = None
    const_value: float | None = None


@dataclass
class ProfilePoint:
    """One (x, y) sample of a boundary curve."""

    x: float
    y: float


@dataclass
class ComputedRegion:
    """Upper and lower boundary profiles of the enclosed region.

    The two profiles are index-aligned: ``upper_profile[i].x`` always equals
    ``lower_profile[i].x``. ``x_min``/``x_max`` are the effective bounds after
    clipping by vertical lines.
    """

    upper_profile: list[ProfilePoint]
    lower_profile: list[ProfilePoint]
    x_min: float
    x_max: float

    def __len__(self) -> int:
        return len(self.upper_profile)


@dataclass
class FormulaDescriptor:
    """Display-only description of the integral used for a volume."""

    method: str
    axis: str
    axis_value: float
    x_min: float
    x_max: float
    latex: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "method": self.method,
            "axis": self.axis,
            "axis_value": self.axis_value,
            "x_min": self.x_min,
            "x_max": self.x_max,
            "latex": self.latex,
        }


@dataclass
class RevolutionResult:
    """Result of a volume-of-revolution computation."""

    volume: float
    method: str
    formula: FormulaDescriptor
    region: ComputedRegion


@dataclass
class MeshProfilePoint:
    """A boundary point in the cylindrical frame of the rotation axis."""

    radius: float
    axis_pos: float


@dataclass
class RevolutionMesh:
    """Flat buffers of a triangulated surface of revolution.

    ``positions``, ``normals`` and ``colors`` hold three floats per vertex;
    ``indices`` holds three vertex indices per triangle.
    """

    positions: np.ndarray
    indices: np.ndarray
    normals: np.ndarray
    colors: np.ndarray | None = None

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3


@dataclass
class Bounds:
    """An x-interval proposed for integration."""

    x_min: float
    x_max: float


@dataclass
class EvalResult:
    """Result of evaluating a single expression."""

    ok: bool
    value: float | None = None
    expression: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.expression is not None:
            result_dict["expression"] = self.expression
        if self.value is not None:
            result_dict["value"] = self.value
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict


@dataclass
class RevolutionReport:
    """Everything computed for one (curves, bounds, axis) configuration."""

    ok: bool
    curves: list[Curve] = field(default_factory=list)
    region: ComputedRegion | None = None
    result: RevolutionResult | None = None
    mesh: RevolutionMesh | None = None
    volume_display: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self, include_profiles: bool = False) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.error is not None:
            result_dict["error"] = self.error
            result_dict["code"] = self.error_code
        if self.curves:
            result_dict["curves"] = [
                {"id": c.id, "kind": c.kind, "expression": c.expression}
                for c in self.curves
            ]
        if self.region is not None:
            result_dict["x_min"] = self.region.x_min
            result_dict["x_max"] = self.region.x_max
            result_dict["samples"] = len(self.region)
            if include_profiles:
                result_dict["upper_profile"] = [
                    [p.x, p.y] for p in self.region.upper_profile
                ]
                result_dict["lower_profile"] = [
                    [p.x, p.y] for p in self.region.lower_profile
                ]
        if self.result is not None:
            result_dict["volume"] = self.result.volume
            result_dict["method"] = self.result.method
            result_dict["formula"] = self.result.formula.to_dict()
        if self.volume_display is not None:
            result_dict["volume_display"] = self.volume_display
        if self.mesh is not None:
            result_dict["mesh"] = {
                "vertices": self.mesh.vertex_count,
                "triangles": self.mesh.triangle_count,
            }
        return result_dict


YFunction = Callable[[float], float]


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class CompileError(Exception):
    """Raised when an expression cannot be compiled for evaluation."""

    def __init__(self, message: str, code: str = "COMPILE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class RegionError(Exception):
    """Raised when no region can be built from the given curves and bounds."""

    def __init__(self, message: str, code: str = "NO_VALID_REGION"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InverseUnavailableError(Exception):
    """Raised when an x = g(y) curve has no finite samples in its y-window."""

    def __init__(self, message: str, code: str = "INVERSE_UNAVAILABLE"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
