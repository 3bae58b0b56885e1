"""Test that API functions return typed dataclasses."""

import math

import pytest

from volumetrik_pkg.api import compute, evaluate_expression, parse_curves
from volumetrik_pkg.types import (
    Y_CONST,
    Y_OF_X,
    EvalResult,
    RevolutionMesh,
    RevolutionReport,
)


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_parse_curves(self):
        curves = parse_curves(["y = x^2", "", "z = 1", "y = 4"])
        assert [c.kind for c in curves] == [Y_OF_X, Y_CONST]
        assert [c.id for c in curves] == ["1", "4"]
        assert curves[0].color == "#4f6ef7"

    def test_parse_curves_custom_colors(self):
        curves = parse_curves(["y = x", "y = 0"], colors=["#000000", "#ffffff"])
        assert [c.color for c in curves] == ["#000000", "#ffffff"]

    def test_compute_returns_report(self):
        report = compute(["y = x^2", "y = 4"], -2, 2, resolution=1000)
        assert isinstance(report, RevolutionReport)
        assert report.ok is True
        assert report.volume_display == "256π/5"
        assert report.result.volume == pytest.approx(256 * math.pi / 5, rel=1e-3)
        assert report.mesh is None

    def test_compute_with_mesh(self):
        report = compute(["y = x", "y = x^2"], 0, 1, axis="y", mesh=True, segments=8)
        assert report.ok is True
        assert isinstance(report.mesh, RevolutionMesh)
        assert report.mesh.colors is not None
        assert report.volume_display == "π/6"

    def test_compute_invalid_color_returns_report(self):
        report = compute(
            ["y = x", "y = 0"], 0, 1, mesh=True, colors=["red", "#000000"]
        )
        assert report.ok is False
        assert report.error_code == "INVALID_COLOR"
        assert report.mesh is None

    def test_compute_with_variadic_function(self):
        report = compute(["y = max(x, 0)", "y = 2"], -1, 1)
        assert report.ok is True
        # pi * integral of 4 - max(x, 0)^2 over [-1, 1]
        assert report.result.volume == pytest.approx(23 * math.pi / 3, rel=1e-3)

    def test_compute_error_returns_report(self):
        report = compute(["y = x"], 0, 1)
        assert isinstance(report, RevolutionReport)
        assert report.ok is False
        assert report.error_code == "TOO_FEW_CURVES"
        assert report.to_dict() == {
            "ok": False,
            "error": report.error,
            "code": "TOO_FEW_CURVES",
            "curves": [{"id": "1", "kind": Y_OF_X, "expression": "x"}],
        }

    def test_compute_compile_error(self):
        report = compute(["y = foo(x)", "y = 0"], 0, 1)
        assert report.ok is False
        assert report.error_code == "UNKNOWN_FUNCTION"

    def test_compute_invalid_axis(self):
        report = compute(["y = x", "y = 0"], 0, 1, axis="z")
        assert report.ok is False
        assert report.error_code == "INVALID_AXIS"

    def test_compute_invalid_resolution(self):
        report = compute(["y = x", "y = 0"], 0, 1, resolution=0)
        assert report.error_code == "INVALID_RESOLUTION"

    def test_report_to_dict(self):
        data = compute(["y = x^2", "y = 4"], -2, 2, mesh=True, segments=4).to_dict(
            include_profiles=True
        )
        assert data["ok"] is True
        assert data["method"] == "disk"
        assert data["samples"] == 201
        assert len(data["upper_profile"]) == 201
        assert data["mesh"] == {"vertices": 402 * 5, "triangles": 2 * 402 * 4}
        assert data["formula"]["axis"] == "x"

    def test_evaluate_expression(self):
        result = evaluate_expression("2^10")
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.value == 1024.0

    def test_evaluate_latex_expression(self):
        result = evaluate_expression("\\frac{\\pi}{2}")
        assert result.ok is True
        assert result.value == pytest.approx(math.pi / 2)

    def test_evaluate_error_returns_eval_result(self):
        result = evaluate_expression("__import__('os')")
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.error is not None

    def test_evaluate_free_variable(self):
        result = evaluate_expression("x + 1")
        assert result.ok is False
        assert "x" in result.error

    def test_evaluate_undefined(self):
        result = evaluate_expression("sqrt(-1)")
        assert result.ok is False
        assert result.to_dict()["ok"] is False
