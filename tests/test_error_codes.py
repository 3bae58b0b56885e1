"""Test error codes returned by various functions."""

import unittest

from volumetrik_pkg.api import compute
from volumetrik_pkg.curves import compile_curve, make_curve
from volumetrik_pkg.evaluator import compile_expression
from volumetrik_pkg.inverse import create_inverse_function
from volumetrik_pkg.presets import get_preset
from volumetrik_pkg.region import compute_region
from volumetrik_pkg.types import (
    CompileError,
    InverseUnavailableError,
    RegionError,
    ValidationError,
)


class TestErrorCodes(unittest.TestCase):
    """Test that functions return appropriate error codes."""

    def test_forbidden_name_error_code(self):
        """Test that Python keywords return FORBIDDEN_NAME error code."""
        try:
            compile_expression("import os")
            self.fail("Should have raised CompileError")
        except CompileError as e:
            self.assertEqual(
                e.code, "FORBIDDEN_NAME", f"Expected FORBIDDEN_NAME, got {e.code}"
            )
            self.assertIn("not allowed", str(e).lower())

    def test_invalid_character_error_code(self):
        try:
            compile_expression("__import__('os')")
            self.fail("Should have raised CompileError")
        except CompileError as e:
            self.assertEqual(e.code, "INVALID_CHARACTER")

    def test_too_long_error_code(self):
        """Test that overly long input returns TOO_LONG error code."""
        long_input = "x+" * 600 + "x"
        try:
            compile_expression(long_input)
            self.fail("Should have raised CompileError")
        except CompileError as e:
            self.assertEqual(e.code, "TOO_LONG", f"Expected TOO_LONG, got {e.code}")
            self.assertIn("too long", str(e).lower())

    def test_unknown_function_error_code(self):
        try:
            compile_expression("foo(x)")
            self.fail("Should have raised CompileError")
        except CompileError as e:
            self.assertEqual(e.code, "UNKNOWN_FUNCTION")

    def test_generic_syntax_error_code(self):
        with self.assertRaises(CompileError) as ctx:
            compile_expression("x +")
        self.assertEqual(ctx.exception.code, "COMPILE_ERROR")

    def test_curve_compile_error_keeps_code(self):
        curve = make_curve("y = sin()", "1")
        with self.assertRaises(CompileError) as ctx:
            compile_curve(curve)
        self.assertIn("sin()", ctx.exception.message)

    def test_region_error_codes(self):
        with self.assertRaises(RegionError) as ctx:
            compute_region([make_curve("y = x", "1")], 0, 1)
        self.assertEqual(ctx.exception.code, "TOO_FEW_CURVES")

        with self.assertRaises(RegionError) as ctx:
            compute_region(
                [make_curve("y = x", "1"), make_curve("y = 0", "2")], 1, 0
            )
        self.assertEqual(ctx.exception.code, "INVALID_BOUNDS")

        with self.assertRaises(RegionError) as ctx:
            compute_region(
                [make_curve("y = sqrt(x)", "1"), make_curve("y = log(x)", "2")], -2, -1
            )
        self.assertEqual(ctx.exception.code, "NO_VALID_REGION")

    def test_inverse_unavailable_error_code(self):
        cc = compile_curve(make_curve("x = sqrt(y - 1000)", "1"))
        with self.assertRaises(InverseUnavailableError) as ctx:
            create_inverse_function(cc)
        self.assertEqual(ctx.exception.code, "INVERSE_UNAVAILABLE")

    def test_unknown_preset_error_code(self):
        with self.assertRaises(ValidationError) as ctx:
            get_preset("cone")
        self.assertEqual(ctx.exception.code, "UNKNOWN_PRESET")

    def test_api_reports_codes_instead_of_raising(self):
        """Errors from every layer come back as a failed report."""
        cases = [
            (["y = x"], {}, "TOO_FEW_CURVES"),
            (["y = x", "y = 0"], {"axis": "q"}, "INVALID_AXIS"),
            (["y = x", "y = 0"], {"segments": 0}, "INVALID_SEGMENTS"),
            (["y = x", "y = 0"], {"x_min": float("nan")}, "INVALID_BOUNDS"),
            (["y = tan(x, x)", "y = 0"], {}, "WRONG_ARGUMENT_COUNT"),
        ]
        for equations, overrides, code in cases:
            kwargs = {"x_min": 0.0, "x_max": 1.0}
            kwargs.update(overrides)
            report = compute(equations, **kwargs)
            self.assertFalse(report.ok, code)
            self.assertEqual(report.error_code, code)
            self.assertEqual(report.to_dict()["code"], code)


if __name__ == "__main__":
    unittest.main()
