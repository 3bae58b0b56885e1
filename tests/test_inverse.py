"""Tests for numeric inverses of x = g(y) curves and the diagnostics channel."""

import logging
import math
import unittest

from volumetrik_pkg.curves import compile_curve, make_curve
from volumetrik_pkg.diagnostics import DiagnosticContext
from volumetrik_pkg.inverse import (
    InverseOptions,
    create_inverse_function,
    try_create_inverse_function,
)
from volumetrik_pkg.types import InverseUnavailableError


class TestCreateInverseFunction(unittest.TestCase):
    """Test the strict inverse builder."""

    def setUp(self):
        self.cubic = compile_curve(make_curve("x = y^3"))

    def test_round_trip(self):
        inverse = create_inverse_function(self.cubic)
        for y0 in (-2.5, -1.234, 0.3, 1.234, 3.0):
            self.assertAlmostEqual(inverse(y0**3), y0, delta=0.05)

    def test_clamps_outside_sampled_range(self):
        inverse = create_inverse_function(
            self.cubic, InverseOptions(y_min=-2, y_max=2, sample_count=100)
        )
        self.assertAlmostEqual(inverse(1000.0), 2.0)
        self.assertAlmostEqual(inverse(-1000.0), -2.0)

    def test_linear_curve_is_exact(self):
        inverse = create_inverse_function(compile_curve(make_curve("x = 2*y")))
        self.assertAlmostEqual(inverse(3.0), 1.5, places=9)

    def test_no_finite_samples(self):
        cc = compile_curve(make_curve("x = log(y - 100)"))
        with self.assertRaises(InverseUnavailableError) as ctx:
            create_inverse_function(cc)
        self.assertEqual(ctx.exception.code, "INVERSE_UNAVAILABLE")


class TestTryCreateInverseFunction(unittest.TestCase):
    """Test the best-effort inverse builder."""

    def setUp(self):
        self.bad = compile_curve(make_curve("x = log(y - 100)"))

    def test_returns_nan_function(self):
        inverse = try_create_inverse_function(self.bad)
        self.assertTrue(math.isnan(inverse(0.0)))

    def test_on_error_callback(self):
        errors = []
        try_create_inverse_function(self.bad, on_error=errors.append)
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], InverseUnavailableError)

    def test_warns_once_per_context(self):
        diagnostics = DiagnosticContext(enabled=True)
        with self.assertLogs("volumetrik.diagnostics", level=logging.WARNING) as logs:
            try_create_inverse_function(self.bad, diagnostics=diagnostics)
            try_create_inverse_function(self.bad, diagnostics=diagnostics)
        self.assertEqual(len(logs.records), 1)
        self.assertEqual(len(diagnostics.messages), 1)
        self.assertTrue(
            diagnostics.has_warned("try_create_inverse_function", "log(y - 100)")
        )

    def test_success_passes_through(self):
        inverse = try_create_inverse_function(compile_curve(make_curve("x = y")))
        self.assertAlmostEqual(inverse(0.5), 0.5)


class TestDiagnosticContext:
    def test_disabled_context_is_silent(self):
        diagnostics = DiagnosticContext(enabled=False)
        assert diagnostics.warn_once("tag", "key", "message") is False
        assert diagnostics.messages == []

    def test_reset_allows_warning_again(self):
        diagnostics = DiagnosticContext(enabled=True)
        assert diagnostics.warn_once("tag", "key", "message") is True
        assert diagnostics.warn_once("tag", "key", "message") is False
        diagnostics.reset()
        assert diagnostics.warn_once("tag", "key", "message") is True

    def test_contexts_are_independent(self):
        first, second = DiagnosticContext(enabled=True), DiagnosticContext(enabled=True)
        assert first.warn_once("tag", "key", "message") is True
        assert second.warn_once("tag", "key", "message") is True


if __name__ == "__main__":
    unittest.main()
