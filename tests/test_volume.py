"""Tests for numerical integration, volumes of revolution and bound detection."""

import math
import unittest

import pytest

from volumetrik_pkg.bounds import auto_detect_bounds
from volumetrik_pkg.curves import make_curve
from volumetrik_pkg.region import compute_region
from volumetrik_pkg.types import (
    METHOD_DISK,
    METHOD_SHELL,
    Bounds,
    ComputedRegion,
    ProfilePoint,
)
from volumetrik_pkg.volume import compute_volume, create_interpolator, simpsons_rule


def curves(*equations):
    return [make_curve(eq, str(i + 1)) for i, eq in enumerate(equations)]


def relative_error(actual, expected):
    return abs(actual - expected) / abs(expected)


class TestNumerics(unittest.TestCase):
    """Test the interpolator and Simpson's rule."""

    def test_interpolator(self):
        f = create_interpolator([ProfilePoint(0, 0), ProfilePoint(1, 10), ProfilePoint(3, 30)])
        self.assertAlmostEqual(f(0.5), 5.0)
        self.assertAlmostEqual(f(2.0), 20.0)
        self.assertEqual(f(-1), 0)
        self.assertEqual(f(5), 30)

    def test_interpolator_degenerate_profiles(self):
        self.assertEqual(create_interpolator([])(1.0), 0.0)
        self.assertEqual(create_interpolator([ProfilePoint(0, 7)])(3.0), 7)

    def test_simpson_exact_for_cubics(self):
        self.assertAlmostEqual(simpsons_rule(lambda x: x**3 + x**2, 0, 3, 6), 81 / 4 + 9)

    def test_simpson_odd_steps_rounded_up(self):
        self.assertAlmostEqual(simpsons_rule(lambda x: x * x, 0, 3, 7), 9.0)

    def test_simpson_skips_non_finite_samples(self):
        def f(x):
            return math.nan if abs(x - 0.5) < 1e-9 else 1.0

        value = simpsons_rule(f, 0, 1, 10)
        self.assertTrue(math.isfinite(value))
        self.assertLess(value, 1.0)


class TestComputeVolume(unittest.TestCase):
    """Test the disk/washer and shell methods."""

    def test_washer_about_x_axis(self):
        region = compute_region(curves("y = x^2", "y = 4"), -2, 2)
        result = compute_volume(region, "x", 0)
        self.assertEqual(result.method, METHOD_DISK)
        self.assertLess(relative_error(result.volume, 256 * math.pi / 5), 1e-3)

    def test_washer_about_offset_axis(self):
        region = compute_region(curves("y = x^2", "y = 4"), -2, 2)
        result = compute_volume(region, "x", -1)
        # pi * integral of 25 - (x^2 + 1)^2 over [-2, 2]
        expected = math.pi * (96 - 64 / 5 - 32 / 3)
        self.assertLess(relative_error(result.volume, expected), 1e-3)

    def test_axis_between_curves_gives_solid_disk(self):
        region = compute_region(curves("y = 1", "y = -1"), 0, 1)
        self.assertAlmostEqual(compute_volume(region, "x", 0).volume, math.pi, places=9)

    def test_sine_arch(self):
        region = compute_region(curves("y = sin(x)", "y = 0"), 0, math.pi)
        result = compute_volume(region, "x")
        self.assertLess(relative_error(result.volume, math.pi**2 / 2), 1e-3)

    def test_shell_about_y_axis(self):
        region = compute_region(curves("y = x", "y = x^2"), 0, 1)
        result = compute_volume(region, "y", 0)
        self.assertEqual(result.method, METHOD_SHELL)
        self.assertLess(relative_error(result.volume, math.pi / 6), 1e-3)

    def test_shell_about_offset_axis(self):
        region = compute_region(curves("y = 1", "y = 0"), 0, 1)
        # Cylindrical shell of radii 1 and 2, height 1
        result = compute_volume(region, "y", -1)
        self.assertAlmostEqual(result.volume, 3 * math.pi, places=6)

    def test_volume_is_non_negative_for_reversed_bounds(self):
        region = compute_region(curves("y = 1", "y = 0"), 0, 1)
        reversed_region = ComputedRegion(
            region.upper_profile, region.lower_profile, region.x_max, region.x_min
        )
        self.assertGreater(compute_volume(reversed_region, "x").volume, 0)

    def test_formula_descriptor(self):
        region = compute_region(curves("y = x^2", "y = 4"), -2, 2)
        formula = compute_volume(region, "x", 0).formula
        self.assertEqual(formula.axis, "x")
        self.assertEqual(formula.axis_value, 0)
        self.assertIn("\\pi \\int_{-2}^{2}", formula.latex)
        self.assertEqual(formula.to_dict()["method"], METHOD_DISK)

    def test_degenerate_region(self):
        region = ComputedRegion([ProfilePoint(0, 1)], [ProfilePoint(0, 0)], 0, 0)
        result = compute_volume(region, "y", 0)
        self.assertEqual(result.volume, 0.0)
        self.assertEqual(result.formula.latex, "V = 0")

    def test_unknown_axis(self):
        region = compute_region(curves("y = 1", "y = 0"), 0, 1)
        with self.assertRaises(ValueError):
            compute_volume(region, "z")


class TestAutoDetectBounds:
    """Bounds from intersections and vertical lines."""

    def test_intersections(self):
        assert auto_detect_bounds(curves("y = x^2", "y = 4")) == Bounds(-2.0, 2.0)

    def test_line_and_parabola(self):
        bounds = auto_detect_bounds(curves("y = x", "y = x^2"))
        assert bounds.x_min == pytest.approx(0.0, abs=1e-4)
        assert bounds.x_max == pytest.approx(1.0, abs=1e-4)

    def test_vertical_lines(self):
        assert auto_detect_bounds(curves("x = 1", "x = 3", "y = 5")) == Bounds(1.0, 3.0)

    def test_fallback_without_intersections(self):
        assert auto_detect_bounds(curves("y = x^2 + 1", "y = 0")) == Bounds(-5, 5)

    def test_fallback_for_single_curve(self):
        assert auto_detect_bounds(curves("y = x")) == Bounds(-5, 5)

    def test_uncompilable_curve_is_skipped(self):
        bounds = auto_detect_bounds(curves("y = foo(x)", "y = x^2", "y = 4"))
        assert bounds == Bounds(-2.0, 2.0)

    def test_rounded_to_four_decimals(self):
        bounds = auto_detect_bounds(curves("y = x^2", "y = 2"))
        assert bounds.x_max == round(math.sqrt(2), 4)

    def test_custom_search_range(self):
        bounds = auto_detect_bounds(curves("y = sin(x)", "y = 0"), search_range=(0.5, 7))
        assert bounds.x_min == pytest.approx(math.pi, abs=1e-4)
        assert bounds.x_max == pytest.approx(2 * math.pi, abs=1e-4)


if __name__ == "__main__":
    unittest.main()
