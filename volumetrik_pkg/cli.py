from __future__ import annotations

import argparse
import json
import math
import sys
from typing import Any

from .config import MAX_CURVES, OUTPUT_PRECISION, VERSION
from .logging_config import get_logger

logger = get_logger("cli")


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running Volumetrik health check...")
    print("-" * 50)

    # Check SymPy import
    try:
        import sympy as sp

        print(f"[OK] SymPy {sp.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] SymPy import failed: {e}")
        checks_failed += 1

    try:
        import numpy

        print(f"[OK] NumPy {numpy.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] NumPy import failed: {e}")
        print("  To install: pip install numpy")
        checks_failed += 1

    # Check expression compilation
    try:
        from .evaluator import eval_constant

        value = eval_constant("2 + 2")
        if value == 4:
            print("[OK] Expression evaluation works")
            checks_passed += 1
        else:
            print(f"[FAIL] Expression evaluation failed: expected 4, got {value}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] Expression evaluation check failed: {e}")
        checks_failed += 1

    # Check a full region/volume computation
    try:
        from .api import compute

        report = compute(["y = x^2", "y = 4"], -2, 2)
        expected = 256 * math.pi / 5
        if report.ok and abs(report.result.volume - expected) / expected < 1e-3:
            print("[OK] Volume computation works")
            checks_passed += 1
        else:
            print(f"[FAIL] Volume computation failed: {report.to_dict()}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] Volume computation check failed: {e}")
        checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def _number_arg(text: str) -> float:
    """argparse type accepting numbers and constant expressions such as ``pi/2``."""
    from .evaluator import eval_constant
    from .latex import normalize_expression

    value = eval_constant(normalize_expression(text))
    if math.isnan(value):
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}")
    return value


def _fmt(value: float) -> str:
    return f"{value:.{OUTPUT_PRECISION}g}"


def print_report(
    report: dict[str, Any], output_format: str = "human"
) -> None:
    """Print a revolution report in the requested format.

    Args:
        report: Result of ``RevolutionReport.to_dict()``
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(report, indent=2, ensure_ascii=False))
        return
    if not report.get("ok"):
        print("Error:", report.get("error"))
        return

    print("Curves:")
    for curve in report.get("curves", []):
        print(f"  [{curve['id']}] {curve['expression']} ({curve['kind']})")
    print(f"Bounds: [{_fmt(report['x_min'])}, {_fmt(report['x_max'])}]")

    formula = report["formula"]
    about = "y" if formula["axis"] == "x" else "x"
    print(f"Method: {formula['method']} (about {about} = {_fmt(formula['axis_value'])})")
    print(f"Formula: {formula['latex']}")
    volume = report["volume"]
    display = report.get("volume_display")
    try:
        if display and display != _fmt(volume):
            print(f"Volume: {display} ≈ {_fmt(volume)}")
        else:
            print(f"Volume: {_fmt(volume)}")
    except UnicodeEncodeError:
        print(f"Volume: {_fmt(volume)}")

    mesh = report.get("mesh")
    if mesh:
        print(f"Mesh: {mesh['vertices']} vertices, {mesh['triangles']} triangles")


def _print_presets(output_format: str) -> None:
    from .presets import list_presets

    presets = list_presets()
    if output_format == "json":
        print(
            json.dumps(
                [
                    {
                        "name": p.name,
                        "description": p.description,
                        "equations": list(p.equations),
                        "x_min": p.x_min,
                        "x_max": p.x_max,
                        "axis": p.axis,
                        "axis_value": p.axis_value,
                    }
                    for p in presets
                ],
                indent=2,
            )
        )
        return
    for p in presets:
        print(f"{p.name}: {p.description}")
        print(f"    {'; '.join(p.equations)}  x in [{p.x_min:g}, {p.x_max:g}], axis {p.axis}")


def _run_eval(expression: str, output_format: str) -> int:
    from .api import evaluate_expression

    result = evaluate_expression(expression)
    if output_format == "json":
        print(json.dumps(result.to_dict(), ensure_ascii=False))
    elif result.ok:
        print(_fmt(result.value))
    else:
        print("Error:", result.error)
    return 0 if result.ok else 1


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Volumetrik CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        prog="volumetrik",
        description="Volume of revolution of the region enclosed by planar curves",
    )
    parser.add_argument(
        "-c",
        "--curve",
        action="append",
        default=[],
        dest="curves",
        help='Curve equation, e.g. "y = x^2" or "x = y^2" (repeatable)',
    )
    parser.add_argument("--x-min", type=_number_arg, help="Lower x-bound")
    parser.add_argument("--x-max", type=_number_arg, help="Upper x-bound")
    parser.add_argument(
        "--auto-bounds",
        action="store_true",
        help="Detect bounds from curve intersections and vertical lines",
    )
    parser.add_argument(
        "--axis",
        type=str,
        choices=["x", "y"],
        help="Rotation axis family: x (y = value) or y (x = value)",
    )
    parser.add_argument(
        "--axis-value", type=_number_arg, help="Offset of the rotation axis (default: 0)"
    )
    parser.add_argument(
        "--resolution", type=int, help="Region sampling steps (default: 200)"
    )
    parser.add_argument(
        "--segments", type=int, help="Angular segments of the mesh (default: 64)"
    )
    parser.add_argument(
        "--mesh", action="store_true", help="Also generate the revolution mesh"
    )
    parser.add_argument(
        "--profiles",
        action="store_true",
        help="Include the boundary profiles in JSON output",
    )
    parser.add_argument("--preset", type=str, help="Load a named example")
    parser.add_argument(
        "--list-presets", action="store_true", help="List the named examples"
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one constant expression and exit",
        dest="eval_expr",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)
    output_format = args.format

    from .logging_config import setup_logging

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()
    if args.list_presets:
        _print_presets(output_format)
        return 0
    if args.eval_expr is not None:
        return _run_eval(args.eval_expr, output_format)

    from .session import Session
    from .types import ValidationError

    session = Session()
    try:
        if args.preset:
            session.load_preset(args.preset)
        if args.curves:
            session.curve_inputs = []
            for equation in args.curves:
                if session.add_curve(equation) is None:
                    raise ValidationError(
                        f"Too many curves (maximum {MAX_CURVES})",
                        "TOO_MANY_CURVES",
                    )
        elif not args.preset:
            raise ValidationError(
                "No curves given. Use -c/--curve or --preset.", "NO_CURVES"
            )

        if args.axis is not None or args.axis_value is not None:
            session.set_axis(
                args.axis or session.axis,
                session.axis_value if args.axis_value is None else args.axis_value,
            )
        if args.resolution is not None:
            session.resolution = args.resolution
        if args.segments is not None:
            session.angular_segments = args.segments

        needs_bounds = not args.preset and (args.x_min is None or args.x_max is None)
        if args.auto_bounds or needs_bounds:
            bounds = session.auto_bounds()
            logger.info("Auto-detected bounds [%g, %g]", bounds.x_min, bounds.x_max)
        if args.x_min is not None:
            session.x_min = args.x_min
        if args.x_max is not None:
            session.x_max = args.x_max
    except ValidationError as exc:
        print_report({"ok": False, "error": exc.message, "code": exc.code}, output_format)
        return 1

    report = session.compute(mesh=args.mesh)
    print_report(report.to_dict(include_profiles=args.profiles), output_format)
    return 0 if report.ok else 1


def main_entry_console() -> None:
    sys.exit(main_entry())


if __name__ == "__main__":
    sys.exit(main_entry())
