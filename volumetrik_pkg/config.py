"""Centralized configuration for Volumetrik.

This module defines:
- Input validation limits (length, depth, node count)
- Cache sizes for compiled expressions
- Sampling windows and counts used by the curve, region and volume engines
- Defaults for auto-detected bounds and mesh generation

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with VOLUMETRIK_)
"""

import os
import re

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("volumetrik")
except Exception:
    # Fallback if package not installed
    VERSION = "0.3.0"

# Input validation limits
MAX_EXPRESSION_LENGTH = int(
    os.getenv("VOLUMETRIK_MAX_EXPRESSION_LENGTH", "1000")
)  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("VOLUMETRIK_MAX_EXPRESSION_DEPTH", "100")
)  # parser nesting depth
MAX_EXPRESSION_NODES = int(
    os.getenv("VOLUMETRIK_MAX_EXPRESSION_NODES", "2000")
)  # total tree nodes

# Constant evaluation guards (evaluator.eval_constant)
EVAL_CONST_MAX_LENGTH = int(os.getenv("VOLUMETRIK_EVAL_CONST_MAX_LENGTH", "200"))
EVAL_CONST_ALLOWED_REGEX = re.compile(r"^[0-9a-zA-Z+\-*/^()._ \t]+$")
NUMERIC_LITERAL_REGEX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Cache configuration
CACHE_SIZE_COMPILE = int(os.getenv("VOLUMETRIK_CACHE_SIZE_COMPILE", "1024"))

# Inverse-function sampling (inverse.create_inverse_function)
INVERSE_Y_MIN = float(os.getenv("VOLUMETRIK_INVERSE_Y_MIN", "-50"))
INVERSE_Y_MAX = float(os.getenv("VOLUMETRIK_INVERSE_Y_MAX", "50"))
INVERSE_SAMPLE_COUNT = int(os.getenv("VOLUMETRIK_INVERSE_SAMPLE_COUNT", "1000"))

# Direct x_of_y sampling for drawing (curves.sample_curve)
SAMPLE_CURVE_Y_MIN = float(os.getenv("VOLUMETRIK_SAMPLE_CURVE_Y_MIN", "-10"))
SAMPLE_CURVE_Y_MAX = float(os.getenv("VOLUMETRIK_SAMPLE_CURVE_Y_MAX", "10"))
SAMPLE_CURVE_STEPS = int(os.getenv("VOLUMETRIK_SAMPLE_CURVE_STEPS", "300"))

# Vertical lines (x = const) are drawn between +/- this extent
VERTICAL_LINE_EXTENT = float(os.getenv("VOLUMETRIK_VERTICAL_LINE_EXTENT", "1000"))

# Auto-detect bounds (bounds.auto_detect_bounds)
AUTO_DETECT_SEARCH_MIN = float(os.getenv("VOLUMETRIK_AUTO_DETECT_SEARCH_MIN", "-20"))
AUTO_DETECT_SEARCH_MAX = float(os.getenv("VOLUMETRIK_AUTO_DETECT_SEARCH_MAX", "20"))
AUTO_DETECT_SCAN_STEPS = int(os.getenv("VOLUMETRIK_AUTO_DETECT_SCAN_STEPS", "2000"))
FALLBACK_X_MIN = float(os.getenv("VOLUMETRIK_FALLBACK_X_MIN", "-5"))
FALLBACK_X_MAX = float(os.getenv("VOLUMETRIK_FALLBACK_X_MAX", "5"))

# Numeric tolerance constants (replacing magic numbers throughout codebase)
BISECTION_ROUNDS = int(os.getenv("VOLUMETRIK_BISECTION_ROUNDS", "50"))
BISECTION_TOLERANCE = float(
    os.getenv("VOLUMETRIK_BISECTION_TOLERANCE", "1e-12")
)  # early exit when |f1 - f2| drops below this
TOUCH_TOLERANCE = float(
    os.getenv("VOLUMETRIK_TOUCH_TOLERANCE", "1e-10")
)  # tangency without a sign change
INTERSECTION_DEDUP_TOLERANCE = float(
    os.getenv("VOLUMETRIK_INTERSECTION_DEDUP_TOLERANCE", "1e-6")
)
NORMAL_EPSILON = float(os.getenv("VOLUMETRIK_NORMAL_EPSILON", "1e-8"))

# Region / volume / mesh defaults
REGION_RESOLUTION = int(os.getenv("VOLUMETRIK_REGION_RESOLUTION", "200"))
MIN_SIMPSON_STEPS = int(os.getenv("VOLUMETRIK_MIN_SIMPSON_STEPS", "500"))
ANGULAR_SEGMENTS = int(os.getenv("VOLUMETRIK_ANGULAR_SEGMENTS", "64"))
MAX_CURVES = int(os.getenv("VOLUMETRIK_MAX_CURVES", "8"))

# Diagnostics: deduplicated curve-engine warnings are only emitted when enabled
DEBUG = os.getenv("VOLUMETRIK_DEBUG", "false").lower() == "true"

OUTPUT_PRECISION = int(os.getenv("VOLUMETRIK_OUTPUT_PRECISION", "6"))

DEFAULT_CURVE_COLORS = (
    "#4f6ef7",
    "#e74c8b",
    "#2ecc71",
    "#f0a500",
    "#9b59b6",
    "#1abc9c",
    "#e67e22",
    "#3498db",
)

HEX_COLOR_REGEX = re.compile(r"^#?([0-9a-fA-F]{6})$")
