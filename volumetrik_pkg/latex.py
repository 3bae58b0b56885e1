"""LaTeX input normalization and display formatting.

This module handles:
- Normalizing LaTeX-flavoured input (``\\sqrt{x}``, ``\\frac{a}{b}``) into the
  canonical algebraic strings the evaluator accepts
- Rendering a normalized equation back to LaTeX for display
- Formatting numbers and volumes (recognising rational multiples of pi)
- Building the display formulas of the disk/washer and shell methods
"""

from __future__ import annotations

import math
import re

import sympy as sp

from .types import CompileError

_FUNCTION_NAMES = "sin|cos|tan|ln|log|exp|abs|arcsin|arccos|arctan"

_EXPONENT_BRACES = re.compile(r"\^\{([^{}]*)\}")
_SQRT_BRACES = re.compile(r"\\?sqrt\{([^{}]*)\}")
_FUNCTION_BRACES = re.compile(rf"\\?({_FUNCTION_NAMES})\{{([^{{}}]*)\}}")
_FRAC_BRACES = re.compile(r"\\?frac\{([^{}]*)\}\{([^{}]*)\}")
_FUNCTION_BACKSLASH = re.compile(rf"\\({_FUNCTION_NAMES}|sqrt)\b")

EQUATION_REGEX = re.compile(r"^([xy])\s*=\s*(.*)$", re.IGNORECASE | re.DOTALL)

PI_DENOMINATORS = (2, 3, 4, 5, 6, 8, 10, 12)


def normalize_expression(expr: str) -> str:
    """Convert LaTeX-flavoured input into a canonical algebraic string.

    Examples:
        ``\\sqrt{x-1}`` -> ``sqrt(x-1)``, ``\\frac{a}{b}`` -> ``((a)/(b))``,
        ``x^{2}`` -> ``x^(2)``, ``\\pi`` -> ``pi``, ``\\ln(x)`` -> ``log(x)``,
        ``\\cdot`` -> ``*``
    """
    s = expr

    # Resolve brace groups innermost first; each pass only matches groups
    # without nested braces.
    for _ in range(20):
        prev = s
        s = _EXPONENT_BRACES.sub(r"^(\1)", s)
        s = _SQRT_BRACES.sub(r"sqrt(\1)", s)
        s = _FUNCTION_BRACES.sub(r"\1(\2)", s)
        s = _FRAC_BRACES.sub(r"((\1)/(\2))", s)
        if s == prev:
            break

    s = _FUNCTION_BACKSLASH.sub(r"\1", s)
    s = re.sub(r"\\pi\b", "pi", s)
    s = re.sub(r"\\e\b", "e", s)
    s = s.replace("\\cdot", "*").replace("\\times", "*").replace("\\div", "/")
    s = s.replace("\\left", "").replace("\\right", "")

    # Unsupported commands (\alpha) lose their backslash, lone backslashes go
    s = re.sub(r"\\([a-zA-Z])", r"\1", s)
    s = s.replace("\\", "")

    s = re.sub(r"\bln\(", "log(", s)
    s = s.replace("{", "(").replace("}", ")")
    return s.strip()


def split_equation(raw: str) -> tuple[str, str] | None:
    """Split a normalized equation into its lower-cased left side and right side."""
    match = EQUATION_REGEX.match(raw.strip())
    if match is None:
        return None
    return match.group(1).lower(), match.group(2).strip()


def equation_to_latex(raw: str) -> str | None:
    """Render a raw equation (``"y = x^2"``) as LaTeX for display.

    Falls back to the plain right-hand side when it cannot be compiled.
    Returns None when the equation has no ``x =`` / ``y =`` form.
    """
    from .evaluator import compile_expression

    trimmed = raw.strip() if raw else ""
    if not trimmed:
        return None
    parts = split_equation(normalize_expression(trimmed))
    if parts is None or not parts[1]:
        return None
    lhs, rhs = parts
    try:
        tex = sp.latex(compile_expression(rhs).expr)
    except CompileError:
        tex = rhs
    return f"{lhs} = {tex}"


def format_num(value: float) -> str:
    """Format a number for use inside a LaTeX formula."""
    if float(value).is_integer():
        return str(int(value))
    if abs(value - math.pi) < 1e-10:
        return "\\pi"
    if abs(value + math.pi) < 1e-10:
        return "-\\pi"
    if abs(value - 2 * math.pi) < 1e-10:
        return "2\\pi"
    return _trim_decimal(f"{value:.4f}")


def _trim_decimal(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_volume(volume: float) -> tuple[str, str]:
    """Format a volume, preferring exact multiples or simple fractions of pi.

    Returns:
        Tuple of (display text, LaTeX), e.g. ``("256π/5", "\\frac{256\\pi}{5}")``
    """
    pi_multiple = volume / math.pi

    nearest = round(pi_multiple)
    if abs(pi_multiple - nearest) < 0.0001 and abs(pi_multiple) > 0.01:
        return _pi_multiple(nearest)

    for denom in PI_DENOMINATORS:
        numer = pi_multiple * denom
        if abs(numer - round(numer)) < 0.001 and abs(numer) > 0.01:
            n = round(numer)
            g = math.gcd(abs(n), denom)
            num, den = n // g, denom // g
            if den == 1:
                return _pi_multiple(num)
            coeff = {1: "", -1: "-"}.get(num, str(num))
            return f"{coeff}π/{den}", f"\\frac{{{coeff}\\pi}}{{{den}}}"

    formatted = _trim_decimal(f"{volume:.6f}")
    return formatted, formatted


def _pi_multiple(n: int) -> tuple[str, str]:
    if n == 1:
        return "π", "\\pi"
    if n == -1:
        return "-π", "-\\pi"
    return f"{n}π", f"{n}\\pi"


def build_disk_formula_latex(axis_value: float, x_min: float, x_max: float) -> str:
    """LaTeX for the disk/washer method about ``y = axis_value``."""
    a, b = format_num(x_min), format_num(x_max)
    formula = f"V = \\pi \\int_{{{a}}}^{{{b}}} \\left[ R(x)^2 - r(x)^2 \\right] \\, dx"
    if axis_value == 0:
        return formula
    return f"{formula} \\quad \\text{{about }} y = {format_num(axis_value)}"


def build_shell_formula_latex(axis_value: float, x_min: float, x_max: float) -> str:
    """LaTeX for the shell method about ``x = axis_value``."""
    a, b = format_num(x_min), format_num(x_max)
    if axis_value == 0:
        return f"V = 2\\pi \\int_{{{a}}}^{{{b}}} x \\left| f(x) - g(x) \\right| \\, dx"
    c = format_num(axis_value)
    return (
        f"V = 2\\pi \\int_{{{a}}}^{{{b}}} |x - {c}| \\cdot "
        f"\\left| f(x) - g(x) \\right| \\, dx"
    )
