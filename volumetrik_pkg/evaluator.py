"""Safe compilation and evaluation of algebraic expressions.

This module handles:
- Tokenizing canonical algebraic strings (``x^2 + 2*sin(x)``)
- A restricted recursive-descent parser that builds SymPy expressions from
  whitelisted operators, functions and constants only
- Compiling the SymPy tree into a fast callable via ``sympy.lambdify``
- NaN-returning evaluation for sampling loops
- Guarded constant evaluation for user-entered bounds and constant lines

User text is never passed to ``eval``; SymPy only ever sees expression trees
assembled by the parser below.
"""

from __future__ import annotations

import keyword
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

import sympy as sp

from .config import (
    CACHE_SIZE_COMPILE,
    EVAL_CONST_ALLOWED_REGEX,
    EVAL_CONST_MAX_LENGTH,
    MAX_EXPRESSION_DEPTH,
    MAX_EXPRESSION_LENGTH,
    MAX_EXPRESSION_NODES,
    NUMERIC_LITERAL_REGEX,
)
from .logging_config import get_logger
from .types import CompileError

logger = get_logger("evaluator")


def _log_base(value: sp.Basic, base: sp.Basic | None = None) -> sp.Basic:
    if base is None:
        return sp.log(value)
    return sp.log(value) / sp.log(base)


def _cbrt(value: sp.Basic) -> sp.Basic:
    # Real cube root, so cbrt(-8) == -2 rather than a complex principal root
    return sp.sign(value) * sp.Abs(value) ** sp.Rational(1, 3)


def _nth_root(value: sp.Basic, n: sp.Basic = sp.Integer(2)) -> sp.Basic:
    """Real n-th root; odd integer roots of negative values stay real."""
    if n == 0:
        return sp.nan
    if isinstance(n, sp.Integer) and n % 2 == 1:
        return sp.sign(value) * sp.Abs(value) ** (1 / n)
    return _power(value, 1 / n)


def _mod(value: sp.Basic, divisor: sp.Basic) -> sp.Basic:
    try:
        return sp.Mod(value, divisor)
    except ZeroDivisionError:
        return sp.nan


def _extremum(builder: Callable[..., sp.Basic]) -> Callable[..., sp.Basic]:
    # Min/Max reject arguments they cannot order, such as nan
    def build(*args: sp.Basic) -> sp.Basic:
        try:
            return builder(*args)
        except (TypeError, ValueError):
            return sp.nan

    return build


# name -> (builder, allowed argument counts); None accepts one or more arguments
ALLOWED_FUNCTIONS: dict[
    str, tuple[Callable[..., sp.Basic], tuple[int, ...] | None]
] = {
    "sqrt": (sp.sqrt, (1,)),
    "cbrt": (_cbrt, (1,)),
    "sin": (sp.sin, (1,)),
    "cos": (sp.cos, (1,)),
    "tan": (sp.tan, (1,)),
    "sec": (lambda a: 1 / sp.cos(a), (1,)),
    "csc": (lambda a: 1 / sp.sin(a), (1,)),
    "cot": (lambda a: 1 / sp.tan(a), (1,)),
    "asin": (sp.asin, (1,)),
    "acos": (sp.acos, (1,)),
    "atan": (sp.atan, (1,)),
    "arcsin": (sp.asin, (1,)),
    "arccos": (sp.acos, (1,)),
    "arctan": (sp.atan, (1,)),
    "sinh": (sp.sinh, (1,)),
    "cosh": (sp.cosh, (1,)),
    "tanh": (sp.tanh, (1,)),
    "sech": (lambda a: 1 / sp.cosh(a), (1,)),
    "csch": (lambda a: 1 / sp.sinh(a), (1,)),
    "coth": (lambda a: 1 / sp.tanh(a), (1,)),
    "asinh": (sp.asinh, (1,)),
    "acosh": (sp.acosh, (1,)),
    "atanh": (sp.atanh, (1,)),
    "exp": (sp.exp, (1,)),
    "log": (_log_base, (1, 2)),
    "ln": (sp.log, (1,)),
    "log10": (lambda a: _log_base(a, sp.Integer(10)), (1,)),
    "log2": (lambda a: _log_base(a, sp.Integer(2)), (1,)),
    "abs": (sp.Abs, (1,)),
    "sign": (sp.sign, (1,)),
    "floor": (sp.floor, (1,)),
    "ceil": (sp.ceiling, (1,)),
    "pow": (lambda a, b: _power(a, b), (2,)),
    "nthRoot": (_nth_root, (1, 2)),
    "nthroot": (_nth_root, (1, 2)),
    "mod": (_mod, (2,)),
    "min": (_extremum(sp.Min), None),
    "max": (_extremum(sp.Max), None),
}

ALLOWED_CONSTANTS: dict[str, sp.Basic] = {
    "pi": sp.pi,
    "PI": sp.pi,
    "e": sp.E,
    "E": sp.E,
    "tau": 2 * sp.pi,
    "phi": (1 + sp.sqrt(5)) / 2,
}

_TOKEN_REGEX = re.compile(
    r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<name>[A-Za-z][A-Za-z0-9_]*)
    |(?P<op>\*\*|[-+*/^])
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    |(?P<space>\s+)
    """,
    re.VERBOSE,
)


@dataclass
class Token:
    kind: str
    text: str
    pos: int


def tokenize(expr: str) -> list[Token]:
    """Split an expression into tokens, rejecting any unknown character."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(expr):
        match = _TOKEN_REGEX.match(expr, pos)
        if match is None:
            raise CompileError(
                f"Unexpected character {expr[pos]!r} at position {pos}",
                "INVALID_CHARACTER",
            )
        kind = match.lastgroup or ""
        text = match.group(0)
        if kind != "space":
            if kind == "op" and text == "**":
                text = "^"
            tokens.append(Token(kind, text, pos))
        pos = match.end()
    tokens.append(Token("end", "", len(expr)))
    return tokens


class _Parser:
    """Recursive-descent parser producing a SymPy expression.

    Precedence, loosest first: ``+ -``, ``* /`` and implicit multiplication,
    unary sign, ``^`` (right associative). ``-x^2`` therefore means ``-(x^2)``.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0
        self.depth = 0
        self.nodes = 0
        self.symbols: dict[str, sp.Symbol] = {}

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _expect(self, kind: str) -> Token:
        token = self.current
        if token.kind != kind:
            found = token.text or "end of input"
            raise CompileError(
                f"Expected {kind} but found {found!r} at position {token.pos}"
            )
        return self._advance()

    def _count(self, node: sp.Basic) -> sp.Basic:
        self.nodes += 1
        if self.nodes > MAX_EXPRESSION_NODES:
            raise CompileError(
                f"Expression too complex (>{MAX_EXPRESSION_NODES} nodes)",
                "TOO_COMPLEX",
            )
        return node

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_EXPRESSION_DEPTH:
            raise CompileError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                "TOO_DEEP",
            )

    def parse(self) -> sp.Basic:
        if self.current.kind == "end":
            raise CompileError("Expression cannot be empty", "EMPTY_INPUT")
        expr = self._parse_additive()
        if self.current.kind != "end":
            raise CompileError(
                f"Unexpected token {self.current.text!r} at position {self.current.pos}"
            )
        return expr

    def _parse_additive(self) -> sp.Basic:
        self._enter()
        left = self._parse_term()
        while self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            right = self._parse_term()
            left = self._count(left + right if op == "+" else left - right)
        self.depth -= 1
        return left

    def _parse_term(self) -> sp.Basic:
        left = self._parse_unary()
        while True:
            token = self.current
            if token.kind == "op" and token.text in "*/":
                self._advance()
                right = self._parse_unary()
                left = self._count(left * right if token.text == "*" else left / right)
            elif token.kind in ("name", "lparen"):
                # Implicit multiplication: 2x, 2(x+1), (x+1)(x-1), x(x+1)
                right = self._parse_power()
                left = self._count(left * right)
            else:
                return left

    def _parse_unary(self) -> sp.Basic:
        self._enter()
        token = self.current
        if token.kind == "op" and token.text in "+-":
            self._advance()
            operand = self._parse_unary()
            result = self._count(-operand) if token.text == "-" else operand
        else:
            result = self._parse_power()
        self.depth -= 1
        return result

    def _parse_power(self) -> sp.Basic:
        base = self._parse_primary()
        if self.current.kind == "op" and self.current.text == "^":
            self._advance()
            exponent = self._parse_unary()
            return self._count(_power(base, exponent))
        return base

    def _parse_primary(self) -> sp.Basic:
        token = self.current
        if token.kind == "number":
            self._advance()
            return self._count(_number(token.text))
        if token.kind == "lparen":
            self._advance()
            inner = self._parse_additive()
            self._expect("rparen")
            return inner
        if token.kind == "name":
            self._advance()
            return self._parse_name(token)
        found = token.text or "end of input"
        raise CompileError(f"Unexpected {found!r} at position {token.pos}")

    def _parse_name(self, token: Token) -> sp.Basic:
        name = token.text
        if name in ALLOWED_FUNCTIONS:
            if self.current.kind != "lparen":
                raise CompileError(
                    f"Function '{name}' must be called with parentheses",
                    "MISSING_ARGUMENTS",
                )
            self._advance()
            args = [self._parse_additive()]
            while self.current.kind == "comma":
                self._advance()
                args.append(self._parse_additive())
            self._expect("rparen")
            builder, arities = ALLOWED_FUNCTIONS[name]
            if arities is not None and len(args) not in arities:
                raise CompileError(
                    f"Function '{name}' takes {' or '.join(map(str, arities))} "
                    f"argument(s), got {len(args)}",
                    "WRONG_ARGUMENT_COUNT",
                )
            return self._count(builder(*args))
        if name in ALLOWED_CONSTANTS:
            return self._count(ALLOWED_CONSTANTS[name])
        if keyword.iskeyword(name):
            raise CompileError(f"Name '{name}' not allowed", "FORBIDDEN_NAME")
        if self.current.kind == "lparen" and len(name) > 1:
            raise CompileError(f"Unknown function '{name}'", "UNKNOWN_FUNCTION")
        if name not in self.symbols:
            self.symbols[name] = sp.Symbol(name)
        return self._count(self.symbols[name])


def _number(text: str) -> sp.Basic:
    if any(ch in text for ch in ".eE"):
        return sp.Float(text)
    return sp.Integer(int(text))


def _power(base: sp.Basic, exponent: sp.Basic) -> sp.Basic:
    """Build ``base ** exponent``.

    Purely numeric powers are folded in floating point so inputs such as
    ``10^10^10`` cannot trigger exact big-integer arithmetic.
    """
    if isinstance(base, sp.Number) and isinstance(exponent, sp.Number):
        try:
            value = float(base) ** float(exponent)
        except (OverflowError, ZeroDivisionError):
            return sp.nan
        if isinstance(value, complex) or not math.isfinite(value):
            return sp.nan
        if value.is_integer() and abs(value) < 2**53:
            return sp.Integer(int(value))
        return sp.Float(value)
    return sp.Pow(base, exponent)


@dataclass(frozen=True)
class Evaluable:
    """A compiled expression ready for repeated numeric evaluation.

    Instances are shared through the compile cache and never mutated.
    """

    source: str
    expr: sp.Basic
    variables: tuple[str, ...]
    func: Callable[..., Any] | None = None
    constant: float | None = None

    @property
    def is_constant(self) -> bool:
        return not self.variables

    def evaluate(self, scope: dict[str, float] | None = None) -> float:
        """Evaluate with the given variable bindings; NaN on any failure."""
        if self.func is None:
            return math.nan if self.constant is None else self.constant
        scope = scope or {}
        try:
            args = [scope[name] for name in self.variables]
        except KeyError:
            return math.nan
        try:
            value = self.func(*args)
        except (ArithmeticError, ValueError, TypeError):
            return math.nan
        return _to_real(value)


def _to_real(value: Any) -> float:
    if isinstance(value, complex):
        return math.nan
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan
    return number if math.isfinite(number) else math.nan


@lru_cache(maxsize=CACHE_SIZE_COMPILE)
def compile_expression(expr: str) -> Evaluable:
    """Compile an algebraic expression string.

    Args:
        expr: Canonical expression (e.g. ``"x^2 - 3*x"``, ``"sqrt(y)"``)

    Returns:
        Evaluable wrapping the parsed SymPy tree and its compiled callable

    Raises:
        CompileError: If the expression is empty, too long, too complex or
            syntactically invalid, or calls an unknown function
    """
    source = expr.strip() if expr else ""
    if not source:
        raise CompileError("Expression cannot be empty", "EMPTY_INPUT")
    if len(source) > MAX_EXPRESSION_LENGTH:
        raise CompileError(
            f"Expression too long (>{MAX_EXPRESSION_LENGTH} characters)", "TOO_LONG"
        )

    parser = _Parser(source)
    tree = parser.parse()
    names = tuple(sorted(s.name for s in tree.free_symbols))

    if not names:
        try:
            real, imag = tree.evalf().as_real_imag()
            constant = _to_real(real) if float(imag) == 0 else math.nan
        except (TypeError, ValueError, OverflowError, AttributeError):
            constant = math.nan
        return Evaluable(source=source, expr=tree, variables=(), constant=constant)

    symbols = [parser.symbols[name] for name in names]
    try:
        func = sp.lambdify(symbols, tree, modules="math")
    except Exception as exc:
        logger.debug("lambdify failed for %r: %s", source, exc)
        raise CompileError(f"Cannot compile expression '{source}': {exc}") from exc
    return Evaluable(source=source, expr=tree, variables=names, func=func)


def evaluate(evaluable: Evaluable, value: float, variable: str = "x") -> float:
    """Evaluate ``evaluable`` with ``variable`` bound to ``value``.

    Never raises: interpreter failures, non-finite or complex results and
    unbound variables all produce NaN, which callers treat as "undefined here".
    """
    return evaluable.evaluate({variable: value})


def eval_constant(expr: str) -> float:
    """Evaluate a constant expression (``"0.5"``, ``"pi/2"``, ``"sqrt(2)"``).

    Plain numeric literals are converted directly. Anything longer than
    EVAL_CONST_MAX_LENGTH characters, or containing a character outside the
    whitelist, is rejected without being parsed.

    Returns:
        The finite value, or NaN when the input is invalid or not constant
    """
    if expr is None or len(expr) > EVAL_CONST_MAX_LENGTH:
        return math.nan
    stripped = expr.strip()
    if NUMERIC_LITERAL_REGEX.match(stripped):
        value = float(stripped)
        return value if math.isfinite(value) else math.nan

    if not EVAL_CONST_ALLOWED_REGEX.match(expr):
        return math.nan

    try:
        evaluable = compile_expression(stripped)
    except CompileError:
        return math.nan
    return evaluable.evaluate({})


def clear_compile_cache() -> None:
    compile_expression.cache_clear()
