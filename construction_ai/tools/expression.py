"""Safe arithmetic expression evaluation over a variable-binding map.

Supports numbers, identifiers bound in ``variables``, ``+ - * / %``,
``^`` / ``**`` (right-associative power), unary minus, parentheses, the
constant ``pi`` and the functions ``sqrt abs min max round ceil floor``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

_TOKEN_RE = re.compile(
    r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<op>\*\*|[-+*/%^(),])
    | (?P<space>\s+)
    """,
    re.VERBOSE,
)

# Nested parentheses and unary operators allowed before evaluation is refused
MAX_NESTING_DEPTH = 100

CONSTANTS: dict[str, float] = {"pi": math.pi}

FUNCTIONS: dict[str, Callable[..., float]] = {
    "sqrt": math.sqrt,
    "abs": abs,
    "min": min,
    "max": max,
    "round": lambda value, ndigits=0: round(value, int(ndigits)),
    "ceil": math.ceil,
    "floor": math.floor,
}


class ExpressionError(ValueError):
    """Malformed expression, unknown name or arithmetic failure."""


@dataclass(frozen=True)
class Token:
    kind: str  # "number" | "name" | "op" | "end"
    text: str
    position: int


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    position = 0
    while position < len(source):
        match = _TOKEN_RE.match(source, position)
        if match is None:
            raise ExpressionError(f"Unexpected character {source[position]!r} at position {position}")
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind, match.group(), position))
        position = match.end()
    tokens.append(Token("end", "", position))
    return tokens


class _Parser:
    """Recursive-descent evaluator.

    expr    := term (("+" | "-") term)*
    term    := unary (("*" | "/" | "%") unary)*
    unary   := ("-" | "+") unary | power
    power   := primary (("^" | "**") unary)?
    primary := number | name | name "(" args ")" | "(" expr ")"
    """

    def __init__(self, tokens: list[Token], variables: Mapping[str, float]):
        self.tokens = tokens
        self.variables = variables
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _expect(self, text: str) -> None:
        if self.current.text != text:
            raise ExpressionError(f"Expected {text!r} at position {self.current.position}")
        self._advance()

    def parse(self) -> float:
        value = self._expr()
        if self.current.kind != "end":
            raise ExpressionError(f"Unexpected {self.current.text!r} at position {self.current.position}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while self.current.text in ("+", "-"):
            op = self._advance().text
            right = self._term()
            value = value + right if op == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._unary()
        while self.current.text in ("*", "/", "%"):
            op = self._advance().text
            right = self._unary()
            if op == "*":
                value = value * right
            elif right == 0:
                raise ExpressionError("Division by zero")
            elif op == "/":
                value = value / right
            else:
                value = value % right
        return value

    def _unary(self) -> float:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise ExpressionError(f"Expression nested deeper than {MAX_NESTING_DEPTH} levels")
        try:
            if self.current.text == "-":
                self._advance()
                return -self._unary()
            if self.current.text == "+":
                self._advance()
                return self._unary()
            return self._power()
        finally:
            self.depth -= 1

    def _power(self) -> float:
        base = self._primary()
        if self.current.text in ("^", "**"):
            self._advance()
            exponent = self._unary()
            try:
                result = base**exponent
            except (OverflowError, ZeroDivisionError) as e:
                raise ExpressionError(str(e)) from e
            if isinstance(result, complex):
                raise ExpressionError("Power produced a complex number")
            return result
        return base

    def _primary(self) -> float:
        token = self._advance()
        if token.kind == "number":
            return float(token.text)
        if token.kind == "name":
            if self.current.text == "(":
                return self._call(token)
            if token.text in self.variables:
                return self.variables[token.text]
            if token.text in CONSTANTS:
                return CONSTANTS[token.text]
            raise ExpressionError(f"Unknown variable: {token.text}")
        if token.text == "(":
            value = self._expr()
            self._expect(")")
            return value
        raise ExpressionError(f"Unexpected {token.text or 'end of input'!r} at position {token.position}")

    def _call(self, name: Token) -> float:
        function = FUNCTIONS.get(name.text)
        if function is None:
            raise ExpressionError(f"Unknown function: {name.text}")
        self._expect("(")
        args = []
        if self.current.text != ")":
            args.append(self._expr())
            while self.current.text == ",":
                self._advance()
                args.append(self._expr())
        self._expect(")")
        try:
            return float(function(*args))
        except (TypeError, ValueError, OverflowError) as e:
            raise ExpressionError(f"Invalid arguments for {name.text}(): {e}") from e


def evaluate(expression: str, variables: Mapping[str, float] | None = None) -> float:
    """Evaluate ``expression`` with names resolved from ``variables``.

    Raises:
        ExpressionError: On any syntax, name or arithmetic error
    """
    return _Parser(tokenize(expression), variables or {}).parse()
