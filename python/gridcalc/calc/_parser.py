"""Formula parser: regex tokenizer + recursive descent into an expression tree.

A formula body is turned into a small immutable tree before anything is
evaluated, so aggregate calls and cell references are recognized once, in
left-to-right order, instead of being rewritten inside the formula text.

Grammar (lowest precedence first)::

    expr    = term (("+" | "-") term)*
    term    = unary (("*" | "/") unary)*
    unary   = ("+" | "-") unary | power
    power   = primary ("^" unary)?
    primary = NUMBER | CELL | CALL | "(" expr ")"

``^`` is right-associative and binds tighter than a leading minus, so
``-2^2`` is ``-(2^2)`` while ``2^-1`` is ``2^(-1)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from gridcalc._config import FUNCTION_COLUMNS
from gridcalc.calc._errors import FormulaSyntaxError

# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
# Letters, optionally followed by a row number (a cell reference candidate).
_WORD_RE = re.compile(r"([A-Za-z]+)(\d*)")
# Function call: name "(" argument ")" where the argument runs to the first ")".
_CALL_RE = re.compile(r"([A-Za-z]+)\s*\(\s*([^)]*?)\s*\)")
_OPERATORS = frozenset("+-*/^")


# ---------------------------------------------------------------------------
# Expression tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Number:
    value: int | float


@dataclass(frozen=True)
class CellRef:
    address: str  # canonical, e.g. "B12"


@dataclass(frozen=True)
class FunctionCall:
    name: str  # upper-cased
    argument: str  # raw reference token, trimmed


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: Node


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: Node
    right: Node


Node = Union[Number, CellRef, FunctionCall, UnaryOp, BinaryOp]


@dataclass(frozen=True)
class Token:
    kind: str  # "num" | "cell" | "call" | "op" | "(" | ")"
    text: str
    pos: int
    value: object = None


def strip_formula(formula: str) -> str:
    """Drop the leading ``=`` and surrounding whitespace from a formula."""
    body = formula.strip()
    if body.startswith("="):
        body = body[1:]
    return body.strip()


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


def tokenize(body: str, columns: str = FUNCTION_COLUMNS) -> list[Token]:
    """Split a formula body into tokens.

    Cell references are a single upper-case letter from *columns* followed
    by a row number; any other letter run that is not a function call is a
    syntax error.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(body)

    while pos < length:
        ws = _WHITESPACE_RE.match(body, pos)
        if ws:
            pos = ws.end()
            continue

        ch = body[pos]

        if ch in _OPERATORS:
            tokens.append(Token("op", ch, pos))
            pos += 1
            continue
        if ch in "()":
            tokens.append(Token(ch, ch, pos))
            pos += 1
            continue

        num = _NUMBER_RE.match(body, pos)
        if num:
            text = num.group(0)
            try:
                value: int | float = int(text) if text.isdigit() else float(text)
            except ValueError:
                # Past the int-string digit limit; reads as an overflowing float.
                value = float(text)
            tokens.append(Token("num", text, pos, value))
            pos = num.end()
            continue

        call = _CALL_RE.match(body, pos)
        if call:
            name, arg = call.group(1).upper(), call.group(2)
            if not arg:
                raise FormulaSyntaxError(f"{name}() needs a reference argument", pos)
            tokens.append(Token("call", call.group(0), pos, (name, arg)))
            pos = call.end()
            continue

        word = _WORD_RE.match(body, pos)
        if word:
            letters, digits = word.group(1), word.group(2)
            if digits and len(letters) == 1 and letters in columns:
                try:
                    address = f"{letters}{int(digits)}"
                except ValueError as e:
                    raise FormulaSyntaxError(f"Row number too long in {letters}", pos) from e
                tokens.append(Token("cell", word.group(0), pos, address))
                pos = word.end()
                continue
            raise FormulaSyntaxError(f"Unknown name {word.group(0)!r}", pos)

        raise FormulaSyntaxError(f"Unexpected character {ch!r}", pos)

    return tokens


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class FormulaParser:
    """Recursive descent parser producing a :data:`Node` tree.

    Usage::

        tree = FormulaParser().parse("SUM(A1:A3)*2")
    """

    def __init__(self, columns: str = FUNCTION_COLUMNS) -> None:
        self._columns = columns
        self._tokens: list[Token] = []
        self._index = 0

    def parse(self, formula: str) -> Node:
        """Parse a formula (with or without the leading ``=``)."""
        body = strip_formula(formula)
        if not body:
            raise FormulaSyntaxError("Empty formula")
        self._tokens = tokenize(body, self._columns)
        self._index = 0
        node = self._expr()
        if self._index < len(self._tokens):
            tok = self._tokens[self._index]
            raise FormulaSyntaxError(f"Unexpected {tok.text!r}", tok.pos)
        return node

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _accept_op(self, ops: str) -> str | None:
        tok = self._peek()
        if tok is not None and tok.kind == "op" and tok.text in ops:
            self._index += 1
            return tok.text
        return None

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def _expr(self) -> Node:
        node = self._term()
        while True:
            op = self._accept_op("+-")
            if op is None:
                return node
            node = BinaryOp(op, node, self._term())

    def _term(self) -> Node:
        node = self._unary()
        while True:
            op = self._accept_op("*/")
            if op is None:
                return node
            node = BinaryOp(op, node, self._unary())

    def _unary(self) -> Node:
        op = self._accept_op("+-")
        if op is not None:
            return UnaryOp(op, self._unary())
        return self._power()

    def _power(self) -> Node:
        base = self._primary()
        if self._accept_op("^") is not None:
            # Right operand may itself carry a sign or another "^".
            return BinaryOp("^", base, self._unary())
        return base

    def _primary(self) -> Node:
        tok = self._peek()
        if tok is None:
            raise FormulaSyntaxError("Unexpected end of formula")
        self._index += 1

        if tok.kind == "num":
            return Number(tok.value)  # type: ignore[arg-type]
        if tok.kind == "cell":
            return CellRef(tok.value)  # type: ignore[arg-type]
        if tok.kind == "call":
            name, arg = tok.value  # type: ignore[misc]
            return FunctionCall(name, arg)
        if tok.kind == "(":
            node = self._expr()
            close = self._peek()
            if close is None or close.kind != ")":
                raise FormulaSyntaxError("Missing closing parenthesis", tok.pos)
            self._index += 1
            return node
        raise FormulaSyntaxError(f"Unexpected {tok.text!r}", tok.pos)


def parse_formula(formula: str, columns: str = FUNCTION_COLUMNS) -> Node:
    """Parse *formula* into an expression tree."""
    return FormulaParser(columns).parse(formula)
