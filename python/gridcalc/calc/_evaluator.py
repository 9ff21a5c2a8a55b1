"""SheetEvaluator: recursive formula evaluation over a cell store.

Every read evaluates from scratch: the formula is parsed into a tree,
aggregate calls are resolved against literal cells, single-cell references
are resolved recursively (formula cells included), and the tree is reduced
to a number. Nothing is cached between reads.

Cycle detection follows the direct-reference path only. Each recursive
step carries an immutable ``frozenset`` of the addresses entered so far, so
sibling references never see each other's visits. Cells reached through an
aggregate range are never on that path; aggregates skip formula cells, so
they cannot recurse.
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from gridcalc._config import DEFAULT_CONFIG, GridConfig
from gridcalc.calc._errors import (
    ERROR_VALUE,
    ArithmeticEvaluationError,
    CircularReferenceError,
    FormulaError,
    RecursionDepthError,
)
from gridcalc.calc._functions import FunctionRegistry
from gridcalc.calc._parser import (
    BinaryOp,
    CellRef,
    FormulaParser,
    FunctionCall,
    Node,
    Number,
    UnaryOp,
)
from gridcalc.calc._protocol import CellSource, MappingSource
from gridcalc.calc._references import ReferenceResolver, is_formula, parse_number

logger = logging.getLogger(__name__)

Numeric = int | float

# Largest magnitude printed without an exponent.
_FIXED_LIMIT = 10**21
_EXACT_INT_LIMIT = 2**53
# Interpreter frames used per nested formula: _resolve_cell, evaluate_value
# and the _reduce calls down to the reference, with room for grouping.
_FRAMES_PER_LEVEL = 8
_FRAME_MARGIN = 1000
_MAX_RECURSION_LIMIT = 50_000


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------


def format_number(value: Numeric) -> str:
    """Canonical display string for a numeric result.

    Integral values print without a fraction (``6``), others use the
    shortest round-trip digits (``0.30000000000000004``). Magnitudes from
    1e21 up, and below 1e-6, use exponent notation (``1e+21``, ``1e-7``).
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if abs(value) < _FIXED_LIMIT:
            return str(value)
        try:
            value = float(value)
        except OverflowError as e:
            raise ArithmeticEvaluationError(f"Result too large: {e}") from e

    if not math.isfinite(value):
        raise ArithmeticEvaluationError(f"Non-finite result: {value!r}")
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    text = repr(abs(value))
    mantissa, _, exp = text.partition("e")
    int_part, _, frac = mantissa.partition(".")
    raw_digits = int_part + frac
    digits = raw_digits.lstrip("0")
    # Decimal point sits after ``point`` digits: value = 0.<digits> * 10**point
    point = len(int_part) + (int(exp) if exp else 0) - (len(raw_digits) - len(digits))
    digits = digits.rstrip("0") or "0"

    if len(digits) <= point <= 21:
        body = digits + "0" * (point - len(digits))
    elif 0 < point <= 21:
        body = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        body = "0." + "0" * -point + digits
    else:
        e = point - 1
        head = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
        body = f"{head}e{'+' if e > 0 else '-'}{abs(e)}"
    return sign + body


# ---------------------------------------------------------------------------
# Interpreter stack
# ---------------------------------------------------------------------------


@contextmanager
def _recursion_headroom(levels: int) -> Iterator[None]:
    """Raise the interpreter recursion limit to fit *levels* nested formulas.

    The previous limit is restored on exit. Evaluation is single-threaded,
    so the process-wide setting is not observed by anything else meanwhile.
    """
    previous = sys.getrecursionlimit()
    needed = min(levels * _FRAMES_PER_LEVEL + _FRAME_MARGIN, _MAX_RECURSION_LIMIT)
    if needed > previous:
        sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def _power(left: Numeric, right: Numeric) -> Numeric:
    try:
        result = float(left) ** float(right)
    except (OverflowError, ZeroDivisionError) as e:
        raise ArithmeticEvaluationError(f"{left}^{right}: {e}") from e
    if isinstance(result, complex):
        raise ArithmeticEvaluationError(f"{left}^{right} has no real value")
    if (
        isinstance(left, int)
        and isinstance(right, int)
        and right >= 0
        and abs(result) < _EXACT_INT_LIMIT
    ):
        return left**right
    return result


def _binary_op(op: str, left: Numeric, right: Numeric) -> Numeric:
    """Evaluate one arithmetic operator."""
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if right == 0:
            raise ArithmeticEvaluationError("Division by zero")
        try:
            return left / right
        except OverflowError as e:
            raise ArithmeticEvaluationError(f"{left}/{right}: {e}") from e
    if op == "^":
        return _power(left, right)
    raise FormulaError(f"Unknown operator {op!r}")


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class SheetEvaluator:
    """Evaluates formulas against a :class:`CellSource`.

    Usage::

        ev = SheetEvaluator({"A1": "1", "A2": "2", "A3": "=A1+A2"})
        ev.evaluate("=SUM(A1:A3)")   # "3"  (A3 is a formula, skipped)
        ev.evaluate_cell("A3")       # "3"
    """

    def __init__(
        self,
        cells: CellSource,
        config: GridConfig = DEFAULT_CONFIG,
        functions: FunctionRegistry | None = None,
    ) -> None:
        self._cells = cells
        self._config = config
        self._functions = functions if functions is not None else FunctionRegistry()
        self._parser = FormulaParser(config.function_columns)
        self._resolver = ReferenceResolver(cells, config)

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def evaluate(self, formula: str) -> str:
        """Evaluate *formula* to its display string, or ``#ERROR``.

        This is the only place failures are caught; one bad formula never
        affects another cell's evaluation.
        """
        try:
            with _recursion_headroom(self._config.depth_limit):
                value = self.evaluate_value(formula)
            return format_number(value)
        except FormulaError as e:
            logger.debug("Cannot evaluate formula %r: %s", formula, e)
            return ERROR_VALUE
        except RecursionError:
            logger.debug("Cannot evaluate formula %r: interpreter recursion limit", formula)
            return ERROR_VALUE

    def evaluate_value(self, formula: str, path: frozenset[str] = frozenset()) -> Numeric:
        """Evaluate *formula* to a number, raising :class:`FormulaError`.

        *path* holds the addresses already entered on the way here.
        """
        tree = self._parser.parse(formula)
        return self._reduce(tree, path)

    def evaluate_cell(self, address: str) -> str:
        """Displayed value of a cell: raw text, or the evaluated formula."""
        raw = self._cells.get(address) or ""
        if is_formula(raw):
            return self.evaluate(raw)
        return raw

    # ------------------------------------------------------------------
    # Tree reduction
    # ------------------------------------------------------------------

    def _reduce(self, node: Node, path: frozenset[str]) -> Numeric:
        if isinstance(node, Number):
            return node.value
        if isinstance(node, CellRef):
            return self._resolve_cell(node.address, path)
        if isinstance(node, FunctionCall):
            return self._call_function(node)
        if isinstance(node, UnaryOp):
            operand = self._reduce(node.operand, path)
            return -operand if node.op == "-" else operand
        if isinstance(node, BinaryOp):
            left = self._reduce(node.left, path)
            right = self._reduce(node.right, path)
            return _binary_op(node.op, left, right)
        raise FormulaError(f"Unexpected node {node!r}")

    def _resolve_cell(self, address: str, path: frozenset[str]) -> Numeric:
        """Value of a directly referenced cell.

        Formula cells are evaluated recursively with *address* added to the
        path; literals read as their number, or 0 when not numeric.
        """
        if address in path:
            raise CircularReferenceError(address, path)

        raw = self._cells.get(address) or ""
        if is_formula(raw):
            limit = self._config.depth_limit
            if len(path) >= limit:
                raise RecursionDepthError(address, limit)
            return self.evaluate_value(raw, path | {address})

        num = parse_number(raw)
        return 0 if num is None else num

    def _call_function(self, call: FunctionCall) -> Numeric:
        values = self._resolver.resolve(call.argument)
        result = self._functions.call(call.name, values)
        if result.failed:
            logger.debug("%s(%s) evaluated as 0: %s", call.name, call.argument, result.error)
        return result.value_or_zero()


def evaluate(
    formula: str,
    cells: Mapping[str, str] | CellSource,
    config: GridConfig | None = None,
) -> str:
    """Evaluate *formula* against a snapshot of raw cell contents.

    Returns the canonical number string or ``#ERROR``. *config* defaults to
    the standard 30x20 grid.
    """
    source = MappingSource(dict(cells)) if isinstance(cells, Mapping) else cells
    return SheetEvaluator(source, config or DEFAULT_CONFIG).evaluate(formula)
