"""gridcalc.calc - Formula evaluation engine for gridcalc sheets."""

from gridcalc.calc._errors import (
    ERROR_VALUE,
    ArithmeticEvaluationError,
    CircularReferenceError,
    FormulaError,
    FormulaSyntaxError,
    RecursionDepthError,
)
from gridcalc.calc._evaluator import SheetEvaluator, evaluate, format_number
from gridcalc.calc._functions import FUNCTION_NAMES, FunctionRegistry, FunctionResult, is_supported
from gridcalc.calc._parser import FormulaParser, parse_formula
from gridcalc.calc._protocol import CellSource, MappingSource
from gridcalc.calc._references import ReferenceResolver, parse_number

__all__ = [
    "ERROR_VALUE",
    "ArithmeticEvaluationError",
    "CellSource",
    "CircularReferenceError",
    "FUNCTION_NAMES",
    "FormulaError",
    "FormulaParser",
    "FormulaSyntaxError",
    "FunctionRegistry",
    "FunctionResult",
    "MappingSource",
    "RecursionDepthError",
    "ReferenceResolver",
    "SheetEvaluator",
    "evaluate",
    "format_number",
    "is_supported",
    "parse_formula",
    "parse_number",
]
