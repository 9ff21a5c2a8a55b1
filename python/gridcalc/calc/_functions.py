"""Aggregate function library (SUM, AVERAGE, COUNT, MIN, MAX)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

AggregateFn = Callable[[list[float]], "int | float"]

FUNCTION_NAMES: tuple[str, ...] = ("SUM", "AVERAGE", "COUNT", "MIN", "MAX")


def is_supported(func_name: str) -> bool:
    """Check if a function name is one of the builtin aggregates."""
    return func_name.upper() in FUNCTION_NAMES


# ---------------------------------------------------------------------------
# Builtin implementations. Each takes the resolved numbers of one reference
# argument; empty input gives 0 so results are always numeric.
# ---------------------------------------------------------------------------


def _builtin_sum(values: list[float]) -> float:
    return sum(values, 0.0)


def _builtin_average(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _builtin_count(values: list[float]) -> int:
    return len(values)


def _builtin_min(values: list[float]) -> float:
    if not values:
        return 0.0
    return min(values)


def _builtin_max(values: list[float]) -> float:
    if not values:
        return 0.0
    return max(values)


_BUILTINS: dict[str, AggregateFn] = {
    "SUM": _builtin_sum,
    "AVERAGE": _builtin_average,
    "COUNT": _builtin_count,
    "MIN": _builtin_min,
    "MAX": _builtin_max,
}


# ---------------------------------------------------------------------------
# Per-call outcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FunctionResult:
    """Outcome of one function call: a value, or the reason there is none."""

    name: str
    value: int | float | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def value_or_zero(self) -> int | float:
        if self.error is not None or self.value is None:
            return 0
        return self.value


class FunctionRegistry:
    """Registry of aggregate implementations, keyed case-insensitively.

    Starts with the builtins and can be extended with custom functions.
    """

    def __init__(self) -> None:
        self._functions: dict[str, AggregateFn] = dict(_BUILTINS)

    def register(self, name: str, func: AggregateFn) -> None:
        self._functions[name.upper()] = func

    def get(self, name: str) -> AggregateFn | None:
        return self._functions.get(name.upper())

    def has(self, name: str) -> bool:
        return name.upper() in self._functions

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(self._functions.keys())

    def call(self, name: str, values: list[float]) -> FunctionResult:
        """Apply *name* to *values*, capturing failures in the result."""
        canon = name.upper()
        func = self._functions.get(canon)
        if func is None:
            return FunctionResult(canon, error=f"Unknown function {canon}")
        try:
            return FunctionResult(canon, value=func(values))
        except (ArithmeticError, TypeError, ValueError) as e:
            return FunctionResult(canon, error=f"{canon} failed: {e}")
