"""Tests for gridcalc.calc function registry and builtins."""

from __future__ import annotations

import pytest

from gridcalc.calc._functions import (
    _BUILTINS,
    FUNCTION_NAMES,
    FunctionRegistry,
    FunctionResult,
    is_supported,
)


class TestNames:
    def test_five_aggregates(self) -> None:
        assert FUNCTION_NAMES == ("SUM", "AVERAGE", "COUNT", "MIN", "MAX")
        assert set(_BUILTINS) == set(FUNCTION_NAMES)

    def test_is_supported_case_insensitive(self) -> None:
        assert is_supported("sum")
        assert is_supported("Average")
        assert not is_supported("IF")
        assert not is_supported("CONCATENATE")


class TestBuiltins:
    def test_sum(self) -> None:
        assert _BUILTINS["SUM"]([1.0, 2.0, 3.0]) == 6.0

    def test_average(self) -> None:
        assert _BUILTINS["AVERAGE"]([1.0, 2.0]) == 1.5

    def test_count(self) -> None:
        assert _BUILTINS["COUNT"]([4.0, 5.0, 6.0]) == 3

    def test_min_max(self) -> None:
        assert _BUILTINS["MIN"]([3.0, -1.0, 2.0]) == -1.0
        assert _BUILTINS["MAX"]([3.0, -1.0, 2.0]) == 3.0

    @pytest.mark.parametrize("name", FUNCTION_NAMES)
    def test_empty_input_is_zero(self, name: str) -> None:
        assert _BUILTINS[name]([]) == 0


class TestFunctionResult:
    def test_ok(self) -> None:
        res = FunctionResult("SUM", value=3.0)
        assert res.ok
        assert not res.failed
        assert res.value_or_zero() == 3.0

    def test_failed_folds_to_zero(self) -> None:
        res = FunctionResult("SUM", error="boom")
        assert not res.ok
        assert res.failed
        assert res.value_or_zero() == 0

    def test_registry_failure_reports_failed(self) -> None:
        res = FunctionRegistry().call("VLOOKUP", [1.0])
        assert res.failed
        assert res.ok is not res.failed


class TestFunctionRegistry:
    def test_builtins_registered(self) -> None:
        reg = FunctionRegistry()
        assert reg.supported_functions == frozenset(FUNCTION_NAMES)

    def test_case_insensitive_lookup(self) -> None:
        reg = FunctionRegistry()
        assert reg.get("sum") is reg.get("SUM")
        assert reg.has("max")

    def test_custom_registration(self) -> None:
        reg = FunctionRegistry()
        reg.register("double_sum", lambda values: 2 * sum(values))
        assert reg.has("DOUBLE_SUM")
        assert reg.call("Double_Sum", [1.0, 2.0]).value == 6.0

    def test_call(self) -> None:
        res = FunctionRegistry().call("average", [2.0, 4.0])
        assert res.ok
        assert res.name == "AVERAGE"
        assert res.value == 3.0

    def test_unknown_function(self) -> None:
        res = FunctionRegistry().call("VLOOKUP", [1.0])
        assert not res.ok
        assert res.value_or_zero() == 0

    def test_failure_captured(self) -> None:
        reg = FunctionRegistry()
        reg.register("BOOM", lambda values: 1 / 0)
        res = reg.call("BOOM", [])
        assert not res.ok
        assert "BOOM" in (res.error or "")
