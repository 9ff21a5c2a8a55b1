"""Tests for gridcalc EditSession (selection + edit buffer)."""

from __future__ import annotations

import pytest

from gridcalc import ERROR_VALUE, EditSession, GridConfig, Sheet


def _session(rows: int = 30, cols: int = 20) -> EditSession:
    return EditSession(Sheet(GridConfig(rows=rows, cols=cols)))


class TestSelection:
    def test_starts_at_a1(self) -> None:
        s = _session()
        assert s.selected == (1, 1)
        assert s.selected_address == "A1"
        assert not s.is_editing

    def test_select_clamped(self) -> None:
        s = _session(rows=3, cols=2)
        s.select(100, 100)
        assert s.selected == (3, 2)
        s.select(-5, 0)
        assert s.selected == (1, 1)

    def test_move(self) -> None:
        s = _session()
        s.move(2, 1)
        assert s.selected_address == "B3"
        s.move(-10, 0)
        assert s.selected_address == "B1"

    def test_select_leaves_edit_mode(self) -> None:
        s = _session()
        s.begin_edit("9")
        s.select(2, 2)
        assert not s.is_editing
        assert s.sheet["A1"] == ""


class TestEditing:
    def test_begin_edit_captures_raw_formula(self) -> None:
        s = _session()
        s.sheet["A1"] = "=A2+1"
        s.begin_edit()
        assert s.editing == (1, 1)
        assert s.buffer == "=A2+1"
        assert s.displayed(1, 1) == "=A2+1"

    def test_commit_writes_back(self) -> None:
        s = _session()
        s.begin_edit()
        s.update("=2*3")
        s.commit()
        assert not s.is_editing
        assert s.sheet["A1"] == "=2*3"
        assert s.displayed(1, 1) == "6"

    def test_commit_blank_deletes(self) -> None:
        s = _session()
        s.sheet["A1"] = "5"
        s.begin_edit("")
        s.commit()
        assert "A1" not in s.sheet

    def test_commit_does_not_validate(self) -> None:
        s = _session()
        s.begin_edit("=SUM(")
        s.commit()
        assert s.sheet["A1"] == "=SUM("
        assert s.displayed(1, 1) == ERROR_VALUE

    def test_typed_character_starts_edit(self) -> None:
        s = _session()
        s.sheet["A1"] = "old"
        s.begin_edit("7")
        assert s.buffer == "7"

    def test_cancel_discards(self) -> None:
        s = _session()
        s.sheet["A1"] = "1"
        s.begin_edit()
        s.update("2")
        s.cancel()
        assert s.sheet["A1"] == "1"
        assert s.buffer == ""

    def test_commit_when_idle_is_noop(self) -> None:
        s = _session()
        s.commit()
        assert len(s.sheet) == 0

    def test_update_requires_edit(self) -> None:
        with pytest.raises(RuntimeError):
            _session().update("x")

    def test_tab_commits_and_edits_next(self) -> None:
        s = _session()
        s.begin_edit("1")
        s.tab()
        assert s.sheet["A1"] == "1"
        assert s.editing == (1, 2)
        s.update("=A1+1")
        s.tab(backwards=True)
        assert s.sheet["B1"] == "=A1+1"
        assert s.editing == (1, 1)
        assert s.buffer == "1"

    def test_enter_when_idle_begins_edit(self) -> None:
        s = _session()
        s.sheet["A1"] = "=2*3"
        s.enter()
        assert s.editing == (1, 1)
        assert s.buffer == "=2*3"

    def test_enter_commits_and_edits_below(self) -> None:
        s = _session()
        s.sheet["A2"] = "7"
        s.begin_edit("=A2+1")
        s.enter()
        assert s.sheet["A1"] == "=A2+1"
        assert s.sheet.display("A1") == "8"
        assert s.editing == (2, 1)
        assert s.buffer == "7"

    def test_enter_on_last_row_stays_put(self) -> None:
        s = _session(rows=2, cols=2)
        s.select(2, 2)
        s.begin_edit("5")
        s.enter()
        assert s.sheet["B2"] == "5"
        assert s.editing == (2, 2)
        assert s.buffer == "5"

    def test_delete_selected(self) -> None:
        s = _session()
        s.sheet["B2"] = "3"
        s.select(2, 2)
        s.delete_selected()
        assert s.sheet["B2"] == ""

    def test_displayed_other_cells_evaluated(self) -> None:
        s = _session()
        s.sheet["A1"] = "2"
        s.sheet["A2"] = "=A1^3"
        s.begin_edit()
        assert s.displayed(2, 1) == "8"
