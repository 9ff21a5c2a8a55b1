"""EditSession: selection cursor and edit buffer driving a Sheet.

A cell is either displayed (its evaluated value) or being edited (its raw
text). Committing writes the buffer back to the sheet without checking
formula syntax; a bad formula shows ``#ERROR`` on the next read.
"""

from __future__ import annotations

import logging

from gridcalc._sheet import Sheet

logger = logging.getLogger(__name__)


class EditSession:
    """Interactive editing state over a :class:`Sheet`.

    Rows and columns are 1-based. The selection is always clamped to the grid.
    """

    __slots__ = ("_sheet", "_row", "_col", "_editing", "_buffer")

    def __init__(self, sheet: Sheet) -> None:
        self._sheet = sheet
        self._row = 1
        self._col = 1
        self._editing: tuple[int, int] | None = None
        self._buffer = ""

    @property
    def sheet(self) -> Sheet:
        return self._sheet

    @property
    def selected(self) -> tuple[int, int]:
        return (self._row, self._col)

    @property
    def selected_address(self) -> str:
        return self._sheet.address(self._row, self._col)

    @property
    def editing(self) -> tuple[int, int] | None:
        """Cell being edited, or ``None`` while idle."""
        return self._editing

    @property
    def is_editing(self) -> bool:
        return self._editing is not None

    @property
    def buffer(self) -> str:
        return self._buffer

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _clamp(self, row: int, col: int) -> tuple[int, int]:
        config = self._sheet.config
        return (max(1, min(config.rows, row)), max(1, min(config.cols, col)))

    def select(self, row: int, col: int) -> None:
        """Select a cell, leaving edit mode without committing."""
        self._row, self._col = self._clamp(row, col)
        self._editing = None

    def move(self, row_delta: int, col_delta: int) -> None:
        self.select(self._row + row_delta, self._col + col_delta)

    def tab(self, backwards: bool = False) -> None:
        """Commit any edit, move one column and start editing there."""
        if self._editing is not None:
            self.commit()
        self.move(0, -1 if backwards else 1)
        self.begin_edit()

    def enter(self) -> None:
        """Commit and edit the cell below, or start editing when idle."""
        if self._editing is not None:
            self.commit()
            self.move(1, 0)
        self.begin_edit()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def begin_edit(self, initial: str | None = None) -> None:
        """Enter edit mode on the selected cell.

        With no *initial* text the buffer holds the raw content verbatim,
        including a leading ``=``. Typing a character or clearing the cell
        passes that text instead.
        """
        self._editing = (self._row, self._col)
        if initial is None:
            self._buffer = self._sheet.get(self.selected_address)
        else:
            self._buffer = initial

    def update(self, text: str) -> None:
        if self._editing is None:
            raise RuntimeError("update() requires an active edit")
        self._buffer = text

    def commit(self) -> None:
        """Write the buffer to the edited cell; a blank buffer clears it."""
        if self._editing is None:
            return
        address = self._sheet.address(*self._editing)
        self._sheet.set(address, self._buffer)
        logger.debug("Committed %s = %r", address, self._buffer)
        self._editing = None
        self._buffer = ""

    def cancel(self) -> None:
        self._editing = None
        self._buffer = ""

    def delete_selected(self) -> None:
        self._sheet.delete(self.selected_address)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def displayed(self, row: int, col: int) -> str:
        """Edit buffer for the cell being edited, displayed value otherwise."""
        if self._editing == (row, col):
            return self._buffer
        return self._sheet.display(self._sheet.address(row, col))
