"""Sheet: the cell store. Raw contents in, displayed values out."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from gridcalc._config import DEFAULT_CONFIG, GridConfig
from gridcalc._utils import a1_to_rowcol, rowcol_to_a1
from gridcalc.calc._evaluator import SheetEvaluator


class Sheet:
    """Sparse mapping of canonical address -> raw content.

    Only non-blank contents are stored, so an absent key is an empty cell.
    Displayed values are never stored; :meth:`display` recomputes them from
    the current contents on every call.
    """

    __slots__ = ("_config", "_cells", "_evaluator")

    def __init__(self, config: GridConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._cells: dict[str, str] = {}
        self._evaluator: SheetEvaluator | None = None

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, str],
        config: GridConfig = DEFAULT_CONFIG,
    ) -> Sheet:
        """Build a sheet from ``{address: raw}``, skipping blank values."""
        sheet = cls(config)
        for address, value in data.items():
            sheet.set(address, value)
        return sheet

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def evaluator(self) -> SheetEvaluator:
        if self._evaluator is None:
            self._evaluator = SheetEvaluator(self, self._config)
        return self._evaluator

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    def address(self, row: int, col: int) -> str:
        """Canonical address of 1-based ``(row, col)``; must be on the grid."""
        if not self._config.contains(row, col):
            raise ValueError(
                f"Cell ({row}, {col}) outside {self._config.rows}x{self._config.cols} grid"
            )
        return rowcol_to_a1(row, col)

    def _canonical(self, ref: str) -> str:
        return self.address(*a1_to_rowcol(ref))

    # ------------------------------------------------------------------
    # Raw content
    # ------------------------------------------------------------------

    def get(self, address: str) -> str:
        """Raw content of *address*, ``""`` when empty or off the grid."""
        try:
            key = self._canonical(address)
        except ValueError:
            return ""
        return self._cells.get(key, "")

    def set(self, address: str, value: str) -> None:
        """Store *value* as given, or clear the cell when it is blank."""
        key = self._canonical(address)
        if value.strip() == "":
            self._cells.pop(key, None)
        else:
            self._cells[key] = value

    def delete(self, address: str) -> None:
        self._cells.pop(self._canonical(address), None)

    def __getitem__(self, address: str) -> str:
        return self.get(address)

    def __setitem__(self, address: str, value: str) -> None:
        self.set(address, value)

    def __delitem__(self, address: str) -> None:
        self.delete(address)

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, str):
            return False
        try:
            return self._canonical(address) in self._cells
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def snapshot(self) -> dict[str, str]:
        """Copy of the stored raw contents."""
        return dict(self._cells)

    # ------------------------------------------------------------------
    # Displayed values
    # ------------------------------------------------------------------

    def display(self, address: str) -> str:
        """What the grid shows for *address*: evaluated formula or raw text."""
        return self.evaluator.evaluate_cell(self._canonical(address))

    def iter_rows(
        self,
        min_row: int | None = None,
        max_row: int | None = None,
        min_col: int | None = None,
        max_col: int | None = None,
        values_only: bool = True,
    ) -> Iterator[tuple[str, ...]]:
        """Iterate rows of displayed values (or addresses when not *values_only*)."""
        r_min = min_row or 1
        r_max = max_row or self._config.rows
        c_min = min_col or 1
        c_max = max_col or self._config.cols

        for r in range(r_min, r_max + 1):
            addresses = [self.address(r, c) for c in range(c_min, c_max + 1)]
            if values_only:
                yield tuple(self.evaluator.evaluate_cell(a) for a in addresses)
            else:
                yield tuple(addresses)

    def __repr__(self) -> str:
        return f"<Sheet {self._config.rows}x{self._config.cols} cells={len(self._cells)}>"
