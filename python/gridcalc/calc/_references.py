"""Reference tokens (column, column range, cell range) -> numeric values."""

from __future__ import annotations

import logging
import re

from gridcalc._config import DEFAULT_CONFIG, GridConfig
from gridcalc._utils import column_index, rowcol_to_a1
from gridcalc.calc._protocol import CellSource

logger = logging.getLogger(__name__)

# Leading numeric prefix; trailing text is ignored ("12abc" -> 12.0).
_NUMBER_PREFIX_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_CELL_RANGE_RE = re.compile(r"^([A-Z])(\d+)\s*:\s*([A-Z])(\d+)$")


def parse_number(raw: str | None) -> float | None:
    """Parse the numeric prefix of a literal, or ``None`` if there is none."""
    if not raw:
        return None
    m = _NUMBER_PREFIX_RE.match(raw)
    if not m:
        return None
    return float(m.group(1))


def is_formula(raw: str | None) -> bool:
    return bool(raw) and raw.startswith("=")  # type: ignore[union-attr]


def expand_column(col: int, config: GridConfig = DEFAULT_CONFIG) -> list[str]:
    """All addresses of a 1-based column, top to bottom."""
    if not 1 <= col <= config.cols:
        return []
    return [rowcol_to_a1(r, col) for r in range(1, config.rows + 1)]


def expand_range(
    start: tuple[int, int],
    end: tuple[int, int],
    config: GridConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Addresses of the block spanned by two ``(row, col)`` corners.

    Corners may be given in any order. The block is read row-major and
    clipped to the grid.
    """
    r_min, r_max = min(start[0], end[0]), max(start[0], end[0])
    c_min, c_max = min(start[1], end[1]), max(start[1], end[1])
    r_min, r_max = max(r_min, 1), min(r_max, config.rows)
    c_min, c_max = max(c_min, 1), min(c_max, config.cols)

    cells: list[str] = []
    for r in range(r_min, r_max + 1):
        for c in range(c_min, c_max + 1):
            cells.append(rowcol_to_a1(r, c))
    return cells


class ReferenceResolver:
    """Turns an aggregate argument token into the numbers it denotes.

    Recognized forms, tried in order:

    1. ``A:C`` column range. Only the first letter is used, so ``A:C``
       reads column A alone.
    2. ``A1:B10`` cell range (any corner order).
    3. ``A`` bare column.

    Column forms are limited to ``config.function_columns`` (A-J by
    default) even on wider grids. Formula cells are skipped and
    non-numeric literals contribute nothing. Anything else resolves to an
    empty list.
    """

    def __init__(self, cells: CellSource, config: GridConfig = DEFAULT_CONFIG) -> None:
        self._cells = cells
        self._config = config
        letters = re.escape(config.function_columns)
        self._col_range_re = re.compile(rf"^[{letters}]:[{letters}]$")
        self._column_re = re.compile(rf"^[{letters}]$")

    def addresses(self, token: str) -> list[str]:
        """Addresses a token covers, in row-major order."""
        token = token.strip()
        if not token:
            return []

        if self._col_range_re.match(token):
            return expand_column(column_index(token[0]), self._config)

        m = _CELL_RANGE_RE.match(token)
        if m:
            try:
                start = (int(m.group(2)), column_index(m.group(1)))
                end = (int(m.group(4)), column_index(m.group(3)))
            except ValueError:
                logger.debug("Row number too long in range %r", token)
                return []
            return expand_range(start, end, self._config)

        if self._column_re.match(token):
            return expand_column(column_index(token), self._config)

        logger.debug("Unrecognized reference token %r", token)
        return []

    def resolve(self, token: str) -> list[float]:
        """Numeric contributions of every literal cell the token covers."""
        values: list[float] = []
        for address in self.addresses(token):
            raw = self._cells.get(address)
            if is_formula(raw):
                continue
            num = parse_number(raw)
            if num is not None:
                values.append(num)
        return values
