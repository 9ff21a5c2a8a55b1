"""Grid dimensions and engine limits."""

from __future__ import annotations

from dataclasses import dataclass

# Aggregate functions only understand columns A-J, whatever the grid width.
FUNCTION_COLUMNS = "ABCDEFGHIJ"


@dataclass(frozen=True)
class GridConfig:
    """Fixed dimensions of a sheet plus the evaluator's recursion guard.

    ``max_depth`` bounds nested formula resolution; ``None`` means one level
    per grid cell, which no acyclic chain can exceed.
    """

    rows: int = 30
    cols: int = 20
    max_depth: int | None = None
    function_columns: str = FUNCTION_COLUMNS

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid must have at least one cell, got {self.rows}x{self.cols}")
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @property
    def depth_limit(self) -> int:
        if self.max_depth is not None:
            return self.max_depth
        return self.rows * self.cols

    def contains(self, row: int, col: int) -> bool:
        """True when 1-based ``(row, col)`` lies inside the grid."""
        return 1 <= row <= self.rows and 1 <= col <= self.cols


DEFAULT_CONFIG = GridConfig()
