"""CellSource protocol: the read side of a cell store as the engine sees it."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class CellSource(Protocol):
    """Anything that maps a canonical address to raw cell content."""

    def get(self, address: str) -> str | None:
        """Raw content of *address*, or ``None``/``""`` when empty."""
        ...


class MappingSource:
    """Read-only :class:`CellSource` over a plain ``{address: raw}`` snapshot."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, str]) -> None:
        self._data = data

    def get(self, address: str) -> str | None:
        return self._data.get(address)

    def __repr__(self) -> str:
        return f"<MappingSource cells={len(self._data)}>"
