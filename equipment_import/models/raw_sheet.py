from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

"""Raw sheet model produced by the workbook reader.

A RawSheet is the decoded, still uninterpreted content of one worksheet:
a rectangular grid of cell values. It is immutable and is discarded once
the sheet has been classified and mapped.
"""

__all__ = [
    "Cell",
    "RawSheet",
    "is_empty",
]

Cell = Union[str, int, float, datetime, None]


@dataclass(frozen=True)
class RawSheet:
    """Decoded worksheet: name plus a grid of raw cells (row-major)."""
    name: str
    grid: tuple[tuple[Cell, ...], ...]

    @property
    def row_count(self) -> int:
        return len(self.grid)

    def is_blank(self) -> bool:
        """True when every cell of the sheet is empty."""
        return all(is_empty(c) for row in self.grid for c in row)


def is_empty(value: Cell) -> bool:
    """Empty cell check (None or whitespace-only string)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False
