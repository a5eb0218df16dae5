from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""KeyedRow model for the header-row (keyed) sheet layout.

A KeyedRow is one data row of a sheet whose first non-empty row was accepted as
a header row: values are addressed by the raw header text exactly as the
spreadsheet author typed it.
"""

__all__ = [
    "KeyedRow",
]


@dataclass(frozen=True)
class KeyedRow:
    """Logical representation of a single data row below a header row.

    row_number is the 1-based worksheet row, position is the 1-based index among
    the data rows of the sheet (used as the fallback item ordinal).
    """
    row_number: int
    position: int
    values: dict[str, Any]  # raw header -> raw cell
