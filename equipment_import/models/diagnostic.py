from __future__ import annotations

import json
from dataclasses import asdict, dataclass

"""Diagnostic model for opt-in ingestion auditing.

The engine never raises for rejected rows or unmapped columns; callers who want
to know what was dropped ask for diagnostics and receive these records.
Each record serializes to a single JSON line with a fixed key set so that the
diagnostics log stays machine readable.
"""

__all__ = [
    "Diagnostic",
    "SHAPE_FALLBACK",
    "ROW_REJECTED",
    "ROW_SKIPPED",
    "FIELD_UNMAPPED",
    "AMBIGUOUS_HEADER",
    "SHEET_UNCLASSIFIED",
    "FILE_DECODE_ERROR",
]

SHAPE_FALLBACK = "SHAPE_FALLBACK"
ROW_REJECTED = "ROW_REJECTED"
ROW_SKIPPED = "ROW_SKIPPED"
FIELD_UNMAPPED = "FIELD_UNMAPPED"
AMBIGUOUS_HEADER = "AMBIGUOUS_HEADER"
SHEET_UNCLASSIFIED = "SHEET_UNCLASSIFIED"
FILE_DECODE_ERROR = "FILE_DECODE_ERROR"


@dataclass(frozen=True)
class Diagnostic:
    """A single note about something the engine skipped or guessed.

    Attributes:
        sheet: Sheet name ("<FILE_LEVEL>" for whole-file problems)
        row: 1-based sheet row. -1 for sheet-level notes where no row applies
        kind: Classification in UPPER_SNAKE_CASE
        detail: Human readable description
    """
    sheet: str
    row: int  # 行番号。シート単位の記録は -1
    kind: str
    detail: str

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
