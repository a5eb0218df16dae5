from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..config.loader import SectionMarkers
from ..models.raw_sheet import Cell, RawSheet, is_empty
from ..models.row_data import KeyedRow
from ..services.section_tracker import is_section_marker
from ..services.text import cell_text

"""Row shape classification (keyed vs positional) per sheet.

The same application has produced workbooks in two shapes over the years, and
a single file may mix them sheet by sheet. Keyed extraction is attempted first:
the first non-blank row becomes the header row and each later non-blank row a
KeyedRow. When that raises HeaderRowError or yields no rows, the sheet falls
back to positional rows (plain ordered cells) for the section tracker.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ShapeError",
    "HeaderRowError",
    "SheetShape",
    "ClassifiedSheet",
    "MIN_HEADER_MATCHES",
    "extract_keyed_rows",
    "classify_sheet",
]

# ヘッダ行と認めるのに必要な、既知 alias に一致する見出しの最小数
MIN_HEADER_MATCHES = 2


class ShapeError(Exception):
    """Base class for keyed-extraction structural failures."""


class HeaderRowError(ShapeError):
    """Raised when a sheet has no usable header row."""


class SheetShape(Enum):
    KEYED = "keyed"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class ClassifiedSheet:
    sheet: RawSheet
    shape: SheetShape
    headers: list[str] = field(default_factory=list)
    keyed_rows: list[KeyedRow] = field(default_factory=list)
    fallback_reason: str | None = None

    @property
    def positional_rows(self) -> tuple[tuple[Cell, ...], ...]:
        return self.sheet.grid


def _dedupe_headers(raw: list[str | None]) -> list[str | None]:
    # 重複見出しは pandas と同様に "名前.1", "名前.2" とする
    # 既存の見出しと衝突する接尾辞は飛ばす (["A", "A.1", "A"] -> "A.2")
    used: set[str] = set()
    counts: dict[str, int] = {}
    result: list[str | None] = []
    for name in raw:
        if name is None:
            result.append(None)
            continue
        if name in used:
            count = counts.get(name, 0) + 1
            while f"{name}.{count}" in used:
                count += 1
            counts[name] = count
            name = f"{name}.{count}"
        used.add(name)
        result.append(name)
    return result


def extract_keyed_rows(
    sheet: RawSheet,
    header_predicate: Callable[[str], bool],
    markers: SectionMarkers,
) -> tuple[list[str], list[KeyedRow]]:
    """Interpret the sheet through its first non-blank row.

    Raises:
        HeaderRowError: the sheet is empty, uses section markers (legacy
            layout), or fewer than MIN_HEADER_MATCHES header cells satisfy
            ``header_predicate``.
    """
    grid = sheet.grid
    header_index = next(
        (i for i, row in enumerate(grid) if not all(is_empty(c) for c in row)), None
    )
    if header_index is None:
        raise HeaderRowError(f"sheet '{sheet.name}' has no rows")

    if any(row and is_section_marker(row[0], markers) for row in grid):
        raise HeaderRowError(f"sheet '{sheet.name}' uses section markers")

    raw_headers = [cell_text(c) or None for c in grid[header_index]]
    headers = _dedupe_headers(raw_headers)
    named = [h for h in headers if h is not None]
    matched = sum(1 for h in named if header_predicate(h))
    if matched < MIN_HEADER_MATCHES:
        raise HeaderRowError(
            f"sheet '{sheet.name}' row {header_index + 1} is not a header row "
            f"({matched} recognized headers)"
        )

    rows: list[KeyedRow] = []
    for offset, raw in enumerate(grid[header_index + 1:], start=header_index + 1):
        if all(is_empty(c) for c in raw):
            continue
        values: dict[str, Cell] = {}
        for col, name in enumerate(headers):
            if name is None:
                continue
            values[name] = raw[col] if col < len(raw) else None
        rows.append(KeyedRow(row_number=offset + 1, position=len(rows) + 1, values=values))
    return named, rows


def classify_sheet(
    sheet: RawSheet,
    header_predicate: Callable[[str], bool],
    markers: SectionMarkers,
) -> ClassifiedSheet:
    """Pick the keyed or positional interpretation for one sheet."""
    try:
        headers, rows = extract_keyed_rows(sheet, header_predicate, markers)
    except ShapeError as e:
        logger.debug("sheet=%s keyed extraction failed -> positional: %s", sheet.name, e)
        return ClassifiedSheet(sheet=sheet, shape=SheetShape.POSITIONAL, fallback_reason=str(e))
    if not rows:
        reason = f"sheet '{sheet.name}' has headers but no data rows"
        logger.debug("sheet=%s %s -> positional", sheet.name, reason)
        return ClassifiedSheet(sheet=sheet, shape=SheetShape.POSITIONAL, fallback_reason=reason)
    return ClassifiedSheet(sheet=sheet, shape=SheetShape.KEYED, headers=headers, keyed_rows=rows)
