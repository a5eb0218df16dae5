from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..config.loader import SectionMarkers
from ..models.equipment import SectionKind
from .text import cell_text, strip_accents

"""Section tracker for the legacy positional layout.

Legacy inventory sheets stack several blocks in one worksheet:

    CPU'S - DER-GTI                 <- section marker (kind + department)
    ITEM | NOMENCLATURA | ...       <- column header row
    1    | DER-GTI018   | ...       <- data rows (first cell = item ordinal)
    TOTAL DE MÁQUINAS: 12           <- section end
    MONITORES - DER-GTI             <- next section
    ...

The tracker is a finite-state machine. ``advance`` is a pure transition
function (state, row) -> (state', event) so that every transition can be
tested on its own; ``scan_rows`` replays it over a whole sheet.
"""

__all__ = [
    "ScanState",
    "RowEventKind",
    "RowEvent",
    "INITIAL_STATE",
    "advance",
    "scan_rows",
    "is_section_marker",
    "parse_item_ordinal",
]


@dataclass(frozen=True)
class ScanState:
    kind: SectionKind = SectionKind.NONE
    department: str = ""

    @property
    def in_section(self) -> bool:
        return self.kind is not SectionKind.NONE


INITIAL_STATE = ScanState()


class RowEventKind(Enum):
    SECTION_START = "section_start"
    SECTION_END = "section_end"
    HEADER = "header"
    DATA = "data"
    SKIP = "skip"  # in-section row without a positive item ordinal
    OUTSIDE = "outside"  # row before any section / after a section end


@dataclass(frozen=True)
class RowEvent:
    kind: RowEventKind
    section: SectionKind = SectionKind.NONE
    department: str = ""
    item: int | None = None


def parse_item_ordinal(value: Any) -> int | None:
    """Return the value as a positive integer ordinal, or None.

    Accepts ints, integral floats (Excel numbers) and digit strings.
    Booleans are not ordinals.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if value != value or not value.is_integer():
            return None
        return int(value) if value > 0 else None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            number = int(text)
            return number if number > 0 else None
    return None


def _match_start(first_cell: str, markers: Sequence[str]) -> str | None:
    """Return the department following the first matching start marker."""
    for marker in markers:
        pos = first_cell.find(marker)
        if pos >= 0:
            return first_cell[pos + len(marker):].strip()
    return None


def _match_end(first_cell: str, markers: Sequence[str]) -> bool:
    folded = strip_accents(first_cell).strip()
    return any(folded.startswith(strip_accents(m)) for m in markers)


def _match_exit(first_cell: str, kind: SectionKind, markers: SectionMarkers) -> bool:
    if kind is SectionKind.CPU:
        exits = markers.cpu_exit
    elif kind is SectionKind.MONITOR:
        exits = markers.monitor_exit
    else:
        return False
    folded = strip_accents(first_cell)
    return any(strip_accents(m) in folded for m in exits)


def is_section_marker(value: Any, markers: SectionMarkers) -> bool:
    """True when the cell announces a CPU or Monitor section."""
    first_cell = cell_text(value).upper()
    if not first_cell:
        return False
    return (
        _match_start(first_cell, markers.cpu) is not None
        or _match_start(first_cell, markers.monitor) is not None
    )


def advance(state: ScanState, row: Sequence[Any], markers: SectionMarkers) -> tuple[ScanState, RowEvent]:
    """Pure transition function of the section state machine.

    Start markers win over end markers on the same row, and a start marker of
    the other kind moves directly into that section. Inside a section, a
    first cell containing one of that kind's exit markers (a bare
    "MONITORES" title under a CPU block) ends the section like a TOTAL row.
    """
    head = row[0] if row else None
    first_cell = cell_text(head).upper()

    department = _match_start(first_cell, markers.cpu) if first_cell else None
    if department is not None:
        new_state = ScanState(SectionKind.CPU, department)
        return new_state, RowEvent(RowEventKind.SECTION_START, SectionKind.CPU, department)

    department = _match_start(first_cell, markers.monitor) if first_cell else None
    if department is not None:
        new_state = ScanState(SectionKind.MONITOR, department)
        return new_state, RowEvent(RowEventKind.SECTION_START, SectionKind.MONITOR, department)

    if first_cell and _match_exit(first_cell, state.kind, markers):
        return INITIAL_STATE, RowEvent(RowEventKind.SECTION_END, state.kind, state.department)

    if first_cell and _match_end(first_cell, markers.end):
        return INITIAL_STATE, RowEvent(RowEventKind.SECTION_END, state.kind, state.department)

    if not state.in_section:
        return state, RowEvent(RowEventKind.OUTSIDE)

    if first_cell == markers.header_label.upper():
        return state, RowEvent(RowEventKind.HEADER, state.kind, state.department)

    item = parse_item_ordinal(head)
    if item is None:
        return state, RowEvent(RowEventKind.SKIP, state.kind, state.department)
    return state, RowEvent(RowEventKind.DATA, state.kind, state.department, item)


def scan_rows(
    rows: Sequence[Sequence[Any]], markers: SectionMarkers
) -> Iterator[tuple[int, Sequence[Any], RowEvent]]:
    """Replay ``advance`` over a sheet, yielding (row_index, row, event).

    row_index is 0-based. State starts at INITIAL_STATE for every call.
    """
    state = INITIAL_STATE
    for index, row in enumerate(rows):
        state, event = advance(state, row, markers)
        yield index, row, event
