from __future__ import annotations

from equipment_import.config.loader import SectionMarkers
from equipment_import.models.equipment import SectionKind
from equipment_import.services.section_tracker import (
    INITIAL_STATE,
    RowEventKind,
    ScanState,
    advance,
    is_section_marker,
    parse_item_ordinal,
    scan_rows,
)

MARKERS = SectionMarkers()


def test_parse_item_ordinal():
    assert parse_item_ordinal(3) == 3
    assert parse_item_ordinal(4.0) == 4
    assert parse_item_ordinal(" 12 ") == 12
    assert parse_item_ordinal(0) is None
    assert parse_item_ordinal(-1) is None
    assert parse_item_ordinal(2.5) is None
    assert parse_item_ordinal("abc") is None
    assert parse_item_ordinal(True) is None
    assert parse_item_ordinal(None) is None


def test_cpu_marker_starts_section_with_department():
    state, event = advance(INITIAL_STATE, ["CPU'S - DER-GTI", None], MARKERS)
    assert state == ScanState(SectionKind.CPU, "GTI")
    assert event.kind is RowEventKind.SECTION_START
    assert event.department == "GTI"


def test_marker_is_case_insensitive_and_department_uppercased():
    state, _ = advance(INITIAL_STATE, ["monitores - der-cpd"], MARKERS)
    assert state == ScanState(SectionKind.MONITOR, "CPD")


def test_rows_outside_section_are_ignored():
    state, event = advance(INITIAL_STATE, [1, "DER-GTI001"], MARKERS)
    assert state is INITIAL_STATE
    assert event.kind is RowEventKind.OUTSIDE


def test_header_data_and_skip_rows_inside_section():
    state = ScanState(SectionKind.CPU, "GTI")
    _, header = advance(state, ["ITEM", "NOMENCLATURA"], MARKERS)
    assert header.kind is RowEventKind.HEADER
    _, data = advance(state, [7, "DER-GTI007"], MARKERS)
    assert data.kind is RowEventKind.DATA
    assert data.item == 7
    assert data.section is SectionKind.CPU
    _, skip = advance(state, ["obs: trocar fonte", None], MARKERS)
    assert skip.kind is RowEventKind.SKIP
    _, blank = advance(state, [], MARKERS)
    assert blank.kind is RowEventKind.SKIP


def test_total_row_ends_section():
    state = ScanState(SectionKind.MONITOR, "GTI")
    new_state, event = advance(state, ["TOTAL DE MONITORES: 4"], MARKERS)
    assert new_state is INITIAL_STATE
    assert event.kind is RowEventKind.SECTION_END
    assert event.section is SectionKind.MONITOR


def test_monitor_marker_switches_section_directly():
    state = ScanState(SectionKind.CPU, "GTI")
    new_state, event = advance(state, ["MONITORES - DER-GTI"], MARKERS)
    assert new_state.kind is SectionKind.MONITOR
    assert event.kind is RowEventKind.SECTION_START


def test_bare_monitor_title_ends_cpu_section():
    state = ScanState(SectionKind.CPU, "GTI")
    for title in ("MONITORES", "Monitores - GTI"):
        new_state, event = advance(state, [title, None], MARKERS)
        assert new_state is INITIAL_STATE
        assert event.kind is RowEventKind.SECTION_END
        assert event.section is SectionKind.CPU


def test_exit_markers_only_apply_to_their_own_section():
    state = ScanState(SectionKind.MONITOR, "GTI")
    assert advance(state, ["MONITORES"], MARKERS)[1].kind is RowEventKind.SKIP
    new_state, event = advance(state, ["CPU'S"], MARKERS)
    assert new_state is INITIAL_STATE
    assert event.section is SectionKind.MONITOR
    assert advance(INITIAL_STATE, ["MONITORES"], MARKERS)[1].kind is RowEventKind.OUTSIDE


def test_exit_markers_are_configurable():
    markers = SectionMarkers(cpu_exit=("TELAS",))
    state = ScanState(SectionKind.CPU, "GTI")
    assert advance(state, ["MONITORES"], markers)[1].kind is RowEventKind.SKIP
    assert advance(state, ["Telas do setor"], markers)[0] is INITIAL_STATE


def test_advance_is_pure():
    state = ScanState(SectionKind.CPU, "GTI")
    row = [1, "DER-GTI001"]
    assert advance(state, row, MARKERS) == advance(state, row, MARKERS)
    assert state == ScanState(SectionKind.CPU, "GTI")


def test_scan_rows_replays_whole_sheet():
    rows = [
        ["Inventário 2024"],
        ["CPU'S - DER-GTI"],
        ["ITEM"],
        [1, "A"],
        ["TOTAL DE MÁQUINAS: 1"],
        [2, "B"],
    ]
    kinds = [event.kind for _, _, event in scan_rows(rows, MARKERS)]
    assert kinds == [
        RowEventKind.OUTSIDE,
        RowEventKind.SECTION_START,
        RowEventKind.HEADER,
        RowEventKind.DATA,
        RowEventKind.SECTION_END,
        RowEventKind.OUTSIDE,
    ]


def test_is_section_marker():
    assert is_section_marker("CPU'S - DER-GTI", MARKERS)
    assert is_section_marker("MONITORES - DER-GTI", MARKERS)
    assert not is_section_marker("TOTAL DE MÁQUINAS: 3", MARKERS)
    assert not is_section_marker(None, MARKERS)
    assert not is_section_marker(12, MARKERS)
