from __future__ import annotations

import logging
from pathlib import Path

from ..config.loader import IngestConfig, default_config
from ..excel.reader import read_workbook, read_workbook_file
from ..excel.shape import ClassifiedSheet, SheetShape, classify_sheet
from ..models.diagnostic import (
    AMBIGUOUS_HEADER,
    FIELD_UNMAPPED,
    ROW_REJECTED,
    ROW_SKIPPED,
    SHAPE_FALLBACK,
    SHEET_UNCLASSIFIED,
    Diagnostic,
)
from ..models.equipment import IngestResult, SectionKind
from ..models.raw_sheet import RawSheet
from .field_mapper import (
    CPU_ALIASES,
    CPU_COLUMNS,
    MONITOR_ALIASES,
    MONITOR_COLUMNS,
    AliasResolver,
    build_alias_table,
    detect_kind,
    map_positional_row,
)
from .record_builder import RowContext, build_cpu, build_monitor
from .section_tracker import RowEventKind, scan_rows
from .validator import has_minimal_cpu_data, has_minimal_monitor_data

"""Ingestion engine: workbook bytes -> {cpus, monitors}.

This module coordinates the whole pipeline for one uploaded workbook:

1. decode sheets (excel.reader)
2. classify each sheet as keyed or positional (excel.shape)
3. keyed: detect record kind, resolve headers, map every row
   positional: replay the section tracker and map data rows by column index
4. build records, drop rows without minimal data, append in scan order

Nothing is shared between calls: every call builds its own resolvers, scan
state and accumulators. Only DecodeError escapes; everything else degrades to
fewer records (and, on request, diagnostics).
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SheetParser",
    "ingest",
    "ingest_file",
    "ingest_sheets",
]


class SheetParser:
    """Per-call parsing context (resolvers + config + diagnostics sink)."""

    def __init__(self, config: IngestConfig, collect_diagnostics: bool = False) -> None:
        self.config = config
        self.cpu_resolver = AliasResolver(
            build_alias_table(CPU_ALIASES, config.extra_aliases.get("cpu")), config.null_sentinels
        )
        self.monitor_resolver = AliasResolver(
            build_alias_table(MONITOR_ALIASES, config.extra_aliases.get("monitor")), config.null_sentinels
        )
        self.diagnostics: list[Diagnostic] | None = [] if collect_diagnostics else None

    def _note(self, sheet: str, row: int, kind: str, detail: str) -> None:
        if self.diagnostics is not None:
            self.diagnostics.append(Diagnostic(sheet=sheet, row=row, kind=kind, detail=detail))

    def is_header(self, header: str) -> bool:
        return self.cpu_resolver.matches_any(header) or self.monitor_resolver.matches_any(header)

    def parse_sheet(self, sheet: RawSheet, result: IngestResult) -> None:
        """Classify one sheet and append its records to ``result``."""
        classified = classify_sheet(sheet, self.is_header, self.config.section_markers)
        if classified.shape is SheetShape.KEYED:
            self._parse_keyed(classified, result)
        else:
            if classified.fallback_reason:
                self._note(sheet.name, -1, SHAPE_FALLBACK, classified.fallback_reason)
            self._parse_positional(classified, result)

    def _parse_keyed(self, classified: ClassifiedSheet, result: IngestResult) -> None:
        name = classified.sheet.name
        headers = classified.headers
        kind = detect_kind(headers, name, self.cpu_resolver, self.monitor_resolver)
        if kind is SectionKind.NONE:
            self._note(name, -1, SHEET_UNCLASSIFIED, f"headers {headers} match no record kind")
            return
        resolver = self.cpu_resolver if kind is SectionKind.CPU else self.monitor_resolver
        resolved = resolver.resolve(headers)
        if self.diagnostics is not None:
            for field in resolver.unmapped_fields(headers):
                self._note(name, -1, FIELD_UNMAPPED, f"{kind.value}.{field.value} has no matching header")
            for field, tied in resolver.ambiguous_fields(headers).items():
                self._note(name, -1, AMBIGUOUS_HEADER, f"{kind.value}.{field.value} matches {tied}; using '{tied[0]}'")

        accepted = 0
        for row in classified.keyed_rows:
            mapped = resolver.map_row(row.values, resolved)
            context = RowContext(sheet_name=name, position=row.position)
            if kind is SectionKind.CPU:
                cpu = build_cpu(mapped, context, self.config)
                if has_minimal_cpu_data(cpu):
                    result.cpus.append(cpu)
                    accepted += 1
                    continue
            else:
                monitor = build_monitor(mapped, context, self.config)
                if has_minimal_monitor_data(monitor):
                    result.monitors.append(monitor)
                    accepted += 1
                    continue
            self._note(name, row.row_number, ROW_REJECTED, f"{kind.value} row without minimal data")
        logger.debug(
            "sheet=%s shape=keyed kind=%s rows=%d accepted=%d",
            name, kind.value, len(classified.keyed_rows), accepted,
        )

    def _parse_positional(self, classified: ClassifiedSheet, result: IngestResult) -> None:
        name = classified.sheet.name
        accepted = 0
        for index, row, event in scan_rows(classified.positional_rows, self.config.section_markers):
            if event.kind is RowEventKind.SKIP:
                if any(c is not None and str(c).strip() for c in row):
                    self._note(name, index + 1, ROW_SKIPPED, "in-section row without item ordinal")
                continue
            if event.kind is not RowEventKind.DATA:
                continue
            context = RowContext(sheet_name=name, position=index + 1, department=event.department)
            if event.section is SectionKind.CPU:
                cpu = build_cpu(map_positional_row(row, CPU_COLUMNS), context, self.config)
                if has_minimal_cpu_data(cpu):
                    result.cpus.append(cpu)
                    accepted += 1
                    continue
            else:
                monitor = build_monitor(map_positional_row(row, MONITOR_COLUMNS), context, self.config)
                if has_minimal_monitor_data(monitor):
                    result.monitors.append(monitor)
                    accepted += 1
                    continue
            self._note(name, index + 1, ROW_REJECTED, f"{event.section.value} row without minimal data")
        logger.debug("sheet=%s shape=positional rows=%d accepted=%d", name, classified.sheet.row_count, accepted)


def ingest_sheets(
    sheets: list[RawSheet],
    config: IngestConfig | None = None,
    *,
    diagnostics: bool = False,
) -> IngestResult:
    """Run classification/mapping/validation over already decoded sheets."""
    parser = SheetParser(config or default_config(), collect_diagnostics=diagnostics)
    result = IngestResult(diagnostics=parser.diagnostics)
    for sheet in sheets:
        parser.parse_sheet(sheet, result)
    logger.debug("ingest done sheets=%d cpus=%d monitors=%d", len(sheets), len(result.cpus), len(result.monitors))
    return result


def ingest(data: bytes, config: IngestConfig | None = None, *, diagnostics: bool = False) -> IngestResult:
    """Parse workbook bytes into CPU and Monitor records.

    Args:
        data: raw .xlsx / .xls bytes
        config: ingestion settings (defaults when None)
        diagnostics: also collect a list of skipped rows / unmapped fields

    Returns:
        IngestResult with records in sheet and row order (no deduplication)

    Raises:
        DecodeError: the bytes are not a spreadsheet container
    """
    cfg = config or default_config()
    sheets = read_workbook(data, keep_na_strings=cfg.keep_na_strings)
    return ingest_sheets(sheets, cfg, diagnostics=diagnostics)


def ingest_file(path: Path, config: IngestConfig | None = None, *, diagnostics: bool = False) -> IngestResult:
    """Same as ingest(), reading the workbook from ``path``.

    Raises:
        DecodeError: the file is unreadable or not a spreadsheet container
    """
    cfg = config or default_config()
    sheets = read_workbook_file(path, keep_na_strings=cfg.keep_na_strings)
    return ingest_sheets(sheets, cfg, diagnostics=diagnostics)
