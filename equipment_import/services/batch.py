from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import IngestConfig
from ..excel.reader import DecodeError
from ..logging.diagnostic_log import DiagnosticLogBuffer
from ..models.diagnostic import FILE_DECODE_ERROR, ROW_REJECTED, Diagnostic
from ..models.equipment import IngestResult
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from .ingest import ingest_file
from .progress import ProgressTracker

"""Batch runner: ingest a set of workbook files and aggregate the results.

Used by the CLI. Each file is ingested independently; a file that fails to
decode is counted as failed and processing continues with the next one.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "EXCEL_SUFFIXES",
    "scan_excel_files",
    "expand_paths",
    "process_paths",
]

EXCEL_SUFFIXES = (".xlsx", ".xls")


class ProcessingError(Exception):
    """Fatal batch error (unreadable scan directory)."""
    pass


def scan_excel_files(directory: Path) -> list[Path]:
    """Scan directory for .xlsx / .xls files (non-recursive, sorted by name).

    Args:
        directory: Directory to scan

    Returns:
        Workbook paths; Excel lock files (~$name.xlsx) are left out

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        # Excel の一時ファイル (~$xxx.xlsx) は除外
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in EXCEL_SUFFIXES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def expand_paths(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into their workbook files; files are kept as given.

    Args:
        paths: Files and/or directories from the command line, in order

    Returns:
        Flat list of files. A given file is not checked for its suffix, so
        a renamed workbook can still be imported explicitly.

    Raises:
        ProcessingError: A path does not exist or a directory can't be read
    """
    expanded: list[Path] = []
    for path in paths:
        if path.is_dir():
            expanded.extend(scan_excel_files(path))
        elif path.exists():
            expanded.append(path)
        else:
            raise ProcessingError(f"Path not found: {path}")
    return expanded


def process_paths(
    paths: list[Path],
    config: IngestConfig,
    *,
    diagnostics: bool = False,
    diagnostic_log: DiagnosticLogBuffer | None = None,
) -> tuple[ProcessingResult, IngestResult]:
    """Ingest every file and merge the records in file order.

    A file that fails to decode is counted and skipped; the remaining files
    are still imported.

    Args:
        paths: Workbook files (already expanded)
        config: Ingestion settings shared by every file
        diagnostics: Collect per-row diagnostics into the merged result
        diagnostic_log: Optional JSON Lines sink, flushed once at the end

    Returns:
        (ProcessingResult with per-file stats, merged IngestResult)
    """
    start_time = datetime.now(UTC)
    merged = IngestResult(diagnostics=[] if diagnostics else None)
    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    rejected_rows = 0

    with ProgressTracker(len(paths), description="Importing workbooks") as progress:
        for path in paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                result = ingest_file(path, config, diagnostics=diagnostics)
            except DecodeError as e:
                failed_count += 1
                logger.warning(f"{path.name}: {e}")
                note = Diagnostic(sheet="<FILE_LEVEL>", row=-1, kind=FILE_DECODE_ERROR, detail=f"{path.name}: {e}")
                if merged.diagnostics is not None:
                    merged.diagnostics.append(note)
                if diagnostic_log is not None:
                    diagnostic_log.append(note)
                elapsed = (datetime.now(UTC) - file_start).total_seconds()
                stat = FileStat(path.name, FileStatus.FAILED.value, 0, 0, elapsed, error=str(e))
                file_stats.append(stat)
                progress.finish_file(stat)
                continue

            success_count += 1
            merged.extend(result)
            if result.diagnostics is not None:
                rejected_rows += sum(1 for d in result.diagnostics if d.kind == ROW_REJECTED)
                if diagnostic_log is not None:
                    for note in result.diagnostics:
                        diagnostic_log.append(note)
            elapsed = (datetime.now(UTC) - file_start).total_seconds()
            stat = FileStat(path.name, FileStatus.SUCCESS.value, len(result.cpus), len(result.monitors), elapsed)
            file_stats.append(stat)
            logger.info(f"{path.name}: cpus={stat.cpus} monitors={stat.monitors}")
            progress.finish_file(stat)

    if diagnostic_log is not None:
        try:
            diagnostic_log.flush()
        except OSError as e:
            # ログ書き出し失敗で取り込み結果全体を失敗にはしない
            logger.warning(f"diagnostics log flush failed: {e}")

    end_time = datetime.now(UTC)
    processing = ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_cpus=len(merged.cpus),
        total_monitors=len(merged.monitors),
        rejected_rows=rejected_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
    return processing, merged
