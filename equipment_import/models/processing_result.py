from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for batch (multi-file) imports.

The ingestion engine itself works on one byte buffer; these models aggregate
what happened when the CLI runs it over a set of files.
"""

__all__ = [
    "FileStatus",
    "FileStat",
    "ProcessingResult",
]


class FileStatus(Enum):
    """Per-file outcome.

    - SUCCESS: the workbook decoded (it may still have produced zero records)
    - FAILED: the bytes were not a readable spreadsheet container
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    status: str  # success/failed
    cpus: int
    monitors: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated result of a batch run, used for the SUMMARY line and exit code."""
    success_files: int
    failed_files: int
    total_cpus: int
    total_monitors: int
    rejected_rows: int  # diagnostics 有効時のみ意味を持つ (無効時 0)
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_records(self) -> int:
        return self.total_cpus + self.total_monitors
