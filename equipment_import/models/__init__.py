"""Domain models for the equipment spreadsheet importer.

This package contains the record shapes produced by the ingestion engine and
the intermediate structures (raw sheets, keyed rows, diagnostics) used while
parsing a workbook.
"""

from .diagnostic import Diagnostic
from .equipment import CpuField, CpuRecord, IngestResult, MonitorField, MonitorRecord, SectionKind
from .processing_result import FileStat, FileStatus, ProcessingResult
from .raw_sheet import RawSheet
from .row_data import KeyedRow

__all__ = [
    # Records
    "CpuField",
    "CpuRecord",
    "MonitorField",
    "MonitorRecord",
    "SectionKind",
    "IngestResult",
    # Parsing intermediates
    "RawSheet",
    "KeyedRow",
    "Diagnostic",
    # Batch results
    "FileStat",
    "FileStatus",
    "ProcessingResult",
]
