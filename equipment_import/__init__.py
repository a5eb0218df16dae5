from __future__ import annotations

from .config.loader import ConfigError, IngestConfig, default_config, load_config
from .excel.reader import DecodeError
from .models.diagnostic import Diagnostic
from .models.equipment import CpuRecord, IngestResult, MonitorRecord
from .services.ingest import ingest, ingest_file

"""Equipment inventory workbook ingestion.

``ingest(data)`` turns the bytes of an uploaded .xlsx / .xls workbook into
CPU and Monitor records; ``python -m equipment_import.cli`` runs the same
pipeline over files on disk.
"""

__all__ = [
    "ConfigError",
    "CpuRecord",
    "DecodeError",
    "Diagnostic",
    "IngestConfig",
    "IngestResult",
    "MonitorRecord",
    "default_config",
    "ingest",
    "ingest_file",
    "load_config",
]

__version__ = "0.1.0"
