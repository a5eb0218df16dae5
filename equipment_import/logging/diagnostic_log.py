from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic import Diagnostic

"""Diagnostics log buffering.

- JSON Lines, fixed key set (sheet, row, kind, detail)
- one ``logs/diagnostics-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on demand
- records are buffered and appended on flush()
"""

__all__ = [
    "Diagnostic",
    "DiagnosticLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DiagnosticLogBuffer:
    """In-memory buffer for diagnostics. Flush writes JSON Lines.

    スレッド安全性不要 (シリアル実行)
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[Diagnostic] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"diagnostics-{stamp}.log"
        return self._file_path

    @property
    def file_path_if_written(self) -> Path | None:
        return self._file_path

    def append(self, record: Diagnostic) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file.

        Returns:
            The log path, or None when no record was ever written this run.
        """
        if not self._records:
            return self._file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
