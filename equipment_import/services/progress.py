from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.processing_result import FileStat, FileStatus

"""Workbook progress display with tqdm (TTY only).

One bar per batch run, advanced once per workbook file. The postfix carries
the running record counts (cpus / monitors) and, once a file has failed to
decode, the number of failed files:

    Importing workbooks (inventario.xlsx): 40%|####      | 2/5 [cpus=84, monitors=31]

Outside a TTY (CI, output redirected to a file) no bar is created, so the
SUMMARY line and the JSON written to stdout stay free of ANSI sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check whether the progress bar should be drawn.

    Returns:
        True if stdout is a TTY, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """File-level progress for a batch import.

    Counts are kept even when the bar is disabled so callers can read
    ``cpus`` / ``monitors`` / ``failed_files`` without caring about the TTY.
    """

    def __init__(self, total_files: int, *, description: str = "Importing workbooks") -> None:
        """Initialize the tracker.

        Args:
            total_files: Number of workbook files in the batch
            description: Bar label; the current file name is appended while it is read
        """
        self.description = description
        self.current_file = 0
        self.cpus = 0
        self.monitors = 0
        self.failed_files = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        """Mark a workbook as being read.

        Args:
            file_path: Workbook path (only the name is shown)
        """
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, stat: FileStat) -> None:
        """Advance the bar by one file and fold its counts into the postfix.

        Args:
            stat: Outcome of the file that was just read
        """
        if stat.status == FileStatus.FAILED.value:
            self.failed_files += 1
        else:
            self.cpus += stat.cpus
            self.monitors += stat.monitors
        if self.pbar is None:
            return
        self.pbar.update(1)
        self.pbar.set_description(self.description)
        self.pbar.set_postfix(**self.postfix())

    def postfix(self) -> dict[str, int]:
        counts = {"cpus": self.cpus, "monitors": self.monitors}
        if self.failed_files:
            counts["failed"] = self.failed_files
        return counts

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
