from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for batch imports."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a batch run.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} cpus={cpus}
    monitors={monitors} rejected_rows={rejected} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_cpus=12, total_monitors=4,
        ...     rejected_rows=0, start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=1/1 success=1 failed=0 cpus=12 monitors=4 rejected_rows=0 elapsed_sec=2'
    """
    total_files = result.success_files + result.failed_files
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"cpus={result.total_cpus} "
        f"monitors={result.total_monitors} "
        f"rejected_rows={result.rejected_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
