from __future__ import annotations

from ..models.equipment import CpuRecord, MonitorRecord

"""Minimal-data rule for candidate records.

Spreadsheets carry decorative blank rows, merged-cell remnants and numbered
rows with nothing in them. A candidate is kept only when at least one
substantive field holds text; rejected rows are dropped without an error.
"""

__all__ = [
    "CPU_SUBSTANTIVE",
    "MONITOR_SUBSTANTIVE",
    "has_minimal_cpu_data",
    "has_minimal_monitor_data",
]

CPU_SUBSTANTIVE = ("nomenclature", "brand_model", "processor", "asset_tag", "owner")
MONITOR_SUBSTANTIVE = ("model", "asset_tag")


def _filled(record: object, names: tuple[str, ...]) -> bool:
    for name in names:
        value = getattr(record, name)
        if value is not None and str(value).strip():
            return True
    return False


def has_minimal_cpu_data(record: CpuRecord) -> bool:
    """True when nomenclature, brand/model, processor, asset tag or owner is set."""
    return _filled(record, CPU_SUBSTANTIVE)


def has_minimal_monitor_data(record: MonitorRecord) -> bool:
    """True when model or asset tag is set."""
    return _filled(record, MONITOR_SUBSTANTIVE)
