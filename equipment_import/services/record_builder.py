from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..config.loader import IngestConfig
from ..models.equipment import CpuField, CpuRecord, MonitorField, MonitorRecord
from .section_tracker import parse_item_ordinal
from .text import cell_text

"""Record builder: mapped raw fields -> typed CpuRecord / MonitorRecord.

Normalization rules:
- strings are trimmed; configured null sentinels count as empty
- empty nullable fields become None, empty required fields become ""
- item falls back to the row position when it does not parse
- department: context -> sheet name -> configured default
- status / on_domain are free text with configured defaults
- id is generated per record and never derived from cell content
"""

__all__ = [
    "RowContext",
    "CPU_NULLABLE",
    "MONITOR_NULLABLE",
    "build_cpu",
    "build_monitor",
    "generate_id",
]

CPU_NULLABLE = frozenset(
    {CpuField.HARD_DISK, CpuField.SOLID_STATE_DISK, CpuField.FORMAT_DATE, CpuField.DISPOSAL_NOTE}
)
MONITOR_NULLABLE = frozenset({MonitorField.NOTE, MonitorField.DISPOSAL_NOTE})


@dataclass(frozen=True)
class RowContext:
    """Where a candidate row came from."""
    sheet_name: str
    position: int  # 1-based row position within the sheet (item fallback)
    department: str = ""  # section marker department, if any


def generate_id(department: str, item: int, prefix: str = "") -> str:
    """Unique id: department + ordinal + millisecond timestamp + random suffix.

    Args:
        department: Resolved department of the record
        item: Item ordinal (after the position fallback)
        prefix: "monitor-" for monitors, empty for CPUs

    Returns:
        e.g. "GTI-3-1718000000000-9f2c4e1a"
    """
    stamp = int(time.time() * 1000)
    return f"{prefix}{department}-{item}-{stamp}-{uuid.uuid4().hex[:8]}"


def _text(value: Any, sentinels: frozenset[str]) -> str:
    """Trimmed cell text, or "" for blanks and configured null sentinels."""
    text = cell_text(value)
    if sentinels and text.upper() in sentinels:
        return ""
    return text


def _item(value: Any, position: int) -> int:
    item = parse_item_ordinal(value)
    if item is not None:
        return item
    # "3.0" のような文字列も許容
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return position
    if number.is_integer() and number > 0:
        return int(number)
    return position


def _department(mapped_value: Any, context: RowContext, config: IngestConfig) -> str:
    # セクション見出し > 部署列 > シート名 > 既定値
    for candidate in (context.department, _text(mapped_value, config.null_sentinels), context.sheet_name):
        if candidate and candidate.strip():
            return candidate.strip()
    return config.default_department


def _fields(
    mapped: Mapping[Enum, Any],
    fields: type[Enum],
    nullable: frozenset[Enum],
    config: IngestConfig,
    skip: set[Enum],
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field in fields:
        if field in skip:
            continue
        text = _text(mapped.get(field), config.null_sentinels)
        if not text and field in nullable:
            values[field.value] = None
        else:
            values[field.value] = text
    return values


def build_cpu(mapped: Mapping[Enum, Any], context: RowContext, config: IngestConfig) -> CpuRecord:
    """Build a CpuRecord from one mapped row.

    Args:
        mapped: Canonical CpuField -> raw cell (missing fields read as blank)
        context: Sheet name, row position and section department
        config: Null sentinels and defaults for status / on_domain / department

    Returns:
        A record with a fresh id. Whether it carries enough data to be kept
        is decided by the validator, not here.
    """
    values = _fields(
        mapped, CpuField, CPU_NULLABLE, config, skip={CpuField.ITEM, CpuField.DEPARTMENT}
    )
    if not values["status"]:
        values["status"] = config.default_status
    if not values["on_domain"]:
        values["on_domain"] = config.default_on_domain
    item = _item(mapped.get(CpuField.ITEM), context.position)
    department = _department(mapped.get(CpuField.DEPARTMENT), context, config)
    return CpuRecord(
        id=generate_id(department, item),
        item=item,
        department=department,
        **values,
    )


def build_monitor(mapped: Mapping[Enum, Any], context: RowContext, config: IngestConfig) -> MonitorRecord:
    """Build a MonitorRecord from one mapped row.

    Same rules as build_cpu; the id carries a "monitor-" prefix and there is
    no on_domain default.
    """
    values = _fields(
        mapped, MonitorField, MONITOR_NULLABLE, config, skip={MonitorField.ITEM, MonitorField.DEPARTMENT}
    )
    if not values["status"]:
        values["status"] = config.default_status
    item = _item(mapped.get(MonitorField.ITEM), context.position)
    department = _department(mapped.get(MonitorField.DEPARTMENT), context, config)
    return MonitorRecord(
        id=generate_id(department, item, prefix="monitor-"),
        item=item,
        department=department,
        **values,
    )
