from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .diagnostic import Diagnostic

"""Equipment domain models (CPU / Monitor records and canonical fields).

Every import path (legacy positional sections or keyed header rows) ends up
producing the same record shapes defined here, which are what the persistence
layer and the dashboards consume.
"""

__all__ = [
    "SectionKind",
    "CpuField",
    "MonitorField",
    "CpuRecord",
    "MonitorRecord",
    "IngestResult",
]


class SectionKind(Enum):
    """Record kind announced by a section marker or detected from headers."""
    NONE = "none"
    CPU = "cpu"
    MONITOR = "monitor"


class CpuField(Enum):
    """Canonical CPU attributes. Values are the CpuRecord attribute names."""
    ITEM = "item"
    NOMENCLATURE = "nomenclature"
    ASSET_TAG = "asset_tag"
    STATUS = "status"
    BRAND_MODEL = "brand_model"
    PROCESSOR = "processor"
    RAM_SIZE = "ram_size"
    HARD_DISK = "hard_disk"
    SOLID_STATE_DISK = "solid_state_disk"
    OPERATING_SYSTEM = "operating_system"
    ON_DOMAIN = "on_domain"
    FORMAT_DATE = "format_date"
    OWNER = "owner"
    DISPOSAL_NOTE = "disposal_note"
    DEPARTMENT = "department"


class MonitorField(Enum):
    """Canonical Monitor attributes. Values are the MonitorRecord attribute names."""
    ITEM = "item"
    ASSET_TAG = "asset_tag"
    SERIAL_NUMBER = "serial_number"
    STATUS = "status"
    MODEL = "model"
    SCREEN_SIZE = "screen_size"
    NOTE = "note"
    VERIFICATION_DATE = "verification_date"
    OWNER = "owner"
    DISPOSAL_NOTE = "disposal_note"
    DEPARTMENT = "department"


@dataclass(frozen=True)
class CpuRecord:
    """A single CPU (desktop computer) inventory entry."""
    id: str
    item: int
    nomenclature: str  # 例: DER-GTI018
    asset_tag: str  # tombamento
    status: str  # free text / e-estado code, not validated
    brand_model: str
    processor: str
    ram_size: str
    hard_disk: str | None
    solid_state_disk: str | None
    operating_system: str
    on_domain: str
    format_date: str | None
    owner: str
    disposal_note: str | None
    department: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonitorRecord:
    """A single monitor inventory entry."""
    id: str
    item: int
    asset_tag: str
    serial_number: str
    status: str
    model: str
    screen_size: str  # polegadas, kept as text ("23", "21.5")
    note: str | None
    verification_date: str
    owner: str
    disposal_note: str | None
    department: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class IngestResult:
    """Output of one ingestion call.

    ``diagnostics`` is None unless the caller opted in; when it is a list the
    engine appended one entry per skipped row, rejected row, unmapped field
    and shape fallback it encountered.
    """
    cpus: list[CpuRecord] = field(default_factory=list)
    monitors: list[MonitorRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] | None = None

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "cpus": [c.to_dict() for c in self.cpus],
            "monitors": [m.to_dict() for m in self.monitors],
        }

    def extend(self, other: IngestResult) -> None:
        """Append another result's records (and diagnostics) in order."""
        self.cpus.extend(other.cpus)
        self.monitors.extend(other.monitors)
        if other.diagnostics is not None:
            if self.diagnostics is None:
                self.diagnostics = []
            self.diagnostics.extend(other.diagnostics)
