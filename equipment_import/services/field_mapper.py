from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..models.equipment import CpuField, MonitorField, SectionKind
from .text import cell_text, normalize_header

"""Field mapping: raw cells -> canonical equipment fields.

Two mappers share the same output contract (canonical field -> raw value):

- positional: fixed column index tables for the legacy sectioned layout
- keyed: alias resolution over arbitrary header names

Keyed resolution policy (three tiers, highest wins):

    3  exact      header == alias
    2  folded     case/accent/separator-insensitive equality
    1  partial    one side contains the other (both >= 3 chars after folding)

Per field, candidate headers are ordered by (tier desc, alias position asc,
column position asc) and the first candidate holding a non-blank value wins.
Configured null sentinels ("-", "N/A", ...) count as blank there.
A header that matches another field at tier >= 2 is never a partial
candidate, so "Data Formatação" cannot leak into a "formatação"-ish field of
a different meaning.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "TIER_EXACT",
    "TIER_FOLDED",
    "TIER_PARTIAL",
    "CPU_ALIASES",
    "MONITOR_ALIASES",
    "CPU_COLUMNS",
    "MONITOR_COLUMNS",
    "AliasResolver",
    "build_alias_table",
    "map_positional_row",
    "detect_kind",
]

TIER_EXACT = 3
TIER_FOLDED = 2
TIER_PARTIAL = 1
MIN_PARTIAL_LENGTH = 3

AliasTable = tuple[tuple[Enum, tuple[str, ...]], ...]

# 先頭の alias はテンプレート/エクスポートが書き出す正式な見出し
CPU_ALIASES: AliasTable = (
    (CpuField.ITEM, ("Item", "Nº", "Ordem")),
    (CpuField.NOMENCLATURE, ("Nomenclatura", "Nome", "Hostname", "Nome da Máquina")),
    (CpuField.ASSET_TAG, ("Tombamento", "Tombo", "Patrimônio", "Asset Tag")),
    (CpuField.STATUS, ("E-estado", "E Estado", "Estado", "Status", "Situação")),
    (CpuField.BRAND_MODEL, ("Marca/Modelo", "Marca", "Modelo", "Fabricante")),
    (CpuField.PROCESSOR, ("Processador", "CPU", "Processor")),
    (CpuField.RAM_SIZE, ("Memória RAM", "Memória", "RAM")),
    (CpuField.HARD_DISK, ("HD", "Disco Rígido", "Hard Disk")),
    (CpuField.SOLID_STATE_DISK, ("SSD",)),
    (CpuField.OPERATING_SYSTEM, ("Sistema Operacional", "SO", "Windows", "Sistema")),
    (CpuField.ON_DOMAIN, ("No Domínio", "Domínio", "Dominio")),
    (CpuField.FORMAT_DATE, ("Data Formatação", "Formatação", "Data de Formatação")),
    (CpuField.OWNER, ("Responsável", "Resp", "Usuário")),
    (CpuField.DISPOSAL_NOTE, ("Desfazimento", "Baixa")),
    (CpuField.DEPARTMENT, ("Departamento", "Depto", "Setor", "Lotação")),
)

MONITOR_ALIASES: AliasTable = (
    (MonitorField.ITEM, ("Item", "Nº", "Ordem")),
    (MonitorField.ASSET_TAG, ("Tombamento", "Tombo", "Patrimônio", "Asset Tag")),
    (MonitorField.SERIAL_NUMBER, ("Número Série", "Número de Série", "Serial", "S/N", "Nº Série")),
    (MonitorField.STATUS, ("E-estado", "E Estado", "Estado", "Status", "Situação")),
    (MonitorField.MODEL, ("Modelo", "Marca/Modelo", "Monitor")),
    (MonitorField.SCREEN_SIZE, ("Polegadas", "Tamanho", "Tela")),
    (MonitorField.NOTE, ("Observação", "Observações", "Obs")),
    (MonitorField.VERIFICATION_DATE, ("Data Verificação", "Verificação", "Data de Verificação")),
    (MonitorField.OWNER, ("Responsável", "Resp", "Usuário")),
    (MonitorField.DISPOSAL_NOTE, ("Desfazimento", "Baixa")),
    (MonitorField.DEPARTMENT, ("Departamento", "Depto", "Setor", "Lotação")),
)

# 旧レイアウトの固定列 (0 始まり)
CPU_COLUMNS: dict[CpuField, int] = {
    CpuField.ITEM: 0,
    CpuField.NOMENCLATURE: 1,
    CpuField.ASSET_TAG: 2,
    CpuField.STATUS: 3,
    CpuField.BRAND_MODEL: 4,
    CpuField.PROCESSOR: 5,
    CpuField.RAM_SIZE: 6,
    CpuField.HARD_DISK: 7,
    CpuField.SOLID_STATE_DISK: 8,
    CpuField.OPERATING_SYSTEM: 9,
    CpuField.ON_DOMAIN: 10,
    CpuField.FORMAT_DATE: 11,
    CpuField.OWNER: 12,
    CpuField.DISPOSAL_NOTE: 13,
}

# columns 7-10 of the monitor block are left blank in the legacy sheets
MONITOR_COLUMNS: dict[MonitorField, int] = {
    MonitorField.ITEM: 0,
    MonitorField.ASSET_TAG: 1,
    MonitorField.SERIAL_NUMBER: 2,
    MonitorField.STATUS: 3,
    MonitorField.MODEL: 4,
    MonitorField.SCREEN_SIZE: 5,
    MonitorField.NOTE: 6,
    MonitorField.VERIFICATION_DATE: 11,
    MonitorField.OWNER: 12,
    MonitorField.DISPOSAL_NOTE: 13,
}

# 種別判定に使うフィールド (両種別に共通のものは除外)
_CPU_ONLY = frozenset(
    {
        CpuField.NOMENCLATURE,
        CpuField.BRAND_MODEL,
        CpuField.PROCESSOR,
        CpuField.RAM_SIZE,
        CpuField.HARD_DISK,
        CpuField.SOLID_STATE_DISK,
        CpuField.OPERATING_SYSTEM,
        CpuField.ON_DOMAIN,
        CpuField.FORMAT_DATE,
    }
)
_MONITOR_ONLY = frozenset(
    {
        MonitorField.SERIAL_NUMBER,
        MonitorField.MODEL,
        MonitorField.SCREEN_SIZE,
        MonitorField.NOTE,
        MonitorField.VERIFICATION_DATE,
    }
)


def _is_absent(value: Any, null_sentinels: frozenset[str] = frozenset()) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and value != value:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return bool(null_sentinels) and cell_text(value).upper() in null_sentinels


def build_alias_table(
    base: AliasTable, extra: Mapping[str, Sequence[str]] | None = None
) -> AliasTable:
    """Append configured aliases (keyed by field value) after the built-in ones."""
    if not extra:
        return base
    table = []
    for field, aliases in base:
        added = tuple(a for a in extra.get(field.value, ()) if a not in aliases)
        table.append((field, aliases + added))
    return tuple(table)


@dataclass(frozen=True)
class _Candidate:
    tier: int
    alias_rank: int
    column: int
    header: str

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (-self.tier, self.alias_rank, self.column)


class AliasResolver:
    """Scoring resolver from raw headers to canonical fields.

    The resolver is stateless after construction; resolving the same headers
    or mapping the same row twice always returns the same result.
    """

    def __init__(self, table: AliasTable, null_sentinels: frozenset[str] = frozenset()) -> None:
        self.table = table
        # 大文字化済の値。map_row で空セル扱い
        self.null_sentinels = null_sentinels

    @property
    def fields(self) -> list[Enum]:
        return [field for field, _ in self.table]

    @staticmethod
    def score(header: str, alias: str) -> int:
        """Match tier of one header against one alias (0 = no match)."""
        if header == alias:
            return TIER_EXACT
        h = normalize_header(header)
        a = normalize_header(alias)
        if not h or not a:
            return 0
        if h == a:
            return TIER_FOLDED
        if len(h) >= MIN_PARTIAL_LENGTH and len(a) >= MIN_PARTIAL_LENGTH and (a in h or h in a):
            return TIER_PARTIAL
        return 0

    def _field_score(self, index: int, header: str) -> tuple[int, int]:
        """Best (tier, alias_rank) of ``header`` for the field at ``index``."""
        field, aliases = self.table[index]
        best = (0, len(aliases))
        for rank, alias in enumerate(aliases):
            tier = self.score(header, alias)
            if tier > best[0]:
                best = (tier, rank)
                if tier == TIER_EXACT:
                    break
        return best

    def candidates(self, field: Enum, headers: Sequence[str]) -> list[str]:
        """Headers that may feed ``field``, best first."""
        index = self.fields.index(field)
        found: list[_Candidate] = []
        for column, header in enumerate(headers):
            tier, rank = self._field_score(index, header)
            if tier == 0:
                continue
            if tier == TIER_PARTIAL and self._claimed_elsewhere(index, header):
                continue
            found.append(_Candidate(tier, rank, column, header))
        found.sort(key=lambda c: c.sort_key)
        return [c.header for c in found]

    def _claimed_elsewhere(self, index: int, header: str) -> bool:
        for other in range(len(self.table)):
            if other == index:
                continue
            if self._field_score(other, header)[0] >= TIER_FOLDED:
                return True
        return False

    def resolve(self, headers: Sequence[str]) -> dict[Enum, list[str]]:
        """Candidate headers per field (fields without candidates omitted)."""
        resolved: dict[Enum, list[str]] = {}
        for field in self.fields:
            found = self.candidates(field, headers)
            if found:
                resolved[field] = found
        return resolved

    def map_row(self, row: Mapping[str, Any], resolved: dict[Enum, list[str]] | None = None) -> dict[Enum, Any]:
        """Map one keyed row onto canonical fields.

        ``resolved`` may be passed in when many rows share the same headers;
        otherwise it is computed from the row's keys.
        """
        if resolved is None:
            resolved = self.resolve(list(row.keys()))
        mapped: dict[Enum, Any] = {}
        for field, headers in resolved.items():
            for header in headers:
                value = row.get(header)
                if not _is_absent(value, self.null_sentinels):
                    mapped[field] = value
                    break
        return mapped

    def matches_any(self, header: str) -> bool:
        """True when the header resolves to at least one field."""
        return any(self._field_score(i, header)[0] > 0 for i in range(len(self.table)))

    def unmapped_fields(self, headers: Sequence[str]) -> list[Enum]:
        resolved = self.resolve(headers)
        return [f for f in self.fields if f not in resolved]

    def ambiguous_fields(self, headers: Sequence[str]) -> dict[Enum, list[str]]:
        """Fields whose two best candidates share tier and alias rank."""
        ambiguous: dict[Enum, list[str]] = {}
        for index, field in enumerate(self.fields):
            scored = []
            for header in headers:
                tier, rank = self._field_score(index, header)
                if tier and not (tier == TIER_PARTIAL and self._claimed_elsewhere(index, header)):
                    scored.append((tier, rank, header))
            if len(scored) < 2:
                continue
            scored.sort(key=lambda s: (-s[0], s[1]))
            top = [s[2] for s in scored if s[:2] == scored[0][:2]]
            if len(top) > 1:
                ambiguous[field] = top
        return ambiguous


def map_positional_row(row: Sequence[Any], columns: Mapping[Enum, int]) -> dict[Enum, Any]:
    """Fixed-index lookup; columns beyond the row length read as None."""
    mapped: dict[Enum, Any] = {}
    for field, index in columns.items():
        mapped[field] = row[index] if index < len(row) else None
    return mapped


def detect_kind(
    headers: Sequence[str],
    sheet_name: str,
    cpu_resolver: AliasResolver,
    monitor_resolver: AliasResolver,
) -> SectionKind:
    """Guess whether a keyed sheet lists CPUs or monitors.

    Counts the kind-specific fields its headers resolve to; a tie is broken by
    a "monitor" hint in the sheet name, and nothing at all yields NONE.
    """
    cpu_score = sum(1 for f in cpu_resolver.resolve(headers) if f in _CPU_ONLY)
    monitor_score = sum(1 for f in monitor_resolver.resolve(headers) if f in _MONITOR_ONLY)
    logger.debug("sheet=%s kind scores cpu=%d monitor=%d", sheet_name, cpu_score, monitor_score)
    if cpu_score > monitor_score:
        return SectionKind.CPU
    if monitor_score > cpu_score:
        return SectionKind.MONITOR
    if cpu_score == 0:
        return SectionKind.NONE
    if "monitor" in normalize_header(sheet_name):
        return SectionKind.MONITOR
    return SectionKind.CPU
