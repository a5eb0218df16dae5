from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.equipment import CpuField, MonitorField

"""Config loader.

Responsibilities:
- Load the optional YAML config (default config/ingest.yml)
- Validate it against the packaged JSON schema
- Apply defaults for every key that is missing
- Reject alias overrides that name unknown canonical fields
"""

__all__ = [
    "ConfigError",
    "SectionMarkers",
    "IngestConfig",
    "DEFAULT_CONFIG_PATH",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/ingest.yml")

DEFAULT_DEPARTMENT = "unassigned"
DEFAULT_STATUS = "Ativo"
DEFAULT_ON_DOMAIN = "SIM"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SectionMarkers:
    """Literal markers of the legacy sectioned layout.

    Start markers are matched as substrings of the uppercased first cell; the
    department is whatever follows the marker. End markers are matched as a
    prefix of the accent-folded, uppercased first cell. Exit markers close an
    open section of their kind when found anywhere in the first cell, so a
    bare "MONITORES" title still ends a CPU block.
    """
    cpu: tuple[str, ...] = ("CPU'S - DER-",)
    monitor: tuple[str, ...] = ("MONITORES - DER-",)
    end: tuple[str, ...] = ("TOTAL",)
    cpu_exit: tuple[str, ...] = ("MONITORES",)
    monitor_exit: tuple[str, ...] = ("CPU'S",)
    header_label: str = "ITEM"


@dataclass(frozen=True)
class IngestConfig:
    """Root configuration object for ingestion and the batch CLI."""
    source_directory: str = "./data"
    default_department: str = DEFAULT_DEPARTMENT
    default_status: str = DEFAULT_STATUS
    default_on_domain: str = DEFAULT_ON_DOMAIN
    null_sentinels: frozenset[str] = frozenset()  # 大文字化済
    keep_na_strings: tuple[str, ...] | None = None
    section_markers: SectionMarkers = field(default_factory=SectionMarkers)
    # kind ("cpu"/"monitor") -> field value -> extra aliases (appended after built-ins)
    extra_aliases: dict[str, dict[str, tuple[str, ...]]] = field(default_factory=dict)


def default_config() -> IngestConfig:
    """Built-in settings, used when no config file is found."""
    return IngestConfig()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            fails validation (unknown keys, wrong types, empty marker lists).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _parse_aliases(raw: dict[str, Any]) -> dict[str, dict[str, tuple[str, ...]]]:
    known = {
        "cpu": {f.value for f in CpuField},
        "monitor": {f.value for f in MonitorField},
    }
    parsed: dict[str, dict[str, tuple[str, ...]]] = {}
    for kind, mapping in raw.items():
        unknown = sorted(set(mapping) - known[kind])
        if unknown:
            raise ConfigError(f"unknown {kind} fields in aliases: {unknown}")
        parsed[kind] = {name: tuple(aliases) for name, aliases in mapping.items()}
    return parsed


def load_config(path: Path) -> IngestConfig:
    """Load and validate a YAML config file.

    Every key is optional; an empty file yields default_config(). Markers are
    upper-cased and null sentinels upper-cased and trimmed on load.

    Args:
        path: YAML file path

    Returns:
        Frozen IngestConfig

    Raises:
        ConfigError: File missing, invalid YAML, not a mapping, schema
            violation, or aliases naming an unknown field
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    markers_raw = data.get("section_markers", {})
    defaults = SectionMarkers()
    markers = SectionMarkers(
        cpu=tuple(m.upper() for m in markers_raw.get("cpu", defaults.cpu)),
        monitor=tuple(m.upper() for m in markers_raw.get("monitor", defaults.monitor)),
        end=tuple(m.upper() for m in markers_raw.get("end", defaults.end)),
        cpu_exit=tuple(m.upper() for m in markers_raw.get("cpu_exit", defaults.cpu_exit)),
        monitor_exit=tuple(m.upper() for m in markers_raw.get("monitor_exit", defaults.monitor_exit)),
        header_label=markers_raw.get("header_label", defaults.header_label),
    )
    keep_na = data.get("keep_na_strings")
    return IngestConfig(
        source_directory=data.get("source_directory", "./data"),
        default_department=data.get("default_department", DEFAULT_DEPARTMENT),
        default_status=data.get("default_status", DEFAULT_STATUS),
        default_on_domain=data.get("default_on_domain", DEFAULT_ON_DOMAIN),
        null_sentinels=frozenset(s.strip().upper() for s in data.get("null_sentinels", [])),
        keep_na_strings=tuple(keep_na) if keep_na is not None else None,
        section_markers=markers,
        extra_aliases=_parse_aliases(data.get("aliases", {})),
    )
