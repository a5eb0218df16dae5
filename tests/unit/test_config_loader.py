from __future__ import annotations

from pathlib import Path

import pytest

from equipment_import.config.loader import ConfigError, IngestConfig, SectionMarkers, default_config, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.default_department == "unassigned"
    assert cfg.null_sentinels == frozenset({"-", "N/A"})
    assert cfg.section_markers == SectionMarkers()
    assert cfg.extra_aliases == {"cpu": {"asset_tag": ("Patrim.",)}}


def test_default_config_matches_empty_file(temp_workdir: Path):
    empty = temp_workdir / "config" / "empty.yml"
    empty.write_text("", encoding="utf-8")
    assert load_config(empty) == default_config() == IngestConfig()


def test_markers_are_uppercased(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "m.yml"
    cfg_path.write_text('section_markers:\n  cpu: ["Cpus - Setor "]\n', encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.section_markers.cpu == ("CPUS - SETOR ",)
    assert cfg.section_markers.monitor == SectionMarkers().monitor


def test_exit_markers_from_config(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "exit.yml"
    cfg_path.write_text('section_markers:\n  cpu_exit: ["Telas"]\n  monitor_exit: []\n', encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.section_markers.cpu_exit == ("TELAS",)
    assert cfg.section_markers.monitor_exit == ()


def test_keep_na_strings(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "na.yml"
    cfg_path.write_text("keep_na_strings: [NA]\n", encoding="utf-8")
    assert load_config(cfg_path).keep_na_strings == ("NA",)
    assert default_config().keep_na_strings is None


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError):
        load_config(missing)


def test_load_config_invalid_yaml(temp_workdir: Path):
    bad = temp_workdir / "config" / "bad.yml"
    bad.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(bad)
    assert "invalid yaml" in str(e.value)


def test_load_config_root_not_mapping(temp_workdir: Path):
    bad = temp_workdir / "config" / "list.yml"
    bad.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_wrong_type(temp_workdir: Path):
    bad = temp_workdir / "config" / "type.yml"
    bad.write_text("null_sentinels: dash\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(bad)
    assert "config validation failed" in str(e.value)


def test_load_config_unknown_alias_field(temp_workdir: Path):
    bad = temp_workdir / "config" / "alias.yml"
    bad.write_text("aliases:\n  monitor:\n    processor: [CPU]\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(bad)
    assert "unknown monitor fields" in str(e.value)
