from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from equipment_import.config.loader import SCHEMA_PATH

"""Config schema contract test: the packaged schema accepts the documented keys only."""


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_valid_example():
    config = yaml.safe_load(
        """
source_directory: ./planilhas
default_department: unassigned
default_status: Ativo
default_on_domain: SIM
null_sentinels: ["-", "N/A"]
keep_na_strings: ["NA"]
section_markers:
  cpu: ["CPU'S - DER-"]
  monitor: ["MONITORES - DER-"]
  end: ["TOTAL"]
  header_label: ITEM
aliases:
  cpu:
    asset_tag: ["Patrimônio"]
  monitor:
    serial_number: ["S/N Monitor"]
"""
    )
    jsonschema.validate(config, _schema())


def test_config_schema_empty_document_is_valid():
    jsonschema.validate({}, _schema())


@pytest.mark.parametrize(
    "config",
    [
        {"unknown": 1},
        {"section_markers": {"cpu": []}},
        {"section_markers": {"start": ["X"]}},
        {"aliases": {"printer": {"model": ["Modelo"]}}},
        {"aliases": {"cpu": {"asset_tag": "Patrimônio"}}},
        {"default_department": ""},
    ],
)
def test_config_schema_rejects(config):
    with pytest.raises(ValidationError):
        jsonschema.validate(config, _schema())


def test_repository_example_config_is_valid():
    from pathlib import Path

    example = Path(__file__).resolve().parents[2] / "config" / "ingest.yml"
    jsonschema.validate(yaml.safe_load(example.read_text(encoding="utf-8")), _schema())
