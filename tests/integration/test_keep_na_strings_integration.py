from __future__ import annotations

from equipment_import import ingest
from equipment_import.config.loader import IngestConfig
from tests.workbooks import workbook_bytes


def _workbook() -> bytes:
    # "NA" é sigla de departamento, não valor ausente
    return workbook_bytes({
        "inv": [
            ["Nomenclatura", "Processador", "Departamento", "HD"],
            ["DER-NA001", "i5", "NA", "N/A"],
        ]
    })


def test_default_na_strings_become_empty():
    (cpu,) = ingest(_workbook()).cpus
    assert cpu.department == "inv"
    assert cpu.hard_disk is None


def test_keep_na_strings_preserves_values():
    (cpu,) = ingest(_workbook(), IngestConfig(keep_na_strings=("NA",))).cpus
    assert cpu.department == "NA"
    # N/A is still a pandas NA string
    assert cpu.hard_disk is None
