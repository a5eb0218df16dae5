# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from equipment_import.logging.init import reset_logging
from tests.workbooks import Rows, workbook_bytes


@pytest.fixture(autouse=True)
def _fresh_logging():
    # ハンドラは sys.stdout を保持するので capsys ごとに作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("EQUIPMENT_IMPORT_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
default_department: unassigned
null_sentinels: ["-", "n/a"]
section_markers:
  cpu: ["CPU'S - DER-"]
  monitor: ["MONITORES - DER-"]
  end: ["TOTAL"]
  header_label: ITEM
aliases:
  cpu:
    asset_tag: ["Patrim."]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[..., Path]:
    """Factory writing an .xlsx under ./data (or a given directory)."""
    def _make(name: str, sheets: dict[str, Rows], directory: Path | None = None) -> Path:
        target = (directory or temp_workdir / "data") / name
        target.write_bytes(workbook_bytes(sheets))
        return target
    return _make
