from __future__ import annotations

import json
from pathlib import Path

from equipment_import.cli import main as cli_main
from tests.workbooks import CPU_HEADERS, legacy_sheet


def test_run_success_writes_output_and_summary(write_config: Path, temp_workdir: Path, make_workbook, capsys):
    make_workbook("01_legado.xlsx", {"GTI": legacy_sheet()})
    make_workbook("02_modelo.xlsx", {"Máquinas": [CPU_HEADERS, [1] + ["x"] * (len(CPU_HEADERS) - 1)]})

    code = cli_main(["--output", "out/equipamentos.json"])

    out = capsys.readouterr().out
    assert code == 0
    payload = json.loads((temp_workdir / "out" / "equipamentos.json").read_text(encoding="utf-8"))
    assert [c["department"] for c in payload["cpus"]] == ["GTI", "x"]
    assert len(payload["monitors"]) == 1
    assert "INFO 01_legado.xlsx: cpus=1 monitors=1" in out
    assert "SUMMARY files=2/2 success=2 failed=0 cpus=2 monitors=1 rejected_rows=0" in out
    assert not list((temp_workdir / "logs").iterdir())


def test_run_partial_failure_with_diagnostics(write_config: Path, temp_workdir: Path, make_workbook, capsys):
    make_workbook("bom.xlsx", {
        "GTI": [["CPU'S - DER-GTI", None], [1, "DER-GTI001"], [2, None]],
    })
    (temp_workdir / "data" / "ruim.xlsx").write_bytes(b"\x00\x01garbage")

    code = cli_main(["--diagnostics", "--output", "out.json"])

    out = capsys.readouterr().out
    assert code == 2
    assert "WARN ruim.xlsx:" in out
    assert "SUMMARY files=2/2 success=1 failed=1 cpus=1 monitors=0 rejected_rows=1" in out
    (log_file,) = list((temp_workdir / "logs").glob("diagnostics-*.log"))
    kinds = [json.loads(line)["kind"] for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert sorted(kinds) == ["FILE_DECODE_ERROR", "ROW_REJECTED", "SHAPE_FALLBACK"]
    assert f"INFO diagnostics: {Path('logs') / log_file.name}" in out


def test_run_explicit_file_arguments(temp_workdir: Path, make_workbook, capsys):
    other = temp_workdir / "outros"
    other.mkdir()
    path = make_workbook("inv.xlsx", {"GTI": legacy_sheet()}, directory=other)
    code = cli_main([str(path), str(temp_workdir / "data"), "--output", "out.json"])
    assert code == 0
    assert "files=1/1" in capsys.readouterr().out
