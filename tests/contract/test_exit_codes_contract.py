from __future__ import annotations

from pathlib import Path

import pytest

from equipment_import.cli import main as cli_main
from equipment_import.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL
from tests.workbooks import legacy_sheet

"""Exit code contract: 0 all decoded, 2 some files failed to decode, 1 fatal."""


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


@pytest.mark.parametrize(
    ("files", "expected"),
    [
        ({}, 0),
        ({"ok.xlsx": True}, 0),
        ({"ok.xlsx": True, "bad.xlsx": False}, 2),
        ({"bad.xlsx": False}, 2),
    ],
)
def test_exit_codes_by_file_outcome(temp_workdir: Path, make_workbook, files, expected):
    for name, readable in files.items():
        if readable:
            make_workbook(name, {"GTI": legacy_sheet()})
        else:
            (temp_workdir / "data" / name).write_bytes(b"broken")
    assert cli_main(["--output", "out.json"]) == expected


def test_exit_code_fatal_on_config_error(temp_workdir: Path):
    (temp_workdir / "config" / "ingest.yml").write_text("aliases: {printer: {}}\n", encoding="utf-8")
    assert cli_main([]) == EXIT_FATAL
