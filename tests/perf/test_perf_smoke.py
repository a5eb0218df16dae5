from __future__ import annotations

import time
from pathlib import Path

import pytest

from equipment_import import ingest_file
from scripts.gen_sample_workbook import create_workbook

"""Performance smoke test: a few hundred rows per layout must ingest quickly.

Budgets are lenient so CI stays stable; the point is to catch accidental
quadratic behaviour in header resolution or section scanning.
"""


@pytest.mark.parametrize("layout", ["legacy", "keyed"])
def test_ingest_generated_workbook(tmp_path: Path, layout: str):
    path = create_workbook(tmp_path / f"{layout}.xlsx", layout, ["GTI", "CPD"], cpus=200, monitors=50)

    start = time.perf_counter()
    result = ingest_file(path)
    elapsed = time.perf_counter() - start

    assert len(result.cpus) == 400
    assert len(result.monitors) == 100
    assert {c.department for c in result.cpus} == {"GTI", "CPD"}
    assert elapsed < 20.0, f"ingest too slow: {elapsed:.3f}s"
    throughput = (len(result.cpus) + len(result.monitors)) / elapsed
    assert throughput > 25
