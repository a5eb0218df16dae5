#!/usr/bin/env python3
"""Synthetic inventory workbook generator.

Generates Excel files in either of the two layouts the importer understands:

- legacy: one sheet per department, "CPU'S - DER-<DEPT>" / "MONITORES - DER-<DEPT>"
  section markers, an ITEM header row, positional data rows and TOTAL rows
- keyed: a "Máquinas" and a "Monitores" sheet with the template header row

Used for manual CLI runs and by the performance smoke test.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

CPU_TEMPLATE_HEADERS = [
    "Item", "Nomenclatura", "Tombamento", "E-estado", "Marca/Modelo", "Processador",
    "Memória RAM", "HD", "SSD", "Sistema Operacional", "No Domínio", "Data Formatação",
    "Responsável", "Desfazimento", "Departamento",
]
MONITOR_TEMPLATE_HEADERS = [
    "Item", "Tombamento", "Número Série", "E-estado", "Modelo", "Polegadas",
    "Observação", "Data Verificação", "Responsável", "Desfazimento", "Departamento",
]

_BRANDS = ["Dell OptiPlex 7010", "HP ProDesk 400", "Lenovo M720q", "Positivo Master D3200"]
_PROCESSORS = ["Intel Core i3", "Intel Core i5", "Intel Core i7", "AMD Ryzen 5"]
_RAM = ["4GB", "8GB", "16GB"]
_SYSTEMS = ["Windows 10", "Windows 11", "Ubuntu 22.04"]
_MONITORS = ["Dell P2319H", "LG 24MK430H", "AOC 22B1HS", "Samsung S24R350"]
_OWNERS = ["Ana Souza", "Carlos Lima", "Rita Alves", "João Pereira", ""]


def generate_cpu_rows(count: int, department: str) -> list[list[Any]]:
    """Positional CPU rows (14 columns, legacy column order)."""
    dates = pd.date_range("2023-01-01", "2024-12-31", periods=50)
    rows = []
    for i in range(1, count + 1):
        rows.append([
            i,
            f"DER-{department}{i:03d}",
            str(10_000 + np.random.randint(0, 89_999)),
            np.random.choice(["Ativo", "Inativo", "Manutenção"]),
            np.random.choice(_BRANDS),
            np.random.choice(_PROCESSORS),
            np.random.choice(_RAM),
            np.random.choice(["500GB", "1TB", None]),
            np.random.choice(["240GB", "480GB", None]),
            np.random.choice(_SYSTEMS),
            np.random.choice(["SIM", "NÃO"]),
            pd.Timestamp(np.random.choice(dates)).to_pydatetime(),
            np.random.choice(_OWNERS),
            None,
        ])
    return rows


def generate_monitor_rows(count: int) -> list[list[Any]]:
    """Positional monitor rows (columns 7-10 left blank as in the legacy sheets)."""
    rows = []
    for i in range(1, count + 1):
        rows.append([
            i,
            str(20_000 + np.random.randint(0, 79_999)),
            f"SN{np.random.randint(100_000, 999_999)}",
            "Ativo",
            np.random.choice(_MONITORS),
            int(np.random.choice([19, 21, 22, 24, 27])),
            None,
            None, None, None, None,
            "2024-06-01",
            np.random.choice(_OWNERS),
            None,
        ])
    return rows


def legacy_sheet_rows(department: str, cpus: int, monitors: int) -> list[list[Any]]:
    width = 14
    blank = [None] * width

    def _line(first: str) -> list[Any]:
        return [first] + [None] * (width - 1)

    cpu_header = ["ITEM", "NOMENCLATURA", "TOMBAMENTO", "E-ESTADO", "MARCA/MODELO", "PROCESSADOR",
                  "MEMÓRIA RAM", "HD", "SSD", "SISTEMA OPERACIONAL", "NO DOMÍNIO",
                  "DATA FORMATAÇÃO", "RESPONSÁVEL", "DESFAZIMENTO"]
    monitor_header = ["ITEM", "TOMBAMENTO", "NÚMERO SÉRIE", "E-ESTADO", "MODELO", "POLEGADAS",
                      "OBSERVAÇÃO", None, None, None, None, "DATA VERIFICAÇÃO", "RESPONSÁVEL",
                      "DESFAZIMENTO"]
    grid: list[list[Any]] = [_line(f"CPU'S - DER-{department}"), cpu_header]
    grid.extend(generate_cpu_rows(cpus, department))
    grid.append(_line(f"TOTAL DE MÁQUINAS: {cpus}"))
    grid.append(blank)
    grid.append(_line(f"MONITORES - DER-{department}"))
    grid.append(monitor_header)
    grid.extend(generate_monitor_rows(monitors))
    grid.append(_line(f"TOTAL DE MONITORES: {monitors}"))
    return grid


def keyed_sheets(departments: list[str], cpus: int, monitors: int) -> dict[str, list[list[Any]]]:
    cpu_grid: list[list[Any]] = [CPU_TEMPLATE_HEADERS]
    monitor_grid: list[list[Any]] = [MONITOR_TEMPLATE_HEADERS]
    for department in departments:
        cpu_grid.extend(row + [department] for row in generate_cpu_rows(cpus, department))
        for row in generate_monitor_rows(monitors):
            # 鍵付きレイアウトには空き列 (7-10) がない
            monitor_grid.append(row[:7] + row[11:] + [department])
    return {"Máquinas": cpu_grid, "Monitores": monitor_grid}


def create_workbook(
    output_path: Path,
    layout: str = "legacy",
    departments: list[str] | None = None,
    cpus: int = 50,
    monitors: int = 20,
    seed: int = 42,
) -> Path:
    """Write a synthetic inventory workbook and return its path.

    Args:
        output_path: Where the .xlsx is written (parents are created)
        layout: "legacy" (sectioned, one sheet per department) or "keyed"
        departments: Department codes (default: ["GTI"])
        cpus: CPU rows per department
        monitors: Monitor rows per department
        seed: Random seed for reproducible data
    """
    np.random.seed(seed)
    departments = departments or ["GTI"]
    if layout == "legacy":
        sheets = {dept: legacy_sheet_rows(dept, cpus, monitors) for dept in departments}
    elif layout == "keyed":
        sheets = keyed_sheets(departments, cpus, monitors)
    else:
        raise ValueError(f"unknown layout: {layout}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for name, grid in sheets.items():
            pd.DataFrame(grid).to_excel(writer, sheet_name=name, header=False, index=False)
    return output_path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic equipment inventory workbooks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Legacy sectioned workbook, one sheet per department
  %(prog)s data/legado.xlsx --departments GTI CPD --cpus 40 --monitors 15

  # Keyed (template) workbook
  %(prog)s data/modelo.xlsx --layout keyed --cpus 500
        """,
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--layout", choices=["legacy", "keyed"], default="legacy")
    parser.add_argument("--departments", nargs="+", default=["GTI"])
    parser.add_argument("--cpus", type=int, default=50, help="CPU rows per department (default: 50)")
    parser.add_argument("--monitors", type=int, default=20, help="Monitor rows per department (default: 20)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.cpus < 0 or args.monitors < 0:
        print("Error: --cpus / --monitors must not be negative", file=sys.stderr)
        return 1

    try:
        path = create_workbook(
            args.output, args.layout, args.departments, args.cpus, args.monitors, args.seed
        )
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Created Excel file: {path}")
    print(f"  Layout: {args.layout}")
    print(f"  Departments: {', '.join(args.departments)}")
    print(f"  CPUs: {args.cpus * len(args.departments)}  Monitors: {args.monitors * len(args.departments)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
