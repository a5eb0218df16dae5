from __future__ import annotations

import io
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..models.raw_sheet import Cell, RawSheet

"""Workbook reader.

Decodes the bytes of an .xlsx / .xls upload into RawSheet grids with pandas
(openpyxl / xlrd engines). No header interpretation happens here: every sheet
is read with header=None so that both the keyed layout and the legacy sectioned
layout can be recovered by the later stages.
"""

__all__ = [
    "DecodeError",
    "read_workbook",
    "read_workbook_file",
]


class DecodeError(Exception):
    """Raised when the byte buffer is not a recognizable spreadsheet container."""


def _na_options(keep_na_strings: Iterable[str] | None) -> dict[str, Any]:
    # pandas 既定の NA 文字列集合から keep_na_strings を除外する
    # ("NA" などを実データとして残したいケース)
    if not keep_na_strings:
        return {"keep_default_na": True, "na_values": None}
    import pandas._libs.parsers as parsers

    custom_na = parsers.STR_NA_VALUES.copy() - set(keep_na_strings)
    return {"keep_default_na": False, "na_values": list(custom_na)}


def _to_cell(value: Any) -> Cell:
    """Convert a pandas/numpy cell into a plain Python cell value."""
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return None
        return value.to_pydatetime()
    if isinstance(value, (float, np.floating)):
        if np.isnan(value):
            return None
        return float(value)
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (int, str, datetime)):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    # time / timedelta など想定外の型は文字列として扱う
    return str(value)


def _frame_to_sheet(name: str, df: pd.DataFrame) -> RawSheet:
    grid = tuple(
        tuple(_to_cell(v) for v in row)
        for row in df.itertuples(index=False, name=None)
    )
    return RawSheet(name=name, grid=grid)


def read_workbook(data: bytes, keep_na_strings: Iterable[str] | None = None) -> list[RawSheet]:
    """Decode a workbook byte buffer into RawSheets, in workbook sheet order.

    Parameters
    ----------
    data: raw bytes of an .xlsx or .xls file
    keep_na_strings: strings to exclude from pandas' default NaN conversion

    Raises
    ------
    DecodeError: the bytes cannot be opened as a spreadsheet
    """
    if not data:
        raise DecodeError("empty workbook buffer")
    try:
        xls = pd.ExcelFile(io.BytesIO(data))
    except Exception as e:  # openpyxl / xlrd / zipfile はそれぞれ別の例外を投げる
        raise DecodeError(f"not a readable spreadsheet: {e}") from e

    options = _na_options(keep_na_strings)
    sheets: list[RawSheet] = []
    with xls:
        for name in xls.sheet_names:
            try:
                df = xls.parse(name, header=None, dtype=object, **options)
            except Exception as e:
                raise DecodeError(f"sheet '{name}' could not be decoded: {e}") from e
            sheets.append(_frame_to_sheet(str(name), df))
    return sheets


def read_workbook_file(path: Path, keep_na_strings: Iterable[str] | None = None) -> list[RawSheet]:
    """Read a workbook from disk. Missing / unreadable files raise DecodeError too."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise DecodeError(f"cannot read {path}: {e}") from e
    return read_workbook(data, keep_na_strings=keep_na_strings)
