from __future__ import annotations

import re
import unicodedata
from datetime import datetime
from typing import Any

"""Text helpers shared by the section tracker, field mapper and record builder."""

__all__ = [
    "strip_accents",
    "normalize_header",
    "cell_text",
]

_SEPARATORS = re.compile(r"[_\-\.\:/\\]+")
_SPACES = re.compile(r"\s+")


def strip_accents(s: str) -> str:
    return "".join(ch for ch in unicodedata.normalize("NFD", s) if unicodedata.category(ch) != "Mn")


def normalize_header(h: str) -> str:
    """Lowercase, accent-free, separator-collapsed form of a header or alias.

    "Memória RAM" -> "memoria ram", "Marca/Modelo" -> "marca modelo",
    "Nº Tombamento" -> "no tombamento".
    """
    base = strip_accents(h or "").replace("º", "o").replace("ª", "a")
    base = _SEPARATORS.sub(" ", base.strip().lower())
    return _SPACES.sub(" ", base).strip()


def cell_text(value: Any) -> str:
    """Render a raw cell as trimmed text.

    Integral floats lose their ".0" (Excel stores 12018 as 12018.0) and
    datetimes become ISO dates; None becomes "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "SIM" if value else "NÃO"
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        if value.hour == value.minute == value.second == 0:
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    return str(value).strip()
