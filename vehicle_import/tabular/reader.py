from __future__ import annotations

import io
import logging
import math
import re
from datetime import date, datetime, time
from enum import Enum
from pathlib import PurePath
from typing import Any

import pandas as pd

from ..exceptions import DecodeError
from ..models.raw_table import RawTable

"""Tabular decoder: raw bytes -> RawTable.

Two input shapes are supported:
- delimited text (CSV with `,` or `;`), split line by line
- spreadsheet workbook (xlsx/xls), first sheet only, read through pandas

Neither path knows anything about vehicle fields. Input with no header or no
data row decodes to RawTable.empty(); callers report that as "no importable
data" instead of treating it as a crash.
"""

__all__ = [
    "TableFormat",
    "detect_format",
    "decode_delimited",
    "decode_workbook",
    "decode_table",
]

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_XLSX_MAGIC = b"PK\x03\x04"
_XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_FORMAT_ALIASES = {
    "csv": "delimited",
    "txt": "delimited",
    "tsv": "delimited",
    "delimited": "delimited",
    "xlsx": "workbook",
    "xls": "workbook",
    "xlsm": "workbook",
    "excel": "workbook",
    "workbook": "workbook",
}


class TableFormat(Enum):
    DELIMITED = "delimited"
    WORKBOOK = "workbook"

    @classmethod
    def parse(cls, hint: str) -> TableFormat:
        """Resolve a user-facing format hint (csv, xlsx, ...)."""
        key = hint.strip().lower().lstrip(".")
        try:
            return cls(_FORMAT_ALIASES[key])
        except KeyError:
            raise DecodeError(f"unknown table format: {hint!r}") from None


def detect_format(
    data: bytes, filename: str | None = None, hint: str | None = None
) -> TableFormat:
    """Pick the decoder for `data`.

    Priority: explicit hint > file name suffix > magic bytes > delimited text.
    """
    if hint:
        return TableFormat.parse(hint)
    if filename:
        suffix = PurePath(filename).suffix.lower().lstrip(".")
        if suffix in _FORMAT_ALIASES:
            return TableFormat(_FORMAT_ALIASES[suffix])
    if data.startswith(_XLSX_MAGIC) or data.startswith(_XLS_MAGIC):
        return TableFormat.WORKBOOK
    return TableFormat.DELIMITED


def _decode_text(data: bytes) -> str:
    # Exported sheets are either UTF-8 (often with BOM) or Windows-1252
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        try:
            return data.decode("cp1252")
        except UnicodeDecodeError as e:
            raise DecodeError(f"cannot decode delimited text: {e}") from e


def _clean_cell(raw: str) -> str:
    return raw.strip().strip('"').replace('""', '"').strip()


def decode_delimited(data: bytes | str) -> RawTable:
    """Decode delimited text.

    The delimiter is `;` when the header line contains one, `,` otherwise.
    Cells are split naively (no quoted-delimiter support), trimmed and
    stripped of surrounding quotes.
    """
    text = data if isinstance(data, str) else _decode_text(data)
    lines = [line for line in _LINE_SPLIT.split(text) if line.strip() != ""]
    if len(lines) < 2:
        return RawTable.empty()

    delimiter = ";" if ";" in lines[0] else ","
    headers = tuple(_clean_cell(h) for h in lines[0].split(delimiter))
    rows = tuple(
        tuple(_clean_cell(v) for v in line.split(delimiter)) for line in lines[1:]
    )
    logger.debug("delimited decode delimiter=%r headers=%s rows=%d", delimiter, headers, len(rows))
    return RawTable(headers=headers, rows=rows)


def _cell_to_str(value: Any) -> str | None:
    """Coerce one workbook cell to a string; empty cells become None."""
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return None
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value)
    return text if text.strip() != "" else None


def decode_workbook(data: bytes) -> RawTable:
    """Decode the first sheet of an xlsx/xls workbook.

    keep_default_na=False keeps literal "NA"/"N/A" cells as text instead of
    letting pandas turn them into NaN. Legacy OLE2 (.xls) workbooks go through
    xlrd, everything else through openpyxl.
    """
    engine = "xlrd" if data.startswith(_XLS_MAGIC) else "openpyxl"
    try:
        df = pd.read_excel(
            io.BytesIO(data),
            sheet_name=0,
            header=None,
            dtype=object,
            keep_default_na=False,
            engine=engine,
        )
    except ImportError as e:
        raise DecodeError(f"workbook engine {engine} is not available: {e}") from e
    except Exception as e:
        logger.warning("workbook decode failed: %s", e)
        return RawTable.empty()

    rows: list[tuple[str | None, ...]] = []
    for raw in df.itertuples(index=False, name=None):
        cells = tuple(_cell_to_str(v) for v in raw)
        if all(c is None for c in cells):
            continue
        rows.append(cells)
    if len(rows) < 2:
        return RawTable.empty()

    headers = tuple((h or "").strip() for h in rows[0])
    logger.debug("workbook decode headers=%s rows=%d", headers, len(rows) - 1)
    return RawTable(headers=headers, rows=tuple(rows[1:]))


def decode_table(
    data: bytes, filename: str | None = None, hint: str | None = None
) -> RawTable:
    """Decode `data` with the detected or declared format."""
    fmt = detect_format(data, filename=filename, hint=hint)
    if fmt is TableFormat.WORKBOOK:
        return decode_workbook(data)
    return decode_delimited(data)
