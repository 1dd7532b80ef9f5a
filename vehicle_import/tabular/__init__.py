"""Tabular decoding of delimited text and spreadsheet workbooks."""

from .reader import TableFormat, decode_delimited, decode_table, decode_workbook, detect_format

__all__ = [
    "TableFormat",
    "detect_format",
    "decode_delimited",
    "decode_workbook",
    "decode_table",
]
