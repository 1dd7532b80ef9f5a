from __future__ import annotations

from dataclasses import dataclass

"""RawTable model: decoder output, before any vehicle semantics are applied.

Rows may be shorter or longer than the header row. Cells past the header
width are ignored by the mapper; missing cells read as empty.
"""

__all__ = [
    "RawTable",
]


@dataclass(frozen=True)
class RawTable:
    """Ordered header row plus ordered raw-cell rows of one input file."""
    headers: tuple[str, ...]
    rows: tuple[tuple[str | None, ...], ...]

    @classmethod
    def empty(cls) -> RawTable:
        return cls(headers=(), rows=())

    @property
    def is_empty(self) -> bool:
        """True when there is no header or no data row to import."""
        return not self.headers or not self.rows

    def cell(self, row_index: int, column: int) -> str | None:
        """Cell at (row, column); None when the row is shorter than column."""
        row = self.rows[row_index]
        if column < len(row):
            return row[column]
        return None
