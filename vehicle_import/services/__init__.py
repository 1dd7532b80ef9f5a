"""Import services: committer, tabular pipeline, plate-list import, reporting."""

from .committer import BoundaryResult, Created, PersistenceBoundary, Rejected, commit, partition
from .pipeline import TablePreview, import_table, preview_table
from .plates import import_plates, lookup_plates, parse_plate_list
from .summary import render_summary_line

__all__ = [
    "Created",
    "Rejected",
    "BoundaryResult",
    "PersistenceBoundary",
    "partition",
    "commit",
    "TablePreview",
    "preview_table",
    "import_table",
    "parse_plate_list",
    "lookup_plates",
    "import_plates",
    "render_summary_line",
]
