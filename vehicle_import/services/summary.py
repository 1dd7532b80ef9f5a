from __future__ import annotations

from ..models.outcome import ImportOutcome

"""SUMMARY line rendering.

Format:
    SUMMARY rows={total} imported={imported} failed={failed} invalid={invalid} elapsed_sec={elapsed}

`invalid` counts the failed rows that were rejected by local validation and
never submitted; it is a subset of `failed`.
"""

__all__ = [
    "format_number",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Render a metric without scientific notation or a trailing `.0`."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: ImportOutcome) -> str:
    """Render the SUMMARY line for one import operation.

    Examples:
        >>> render_summary_line(ImportOutcome(elapsed_seconds=1.5))
        'SUMMARY rows=0 imported=0 failed=0 invalid=0 elapsed_sec=1.5'
    """
    return (
        f"SUMMARY rows={outcome.total} "
        f"imported={outcome.imported_count} "
        f"failed={outcome.failed_count} "
        f"invalid={outcome.invalid_count} "
        f"elapsed_sec={format_number(outcome.elapsed_seconds)}"
    )
