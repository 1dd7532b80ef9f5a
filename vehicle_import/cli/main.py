from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, ImportConfig, load_config, resolve_dsn
from ..db.vehicle_store import InMemoryVehicleStore, PostgresVehicleStore, pg_connection
from ..exceptions import VehicleImportError
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.outcome import ImportOutcome
from ..registry.rdw import RdwRegistry
from ..services.committer import PersistenceBoundary
from ..services.pipeline import import_table, preview_table
from ..services.plates import import_plates, parse_plate_list
from ..services.summary import render_summary_line

"""CLI entrypoint.

    vehicle-import [--config F] table FILE [--format F] [--preview] [--debug]
    vehicle-import [--config F] plates [PLATE ...] [--file F] [--debug]

Exit codes: 0 every row imported, 2 some rows failed, 1 fatal (config,
unusable input, whole batch failed). Set DISABLE_DB_CONNECT=1 to force the
in-memory store regardless of the configured persistence.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

PREVIEW_ROWS = 10


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so DATABASE_URL / PG* from the file win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="vehicle-import", description="Bulk vehicle importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default {DEFAULT_CONFIG_PATH})")
    # also accepted after the subcommand; SUPPRESS keeps the top-level value when absent
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", default=argparse.SUPPRESS, help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    t = sub.add_parser("table", parents=[common], help="Import a CSV / Excel vehicle table")
    t.add_argument("file", type=Path)
    t.add_argument("--format", dest="fmt", default=None, help="csv or xlsx (default: detect)")
    t.add_argument("--preview", action="store_true", help="Print the mapped rows and exit without importing")

    pl = sub.add_parser("plates", parents=[common], help="Import vehicles by license plate via the RDW registry")
    pl.add_argument("plates", nargs="*", help="License plates")
    pl.add_argument("--file", type=Path, default=None, help="Text file with plates (newline or comma separated)")
    return p.parse_args(argv)


@contextmanager
def _boundary(cfg: ImportConfig, logger) -> Iterator[PersistenceBoundary]:
    if os.getenv("DISABLE_DB_CONNECT") == "1" or cfg.persistence != "postgres":
        logger.debug("persistence=mock")
        yield InMemoryVehicleStore()
        return
    with pg_connection(resolve_dsn(cfg.database)) as conn:
        logger.debug("persistence=postgres table=%s", cfg.table)
        yield PostgresVehicleStore(conn, table=cfg.table)


def _print_preview(args: argparse.Namespace, logger) -> int:
    preview = preview_table(args.file.read_bytes(), filename=args.file.name, fmt=args.fmt)
    mapping = preview.header_mapping
    logger.info("columns: %s", ", ".join(f"{c.label}->{c.field.wire_name}" for c in mapping.columns if c.field))
    if mapping.unmatched:
        logger.info("unmatched columns: %s", ", ".join(mapping.unmatched))
    for candidate in preview.candidates[:PREVIEW_ROWS]:
        logger.info("row %s", candidate.to_preview_row())
    log_summary(f"rows={len(preview.candidates)} valid={preview.valid_count} invalid={preview.invalid_count}")
    return EXIT_SUCCESS_ALL


def _read_plates(args: argparse.Namespace) -> list[str]:
    plates = [p for raw in args.plates for p in parse_plate_list(raw)]
    if args.file is not None:
        plates.extend(parse_plate_list(args.file.read_text(encoding="utf-8")))
    return plates


def _run(args: argparse.Namespace, cfg: ImportConfig, logger) -> tuple[str, ImportOutcome]:
    with _boundary(cfg, logger) as boundary:
        if args.command == "table":
            source = args.file.name
            outcome = import_table(args.file.read_bytes(), boundary, filename=source, fmt=args.fmt)
        else:
            source = "<plates>"
            registry = RdwRegistry(url=cfg.registry.url, timeout_seconds=cfg.registry.timeout_seconds)
            with registry:
                outcome = import_plates(_read_plates(args), registry, boundary)
    return source, outcome


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up the test runner's argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    set_debug(args.debug)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config, required=args.config is not None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        if args.command == "table" and args.preview:
            return _print_preview(args, logger)
        source, outcome = _run(args, cfg, logger)
    except OSError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL
    except VehicleImportError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL

    for item in outcome.failed:
        logger.warning(
            f"row {item.source.row_number} {item.stage.value}: {item.reason}"
            + (f" (plate {item.source.license_plate})" if item.source.license_plate else "")
        )

    errors = ErrorLogBuffer(cfg.error_log_dir)
    errors.record_outcome(source, outcome)
    log_path = errors.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    summary_line = render_summary_line(outcome)
    # log_summary adds the label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if outcome.failed_count > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
