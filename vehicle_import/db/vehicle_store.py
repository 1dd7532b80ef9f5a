from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import psycopg2
from psycopg2 import errors, sql

from ..exceptions import BoundaryUnavailableError
from ..models.fields import CanonicalField
from ..registry.rdw import normalize_plate
from ..services.committer import BoundaryResult, Created, Rejected

"""Persistence boundary implementations.

PostgresVehicleStore inserts the whole batch in one transaction with one
SAVEPOINT per vehicle, so a rejected row (duplicate plate, bad date) is rolled
back alone and reported as Rejected while the rest of the batch commits.
Connection-level failures abort the batch with BoundaryUnavailableError.

InMemoryVehicleStore is the mock mode used when no database is configured.
"""

__all__ = [
    "COLUMN_MAP",
    "PostgresVehicleStore",
    "InMemoryVehicleStore",
    "pg_connection",
]

logger = logging.getLogger(__name__)

# wire name -> table column. brandAndModel is input-only and has no column.
COLUMN_MAP: dict[str, str] = {
    CanonicalField.LICENSE_PLATE.wire_name: "license_plate",
    CanonicalField.BRAND.wire_name: "brand",
    CanonicalField.MODEL.wire_name: "model",
    CanonicalField.VEHICLE_TYPE.wire_name: "vehicle_type",
    CanonicalField.FUEL.wire_name: "fuel",
    CanonicalField.COMPANY.wire_name: "company",
    CanonicalField.REGISTERED_TO.wire_name: "registered_to",
    CanonicalField.REGISTRATION_DATE.wire_name: "registered_to_date",
    CanonicalField.CHASSIS_NUMBER.wire_name: "chassis_number",
    CanonicalField.APK_DATE.wire_name: "apk_date",
    CanonicalField.PRODUCTION_DATE.wire_name: "production_date",
    CanonicalField.GPS.wire_name: "gps",
    CanonicalField.EURO_ZONE.wire_name: "euro_zone",
    CanonicalField.ROADSIDE_ASSISTANCE.wire_name: "roadside_assistance",
    CanonicalField.SPARE_KEY.wire_name: "spare_key",
    CanonicalField.WINTER_TIRES.wire_name: "winter_tires",
    CanonicalField.TIRE_SIZE.wire_name: "tire_size",
    CanonicalField.INTERNAL_NOTES.wire_name: "internal_appointments",
    CanonicalField.REMARKS.wire_name: "remarks",
    CanonicalField.GENERAL_INFO.wire_name: "general_info",
}

_PLATE = CanonicalField.LICENSE_PLATE.wire_name
_SAVEPOINT = sql.Identifier("vehicle_import_item")


@contextmanager
def pg_connection(dsn: str) -> Iterator[Any]:
    """Open a psycopg2 connection (explicit transactions) and always close it."""
    try:
        conn = psycopg2.connect(dsn)
    except psycopg2.Error as e:
        raise BoundaryUnavailableError(f"database connection failed: {e}") from e
    conn.autocommit = False
    try:
        yield conn
    finally:
        conn.close()


def _persisted(vehicle: Mapping[str, str]) -> dict[str, str]:
    return {wire: v for wire, v in vehicle.items() if wire in COLUMN_MAP and v is not None}


class PostgresVehicleStore:
    """Creates vehicles in PostgreSQL, one savepoint per item."""

    def __init__(self, connection: Any, table: str = "vehicles") -> None:
        self._conn = connection
        self._table = table

    def _insert_statement(self, wires: Sequence[str]) -> sql.Composed:
        return sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING id").format(
            sql.Identifier(self._table),
            sql.SQL(", ").join(sql.Identifier(COLUMN_MAP[w]) for w in wires),
            sql.SQL(", ").join(sql.Placeholder() * len(wires)),
        )

    def create_vehicles(self, vehicles: Sequence[Mapping[str, str]]) -> list[BoundaryResult]:
        results: list[BoundaryResult] = []
        try:
            with self._conn.cursor() as cur:
                for vehicle in vehicles:
                    values = _persisted(vehicle)
                    wires = list(values)
                    cur.execute(sql.SQL("SAVEPOINT {}").format(_SAVEPOINT))
                    try:
                        cur.execute(self._insert_statement(wires), [values[w] for w in wires])
                        row = cur.fetchone()
                    except errors.UniqueViolation:
                        cur.execute(sql.SQL("ROLLBACK TO SAVEPOINT {}").format(_SAVEPOINT))
                        results.append(Rejected(f"duplicate license plate: {values.get(_PLATE)}"))
                        continue
                    except (psycopg2.IntegrityError, psycopg2.DataError) as e:
                        cur.execute(sql.SQL("ROLLBACK TO SAVEPOINT {}").format(_SAVEPOINT))
                        message = (e.pgerror or str(e)).strip()
                        results.append(Rejected(message.splitlines()[0] if message else "rejected"))
                        continue
                    cur.execute(sql.SQL("RELEASE SAVEPOINT {}").format(_SAVEPOINT))
                    results.append(Created({"id": row[0], **values}))
            self._conn.commit()
        except psycopg2.Error as e:
            self._conn.rollback()
            raise BoundaryUnavailableError(f"batch insert failed: {e}") from e

        created = sum(1 for r in results if isinstance(r, Created))
        logger.debug("table=%s created=%d rejected=%d", self._table, created, len(results) - created)
        return results


class InMemoryVehicleStore:
    """Mock persistence: sequential ids, rejects duplicate plates."""

    def __init__(self, existing_plates: Sequence[str] = ()) -> None:
        self._next_id = 1
        self._plates: set[str] = {normalize_plate(p) for p in existing_plates}
        self.vehicles: list[dict[str, Any]] = []
        self.calls = 0

    def create_vehicles(self, vehicles: Sequence[Mapping[str, str]]) -> list[BoundaryResult]:
        self.calls += 1
        results: list[BoundaryResult] = []
        for vehicle in vehicles:
            values = _persisted(vehicle)
            plate = values.get(_PLATE, "")
            key = normalize_plate(plate)
            if key in self._plates:
                results.append(Rejected(f"duplicate license plate: {plate}"))
                continue
            self._plates.add(key)
            entity = {"id": self._next_id, **values}
            self._next_id += 1
            self.vehicles.append(entity)
            results.append(Created(entity))
        return results
