from .vehicle_store import COLUMN_MAP, InMemoryVehicleStore, PostgresVehicleStore, pg_connection

__all__ = ["COLUMN_MAP", "PostgresVehicleStore", "InMemoryVehicleStore", "pg_connection"]
