"""SQLite implementation of production entry storage."""

from datetime import date, time

import aiosqlite

from millbook.core.entities.production import ProductionEntry, Shift
from millbook.core.interfaces.production_store import IProductionStore
from millbook.core.time_utils import parse_stored_datetime
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool

_COLUMNS = (
    "id",
    "timestamp",
    "production_date",
    "shift",
    "line_id",
    "supervisor_name",
    "helper_name",
    "start_time",
    "end_time",
    "breakdown_minutes",
    "breakdown_reason",
    "opening_stock_kg",
    "raw_consumed_kg",
    "oil_produced_kg",
    "cake_produced_kg",
    "runtime_minutes",
    "oil_yield_percent",
    "cake_yield_percent",
    "total_accounted_percent",
    "process_loss_percent",
    "oil_per_hour",
    "is_voided",
    "entered_by",
    "entered_by_id",
)


class SQLiteProductionStore(IProductionStore):
    """SQLite implementation of shift records."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def add_entry(self, entry: ProductionEntry) -> ProductionEntry:
        placeholders = ", ".join("?" for _ in _COLUMNS)
        async with self._pool.transaction() as conn:
            await conn.execute(
                f"INSERT INTO production_entries ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                (
                    entry.id,
                    entry.timestamp.isoformat(),
                    entry.production_date.isoformat(),
                    entry.shift.value,
                    entry.line_id,
                    entry.supervisor_name,
                    entry.helper_name,
                    entry.start_time.strftime("%H:%M"),
                    entry.end_time.strftime("%H:%M"),
                    entry.breakdown_minutes,
                    entry.breakdown_reason,
                    entry.opening_stock_kg,
                    entry.raw_consumed_kg,
                    entry.oil_produced_kg,
                    entry.cake_produced_kg,
                    entry.runtime_minutes,
                    entry.oil_yield_percent,
                    entry.cake_yield_percent,
                    entry.total_accounted_percent,
                    entry.process_loss_percent,
                    entry.oil_per_hour,
                    int(entry.is_voided),
                    entry.entered_by,
                    entry.entered_by_id,
                ),
            )
            return entry

    async def get_entry(self, entry_id: str) -> ProductionEntry | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM production_entries WHERE id = ?", (entry_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_entry(row) if row else None

    async def list_entries(
        self,
        entered_by_id: str | None = None,
        production_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ProductionEntry]:
        conditions = []
        params: list = []
        if entered_by_id is not None:
            conditions.append("entered_by_id = ?")
            params.append(entered_by_id)
        if production_date is not None:
            conditions.append("production_date = ?")
            params.append(production_date.isoformat())

        query = "SELECT * FROM production_entries"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY rowid LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> ProductionEntry:
        return ProductionEntry(
            id=row["id"],
            timestamp=parse_stored_datetime(row["timestamp"]),
            production_date=date.fromisoformat(row["production_date"]),
            shift=Shift(row["shift"]),
            line_id=row["line_id"],
            supervisor_name=row["supervisor_name"],
            helper_name=row["helper_name"],
            start_time=time.fromisoformat(row["start_time"]),
            end_time=time.fromisoformat(row["end_time"]),
            breakdown_minutes=row["breakdown_minutes"],
            breakdown_reason=row["breakdown_reason"],
            opening_stock_kg=row["opening_stock_kg"],
            raw_consumed_kg=row["raw_consumed_kg"],
            oil_produced_kg=row["oil_produced_kg"],
            cake_produced_kg=row["cake_produced_kg"],
            runtime_minutes=row["runtime_minutes"],
            oil_yield_percent=row["oil_yield_percent"],
            cake_yield_percent=row["cake_yield_percent"],
            total_accounted_percent=row["total_accounted_percent"],
            process_loss_percent=row["process_loss_percent"],
            oil_per_hour=row["oil_per_hour"],
            is_voided=bool(row["is_voided"]),
            entered_by=row["entered_by"],
            entered_by_id=row["entered_by_id"],
        )
