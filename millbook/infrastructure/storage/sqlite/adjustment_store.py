"""SQLite implementation of adjustment request storage."""

import aiosqlite

from millbook.core.entities.adjustment import AdjustmentStatus, InventoryAdjustment
from millbook.core.entities.stock import ProductType
from millbook.core.interfaces.adjustment_store import IAdjustmentStore
from millbook.core.time_utils import parse_stored_datetime
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool


class SQLiteAdjustmentStore(IAdjustmentStore):
    """SQLite implementation of adjustment requests."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO adjustments (
                    id, timestamp, product, requested_change, reason,
                    requested_by, requested_by_id, status
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    adjustment.id,
                    adjustment.timestamp.isoformat(),
                    adjustment.product.value,
                    adjustment.requested_change,
                    adjustment.reason,
                    adjustment.requested_by,
                    adjustment.requested_by_id,
                    adjustment.status.value,
                ),
            )
            return adjustment

    async def get_adjustment(self, adjustment_id: str) -> InventoryAdjustment | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM adjustments WHERE id = ?", (adjustment_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_adjustment(row) if row else None

    async def update_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                UPDATE adjustments SET status = ?, actioned_by = ?, actioned_at = ?
                WHERE id = ?
                """,
                (
                    adjustment.status.value,
                    adjustment.actioned_by,
                    adjustment.actioned_at.isoformat() if adjustment.actioned_at else None,
                    adjustment.id,
                ),
            )
            return adjustment

    async def list_adjustments(
        self,
        status: AdjustmentStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryAdjustment]:
        query = "SELECT * FROM adjustments"
        params: list = []
        if status is not None:
            query += " WHERE status = ?"
            params.append(status.value)
        query += " ORDER BY rowid DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_adjustment(row) for row in rows]

    @staticmethod
    def _row_to_adjustment(row: aiosqlite.Row) -> InventoryAdjustment:
        return InventoryAdjustment(
            id=row["id"],
            timestamp=parse_stored_datetime(row["timestamp"]),
            product=ProductType(row["product"]),
            requested_change=row["requested_change"],
            reason=row["reason"],
            requested_by=row["requested_by"],
            requested_by_id=row["requested_by_id"],
            status=AdjustmentStatus(row["status"]),
            actioned_by=row["actioned_by"],
            actioned_at=(
                parse_stored_datetime(row["actioned_at"]) if row["actioned_at"] else None
            ),
        )
