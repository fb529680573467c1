"""SQLite implementation of sales storage."""

from datetime import date

import aiosqlite

from millbook.core.entities.sale import BuyerType, SaleStatus, SalesEntry
from millbook.core.entities.stock import ProductType
from millbook.core.interfaces.sales_store import ISalesStore
from millbook.core.time_utils import parse_stored_datetime
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool


class SQLiteSalesStore(ISalesStore):
    """SQLite implementation of sales records."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_sale(self, sale: SalesEntry) -> SalesEntry:
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO sales (
                    id, timestamp, sale_date, product, quantity_kg,
                    buyer_name, buyer_type, vehicle_no, rate_per_unit, total_value,
                    status, entered_by, entered_by_id, salesman_name, salesman_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.id,
                    sale.timestamp.isoformat(),
                    sale.sale_date.isoformat(),
                    sale.product.value,
                    sale.quantity_kg,
                    sale.buyer_name,
                    sale.buyer_type.value,
                    sale.vehicle_no,
                    sale.rate_per_unit,
                    sale.total_value,
                    sale.status.value,
                    sale.entered_by,
                    sale.entered_by_id,
                    sale.salesman_name,
                    sale.salesman_id,
                ),
            )
            return sale

    async def get_sale(self, sale_id: str) -> SalesEntry | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
            row = await cursor.fetchone()
            return self._row_to_sale(row) if row else None

    async def update_sale(self, sale: SalesEntry) -> SalesEntry:
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                UPDATE sales SET
                    status = ?,
                    cancellation_reason = ?,
                    cancelled_by = ?,
                    cancelled_at = ?
                WHERE id = ?
                """,
                (
                    sale.status.value,
                    sale.cancellation_reason,
                    sale.cancelled_by,
                    sale.cancelled_at.isoformat() if sale.cancelled_at else None,
                    sale.id,
                ),
            )
            return sale

    async def list_sales(
        self,
        entered_by_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[SalesEntry]:
        query = "SELECT * FROM sales"
        params: list = []
        if entered_by_id is not None:
            query += " WHERE entered_by_id = ?"
            params.append(entered_by_id)
        query += " ORDER BY rowid LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_sale(row) for row in rows]

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row) -> SalesEntry:
        return SalesEntry(
            id=row["id"],
            timestamp=parse_stored_datetime(row["timestamp"]),
            sale_date=date.fromisoformat(row["sale_date"]),
            product=ProductType(row["product"]),
            quantity_kg=row["quantity_kg"],
            buyer_name=row["buyer_name"],
            buyer_type=BuyerType(row["buyer_type"]),
            vehicle_no=row["vehicle_no"],
            rate_per_unit=row["rate_per_unit"],
            total_value=row["total_value"],
            status=SaleStatus(row["status"]),
            entered_by=row["entered_by"],
            entered_by_id=row["entered_by_id"],
            salesman_name=row["salesman_name"],
            salesman_id=row["salesman_id"],
            cancellation_reason=row["cancellation_reason"],
            cancelled_by=row["cancelled_by"],
            cancelled_at=(
                parse_stored_datetime(row["cancelled_at"]) if row["cancelled_at"] else None
            ),
        )
