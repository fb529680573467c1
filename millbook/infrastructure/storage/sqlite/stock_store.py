"""
SQLite implementation of raw and finished stock storage.

Finished-stock counters carry a version column; ``update_balance`` is a
compare-and-set on it so a stale read can never overwrite a newer counter.
"""

from datetime import date

import aiosqlite

from millbook.config import get_logger
from millbook.core.entities.inward import InwardEntry
from millbook.core.entities.stock import (
    FinishedStock,
    LedgerChangeKind,
    LedgerEntry,
    ProductType,
    RawStock,
    StockBalance,
)
from millbook.core.exceptions import StockVersionConflictError
from millbook.core.interfaces.stock_store import IFinishedStockStore, IRawStockStore
from millbook.core.time_utils import parse_stored_datetime, utcnow
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteRawStockStore(IRawStockStore):
    """SQLite implementation of the raw material counter and intake log."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def get_raw_stock(self) -> RawStock:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT quantity_kg, last_updated FROM raw_stock WHERE id = 1"
            )
            row = await cursor.fetchone()
            if row is None:
                return RawStock()
            return RawStock(
                quantity_kg=row["quantity_kg"],
                last_updated=parse_stored_datetime(row["last_updated"]),
            )

    async def set_raw_stock(self, quantity_kg: float) -> RawStock:
        now = utcnow()
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO raw_stock (id, quantity_kg, last_updated) VALUES (1, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    quantity_kg = excluded.quantity_kg,
                    last_updated = excluded.last_updated
                """,
                (quantity_kg, now.isoformat()),
            )
            return RawStock(quantity_kg=quantity_kg, last_updated=now)

    async def add_inward(self, entry: InwardEntry) -> InwardEntry:
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO inward_entries (
                    id, timestamp, entry_date, supplier, vehicle_no,
                    weight_kg, entered_by, entered_by_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.timestamp.isoformat(),
                    entry.entry_date.isoformat(),
                    entry.supplier,
                    entry.vehicle_no,
                    entry.weight_kg,
                    entry.entered_by,
                    entry.entered_by_id,
                ),
            )
            return entry

    async def list_inward(self, limit: int = 100, offset: int = 0) -> list[InwardEntry]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inward_entries ORDER BY rowid DESC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [
                InwardEntry(
                    id=row["id"],
                    timestamp=parse_stored_datetime(row["timestamp"]),
                    entry_date=date.fromisoformat(row["entry_date"]),
                    supplier=row["supplier"],
                    vehicle_no=row["vehicle_no"],
                    weight_kg=row["weight_kg"],
                    entered_by=row["entered_by"],
                    entered_by_id=row["entered_by_id"],
                )
                for row in rows
            ]


class SQLiteFinishedStockStore(IFinishedStockStore):
    """SQLite implementation of finished-goods counters and the inventory ledger."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def get_balance(self, product: ProductType) -> StockBalance:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM finished_stock WHERE product = ?",
                (product.value,),
            )
            row = await cursor.fetchone()
            if row is None:
                return StockBalance(product=product)
            return self._row_to_balance(row)

    async def get_finished_stock(self) -> FinishedStock:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM finished_stock")
            rows = await cursor.fetchall()
            return FinishedStock.from_balances([self._row_to_balance(r) for r in rows])

    async def update_balance(
        self,
        product: ProductType,
        quantity_kg: float,
        expected_version: int,
    ) -> StockBalance:
        now = utcnow()
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE finished_stock
                SET quantity_kg = ?, version = version + 1, last_updated = ?
                WHERE product = ? AND version = ?
                """,
                (quantity_kg, now.isoformat(), product.value, expected_version),
            )
            if cursor.rowcount == 0:
                logger.warning(
                    "stock_version_conflict",
                    product=product.value,
                    expected_version=expected_version,
                )
                raise StockVersionConflictError(product.value, expected_version)

            return StockBalance(
                product=product,
                quantity_kg=quantity_kg,
                version=expected_version + 1,
                last_updated=now,
            )

    async def append_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry:
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_ledger (
                    timestamp, product, change_kind, reference_id,
                    quantity_change, balance_after, performed_by, performed_by_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.timestamp.isoformat(),
                    entry.product.value,
                    entry.change_kind.value,
                    entry.reference_id,
                    entry.quantity_change,
                    entry.balance_after,
                    entry.performed_by,
                    entry.performed_by_id,
                ),
            )
            entry.id = cursor.lastrowid
            return entry

    async def list_ledger(
        self,
        product: ProductType | None = None,
        limit: int | None = None,
        offset: int = 0,
        newest_first: bool = True,
    ) -> list[LedgerEntry]:
        query = "SELECT * FROM inventory_ledger"
        params: list = []
        if product is not None:
            query += " WHERE product = ?"
            params.append(product.value)
        query += " ORDER BY id DESC" if newest_first else " ORDER BY id ASC"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_ledger_entry(row) for row in rows]

    @staticmethod
    def _row_to_balance(row: aiosqlite.Row) -> StockBalance:
        return StockBalance(
            product=ProductType(row["product"]),
            quantity_kg=row["quantity_kg"],
            version=row["version"],
            last_updated=parse_stored_datetime(row["last_updated"]),
        )

    @staticmethod
    def _row_to_ledger_entry(row: aiosqlite.Row) -> LedgerEntry:
        return LedgerEntry(
            id=row["id"],
            timestamp=parse_stored_datetime(row["timestamp"]),
            product=ProductType(row["product"]),
            change_kind=LedgerChangeKind(row["change_kind"]),
            reference_id=row["reference_id"],
            quantity_change=row["quantity_change"],
            balance_after=row["balance_after"],
            performed_by=row["performed_by"],
            performed_by_id=row["performed_by_id"],
        )
