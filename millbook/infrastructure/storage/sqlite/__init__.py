"""SQLite storage implementations."""

from millbook.infrastructure.storage.sqlite.adjustment_store import SQLiteAdjustmentStore
from millbook.infrastructure.storage.sqlite.audit_store import SQLiteAuditStore
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool
from millbook.infrastructure.storage.sqlite.production_store import SQLiteProductionStore
from millbook.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore
from millbook.infrastructure.storage.sqlite.stock_store import (
    SQLiteFinishedStockStore,
    SQLiteRawStockStore,
)
from millbook.infrastructure.storage.sqlite.user_store import (
    SQLiteSessionStore,
    SQLiteUserStore,
)

__all__ = [
    "ConnectionPool",
    "SQLiteUserStore",
    "SQLiteSessionStore",
    "SQLiteAuditStore",
    "SQLiteRawStockStore",
    "SQLiteFinishedStockStore",
    "SQLiteProductionStore",
    "SQLiteSalesStore",
    "SQLiteAdjustmentStore",
]
