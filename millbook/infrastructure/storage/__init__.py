"""Storage implementations."""

from millbook.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteAdjustmentStore,
    SQLiteAuditStore,
    SQLiteFinishedStockStore,
    SQLiteProductionStore,
    SQLiteRawStockStore,
    SQLiteSalesStore,
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
