"""Core domain entities."""

from millbook.core.entities.adjustment import AdjustmentStatus, InventoryAdjustment
from millbook.core.entities.audit import AuditAction, AuditLogEntry
from millbook.core.entities.inward import InwardEntry
from millbook.core.entities.production import (
    AlertKind,
    ProductionAlert,
    ProductionEntry,
    ProductionMetrics,
    Shift,
)
from millbook.core.entities.sale import BuyerType, SalesEntry, SaleStatus
from millbook.core.entities.stock import (
    STOCK_PRECISION,
    FinishedStock,
    LedgerChangeKind,
    LedgerEntry,
    ProductType,
    RawStock,
    StockBalance,
)
from millbook.core.entities.user import Session, User, UserRole

__all__ = [
    # Identity
    "User",
    "UserRole",
    "Session",
    # Audit
    "AuditAction",
    "AuditLogEntry",
    # Stock
    "ProductType",
    "LedgerChangeKind",
    "RawStock",
    "StockBalance",
    "FinishedStock",
    "LedgerEntry",
    "STOCK_PRECISION",
    "InwardEntry",
    # Production
    "Shift",
    "ProductionMetrics",
    "ProductionEntry",
    "AlertKind",
    "ProductionAlert",
    # Sales
    "BuyerType",
    "SaleStatus",
    "SalesEntry",
    # Adjustments
    "AdjustmentStatus",
    "InventoryAdjustment",
]
