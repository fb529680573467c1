"""Core interfaces (ports) for dependency injection."""

from millbook.core.interfaces.adjustment_store import IAdjustmentStore
from millbook.core.interfaces.audit_store import IAuditStore
from millbook.core.interfaces.production_store import IProductionStore
from millbook.core.interfaces.sales_store import ISalesStore
from millbook.core.interfaces.stock_store import IFinishedStockStore, IRawStockStore
from millbook.core.interfaces.transaction import ITransactionManager
from millbook.core.interfaces.user_store import ISessionStore, IUserStore

__all__ = [
    # Unit of work
    "ITransactionManager",
    # Storage interfaces
    "IUserStore",
    "ISessionStore",
    "IAuditStore",
    "IRawStockStore",
    "IFinishedStockStore",
    "IProductionStore",
    "ISalesStore",
    "IAdjustmentStore",
]
