"""
Core business services.

Services depend only on core entities, interfaces and exceptions. Stores and
the transaction manager are injected through the constructor.
"""

from millbook.core.services.adjustment_workflow import AdjustmentWorkflow
from millbook.core.services.audit_trail import AuditTrail
from millbook.core.services.authorization import require_owner
from millbook.core.services.identity_service import IdentityService, SupervisorCreated
from millbook.core.services.ledger_engine import LedgerReconciliation, StockLedgerEngine
from millbook.core.services.production_metrics import (
    compute_metrics,
    compute_runtime_minutes,
    evaluate_alerts,
)
from millbook.core.services.production_recorder import ProductionRecorder, ProductionResult
from millbook.core.services.raw_stock_service import RawStockService
from millbook.core.services.reporting import DailySummary, DashboardStats, ReportingService
from millbook.core.services.sales_recorder import SalesRecorder

__all__ = [
    # Identity
    "IdentityService",
    "SupervisorCreated",
    "require_owner",
    # Audit
    "AuditTrail",
    # Stock
    "RawStockService",
    "StockLedgerEngine",
    "LedgerReconciliation",
    # Production
    "ProductionRecorder",
    "ProductionResult",
    "compute_runtime_minutes",
    "compute_metrics",
    "evaluate_alerts",
    # Sales
    "SalesRecorder",
    # Adjustments
    "AdjustmentWorkflow",
    # Reporting
    "ReportingService",
    "DashboardStats",
    "DailySummary",
]
