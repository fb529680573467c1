"""
Composition root.

Builds the connection pool, applies migrations and wires every store and
service exactly once. Callers hold the returned container and close it when
done.

Clean Architecture: the application layer orchestrates DI, not the core layer.
"""

from dataclasses import dataclass
from pathlib import Path

from millbook.application.use_cases import (
    CreateSaleUseCase,
    CreateSupervisorUseCase,
    RecordInwardUseCase,
    RecordProductionUseCase,
    RequestAdjustmentUseCase,
    SetupOwnerUseCase,
)
from millbook.config import Settings, configure_logging, get_logger, get_settings
from millbook.core.services import (
    AdjustmentWorkflow,
    AuditTrail,
    IdentityService,
    ProductionRecorder,
    RawStockService,
    ReportingService,
    SalesRecorder,
    StockLedgerEngine,
)
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
from millbook.infrastructure.storage.sqlite.migrations import initialize_database

logger = get_logger(__name__)


@dataclass
class MillbookServices:
    """Every service of one running instance, sharing one connection pool."""

    pool: ConnectionPool
    audit: AuditTrail
    identity: IdentityService
    raw_stock: RawStockService
    ledger: StockLedgerEngine
    production: ProductionRecorder
    sales: SalesRecorder
    adjustments: AdjustmentWorkflow
    reporting: ReportingService

    # Use cases taking request DTOs
    setup_owner: SetupOwnerUseCase
    create_supervisor: CreateSupervisorUseCase
    record_inward: RecordInwardUseCase
    record_production: RecordProductionUseCase
    create_sale: CreateSaleUseCase
    request_adjustment: RequestAdjustmentUseCase

    async def close(self) -> None:
        await self.pool.close()


async def create_services(
    settings: Settings | None = None,
    db_path: Path | None = None,
    configure_logs: bool = True,
) -> MillbookServices:
    """
    Create a fully wired service container.

    Args:
        settings: Settings override (defaults to the process settings)
        db_path: Database file override (defaults to settings.storage.db_path)
        configure_logs: Whether to configure structlog

    Returns:
        MillbookServices ready for use
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings)

    db_path = db_path or settings.storage.db_path
    await initialize_database(db_path)

    pool = ConnectionPool(
        db_path,
        pool_size=settings.storage.pool_size,
        busy_timeout=settings.storage.busy_timeout,
    )
    await pool.initialize()

    audit = AuditTrail(SQLiteAuditStore(pool))
    identity = IdentityService(
        SQLiteUserStore(pool),
        SQLiteSessionStore(pool),
        audit,
        pool,
        security=settings.security,
    )
    raw_stock = RawStockService(SQLiteRawStockStore(pool), audit, pool)
    ledger = StockLedgerEngine(SQLiteFinishedStockStore(pool), pool)
    production = ProductionRecorder(
        SQLiteProductionStore(pool),
        raw_stock,
        ledger,
        audit,
        pool,
        thresholds=settings.thresholds,
    )
    sales = SalesRecorder(SQLiteSalesStore(pool), ledger, audit, pool)
    adjustments = AdjustmentWorkflow(SQLiteAdjustmentStore(pool), ledger, audit, pool)
    reporting = ReportingService(production, raw_stock, ledger, sales)

    logger.info("services_created", db_path=str(db_path))

    return MillbookServices(
        pool=pool,
        audit=audit,
        identity=identity,
        raw_stock=raw_stock,
        ledger=ledger,
        production=production,
        sales=sales,
        adjustments=adjustments,
        reporting=reporting,
        setup_owner=SetupOwnerUseCase(identity),
        create_supervisor=CreateSupervisorUseCase(identity),
        record_inward=RecordInwardUseCase(raw_stock),
        record_production=RecordProductionUseCase(production),
        create_sale=CreateSaleUseCase(sales, identity),
        request_adjustment=RequestAdjustmentUseCase(adjustments),
    )
