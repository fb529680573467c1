"""
Production recorder.

Books one crushing shift: raw stock goes down, oil and cake go up through the
ledger engine, and the shift record and audit entry are written. The whole
booking is one transaction.
"""

from dataclasses import dataclass, field
from datetime import date, time

from millbook.config import get_logger, get_settings
from millbook.config.settings import ThresholdSettings
from millbook.core.entities.audit import AuditAction
from millbook.core.entities.production import ProductionAlert, ProductionEntry, Shift
from millbook.core.entities.stock import STOCK_PRECISION, LedgerChangeKind, ProductType
from millbook.core.entities.user import User
from millbook.core.exceptions import InvalidDurationError, ValidationError
from millbook.core.interfaces import IProductionStore, ITransactionManager
from millbook.core.services.audit_trail import AuditTrail
from millbook.core.services.ledger_engine import StockLedgerEngine
from millbook.core.services.production_metrics import (
    compute_metrics,
    compute_runtime_minutes,
    evaluate_alerts,
)
from millbook.core.services.raw_stock_service import RawStockService

logger = get_logger(__name__)

DEFAULT_LINE_ID = "Line-01"


@dataclass
class ProductionResult:
    """A recorded shift plus any advisory alerts it raised."""

    entry: ProductionEntry
    alerts: list[ProductionAlert] = field(default_factory=list)


class ProductionRecorder:
    """Records shifts and moves stock accordingly."""

    def __init__(
        self,
        production_store: IProductionStore,
        raw_stock: RawStockService,
        ledger: StockLedgerEngine,
        audit_trail: AuditTrail,
        transactions: ITransactionManager,
        thresholds: ThresholdSettings | None = None,
    ):
        self._store = production_store
        self._raw = raw_stock
        self._ledger = ledger
        self._audit = audit_trail
        self._tx = transactions
        self._thresholds = thresholds or get_settings().thresholds

    async def record_production(
        self,
        actor: User,
        start_time: time,
        end_time: time,
        raw_consumed_kg: float,
        oil_produced_kg: float,
        cake_produced_kg: float,
        breakdown_minutes: int = 0,
        breakdown_reason: str = "None",
        shift: Shift = Shift.DAY,
        line_id: str = DEFAULT_LINE_ID,
        helper_name: str | None = None,
        production_date: date | None = None,
    ) -> ProductionResult:
        """
        Record a shift.

        Raises:
            InvalidDurationError: runtime after breakdown is zero or negative
            InsufficientRawStockError: more consumed than raw stock on hand
            ValidationError: negative quantities or breakdown
        """
        raw_consumed_kg = round(raw_consumed_kg, STOCK_PRECISION) + 0.0
        oil_produced_kg = round(oil_produced_kg, STOCK_PRECISION) + 0.0
        cake_produced_kg = round(cake_produced_kg, STOCK_PRECISION) + 0.0

        for name, value in (
            ("raw_consumed_kg", raw_consumed_kg),
            ("oil_produced_kg", oil_produced_kg),
            ("cake_produced_kg", cake_produced_kg),
            ("breakdown_minutes", breakdown_minutes),
        ):
            if value < 0:
                raise ValidationError(name, "must not be negative", value)

        runtime = compute_runtime_minutes(start_time, end_time, breakdown_minutes)
        if runtime <= 0:
            logger.warning("production_rejected", reason="invalid_duration", runtime=runtime)
            raise InvalidDurationError(runtime)

        metrics = compute_metrics(raw_consumed_kg, oil_produced_kg, cake_produced_kg, runtime)

        async with self._tx.transaction():
            opening = await self._raw.get_raw_stock()
            await self._raw.consume(raw_consumed_kg)

            entry = ProductionEntry(
                shift=shift,
                line_id=line_id,
                supervisor_name=actor.display_name,
                helper_name=helper_name,
                start_time=start_time,
                end_time=end_time,
                breakdown_minutes=breakdown_minutes,
                breakdown_reason=breakdown_reason or "None",
                opening_stock_kg=opening.quantity_kg,
                raw_consumed_kg=raw_consumed_kg,
                oil_produced_kg=oil_produced_kg,
                cake_produced_kg=cake_produced_kg,
                entered_by=actor.display_name,
                entered_by_id=actor.id,
                **metrics.model_dump(),
            )
            if production_date is not None:
                entry.production_date = production_date

            await self._ledger.commit_stock_change(
                ProductType.OIL, oil_produced_kg, entry.id, LedgerChangeKind.PRODUCTION, actor
            )
            await self._ledger.commit_stock_change(
                ProductType.CAKE, cake_produced_kg, entry.id, LedgerChangeKind.PRODUCTION, actor
            )
            await self._store.add_entry(entry)
            await self._audit.record(
                AuditAction.ENTRY_CREATE,
                actor,
                f"Production: {raw_consumed_kg} kg crushed, "
                f"{oil_produced_kg} kg oil, {cake_produced_kg} kg cake",
            )

        alerts = evaluate_alerts(entry, self._thresholds)
        logger.info(
            "production_recorded",
            entry_id=entry.id,
            oil_yield_percent=round(entry.oil_yield_percent, 2),
            process_loss_percent=round(entry.process_loss_percent, 2),
            runtime_minutes=entry.runtime_minutes,
        )
        for alert in alerts:
            logger.warning(
                "production_alert",
                entry_id=entry.id,
                kind=alert.kind.value,
                value=alert.value,
                threshold=alert.threshold,
            )

        return ProductionResult(entry=entry, alerts=alerts)

    async def get_entry(self, entry_id: str) -> ProductionEntry | None:
        return await self._store.get_entry(entry_id)

    async def list_entries(
        self,
        actor: User,
        production_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ProductionEntry]:
        """Shift history; supervisors see only the shifts they entered."""
        return await self._store.list_entries(
            entered_by_id=None if actor.is_owner else actor.id,
            production_date=production_date,
            limit=limit,
            offset=offset,
        )
