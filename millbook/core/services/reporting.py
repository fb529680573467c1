"""Read-only dashboard aggregates."""

from dataclasses import dataclass, field
from datetime import date

from millbook.core.entities.inward import InwardEntry
from millbook.core.entities.production import ProductionEntry
from millbook.core.entities.sale import SalesEntry
from millbook.core.entities.stock import FinishedStock, RawStock
from millbook.core.entities.user import User
from millbook.core.services.ledger_engine import StockLedgerEngine
from millbook.core.services.production_recorder import ProductionRecorder
from millbook.core.services.raw_stock_service import RawStockService
from millbook.core.services.sales_recorder import SalesRecorder
from millbook.core.time_utils import utcnow


@dataclass
class DailySummary:
    """Totals across one day's shifts."""

    consumed_kg: float = 0.0
    oil_kg: float = 0.0
    cake_kg: float = 0.0
    runtime_minutes: int = 0
    avg_oil_yield_percent: float = 0.0
    avg_process_loss_percent: float = 0.0
    oil_per_hour: float = 0.0
    shift_count: int = 0


@dataclass
class DashboardStats:
    today: DailySummary
    raw_stock: RawStock
    finished_stock: FinishedStock
    production_history: list[ProductionEntry] = field(default_factory=list)
    inward_history: list[InwardEntry] = field(default_factory=list)
    sales_history: list[SalesEntry] = field(default_factory=list)


def summarize_day(entries: list[ProductionEntry]) -> DailySummary:
    """Aggregate shifts; averages are plain means over shifts."""
    if not entries:
        return DailySummary()

    oil = sum(e.oil_produced_kg for e in entries)
    runtime = sum(e.runtime_minutes for e in entries)
    return DailySummary(
        consumed_kg=sum(e.raw_consumed_kg for e in entries),
        oil_kg=oil,
        cake_kg=sum(e.cake_produced_kg for e in entries),
        runtime_minutes=runtime,
        avg_oil_yield_percent=sum(e.oil_yield_percent for e in entries) / len(entries),
        avg_process_loss_percent=sum(e.process_loss_percent for e in entries) / len(entries),
        oil_per_hour=oil / runtime * 60 if runtime > 0 else 0.0,
        shift_count=len(entries),
    )


class ReportingService:
    """Builds the dashboard view for a user. Supervisors see their own shifts and sales only."""

    def __init__(
        self,
        production: ProductionRecorder,
        raw_stock: RawStockService,
        ledger: StockLedgerEngine,
        sales: SalesRecorder,
    ):
        self._production = production
        self._raw = raw_stock
        self._ledger = ledger
        self._sales = sales

    async def get_dashboard_stats(
        self,
        actor: User,
        today: date | None = None,
        history_limit: int = 100,
    ) -> DashboardStats:
        today = today or utcnow().date()

        history = [
            e
            for e in await self._production.list_entries(actor, limit=history_limit)
            if not e.is_voided
        ]
        todays = [
            e
            for e in await self._production.list_entries(actor, production_date=today, limit=-1)
            if not e.is_voided
        ]

        return DashboardStats(
            today=summarize_day(todays),
            raw_stock=await self._raw.get_raw_stock(),
            finished_stock=await self._ledger.get_finished_stock(),
            production_history=history,
            inward_history=await self._raw.list_inward(limit=history_limit),
            sales_history=await self._sales.list_sales(actor, limit=history_limit),
        )
