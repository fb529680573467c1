"""
Sales recorder.

Creating a sale takes stock out through the ledger engine; cancelling puts it
back with a compensating entry. Sales are never deleted.
"""

from datetime import date

from millbook.config import get_logger
from millbook.core.entities.audit import AuditAction
from millbook.core.entities.sale import BuyerType, SaleStatus, SalesEntry
from millbook.core.entities.stock import STOCK_PRECISION, LedgerChangeKind, ProductType
from millbook.core.entities.user import User
from millbook.core.exceptions import (
    AlreadyCancelledError,
    MissingFieldError,
    SaleNotFoundError,
    ValidationError,
)
from millbook.core.interfaces import ISalesStore, ITransactionManager
from millbook.core.services.audit_trail import AuditTrail
from millbook.core.services.authorization import require_owner
from millbook.core.services.ledger_engine import StockLedgerEngine
from millbook.core.time_utils import utcnow

logger = get_logger(__name__)


class SalesRecorder:
    """Records dispatches of oil and cake."""

    def __init__(
        self,
        sales_store: ISalesStore,
        ledger: StockLedgerEngine,
        audit_trail: AuditTrail,
        transactions: ITransactionManager,
    ):
        self._store = sales_store
        self._ledger = ledger
        self._audit = audit_trail
        self._tx = transactions

    async def create_sale(
        self,
        actor: User,
        product: ProductType,
        quantity_kg: float,
        buyer_name: str,
        buyer_type: BuyerType = BuyerType.OTHER,
        vehicle_no: str | None = None,
        rate_per_unit: float | None = None,
        salesman: User | None = None,
        sale_date: date | None = None,
    ) -> SalesEntry:
        """
        Record a confirmed sale.

        Price is kept only when the actor is the Owner. The salesman defaults
        to the actor.

        Raises:
            InsufficientStockError: quantity exceeds the product's balance
        """
        # The balance check sees the exact amount; the record keeps it at stock precision
        exact_kg = quantity_kg
        quantity_kg = round(quantity_kg, STOCK_PRECISION)
        if quantity_kg <= 0:
            raise ValidationError("quantity_kg", "must be greater than zero", exact_kg)
        if not buyer_name or not buyer_name.strip():
            raise MissingFieldError("buyer_name")

        if not actor.is_owner or rate_per_unit is None:
            rate_per_unit = None
            total_value = None
        else:
            total_value = round(quantity_kg * rate_per_unit, STOCK_PRECISION)

        salesman = salesman or actor
        sale = SalesEntry(
            product=product,
            quantity_kg=quantity_kg,
            buyer_name=buyer_name.strip(),
            buyer_type=buyer_type,
            vehicle_no=vehicle_no,
            rate_per_unit=rate_per_unit,
            total_value=total_value,
            status=SaleStatus.CONFIRMED,
            entered_by=actor.display_name,
            entered_by_id=actor.id,
            salesman_name=salesman.display_name,
            salesman_id=salesman.id,
        )
        if sale_date is not None:
            sale.sale_date = sale_date

        async with self._tx.transaction():
            await self._ledger.commit_stock_change(
                product, -exact_kg, sale.id, LedgerChangeKind.SALE, actor
            )
            await self._store.create_sale(sale)
            await self._audit.record(
                AuditAction.SALE_CREATE,
                actor,
                f"Sold {quantity_kg} kg {product.value} to {sale.buyer_name}",
            )

        logger.info(
            "sale_created",
            sale_id=sale.id,
            product=product.value,
            quantity_kg=quantity_kg,
        )
        return sale

    async def cancel_sale(self, actor: User, sale_id: str, reason: str) -> SalesEntry:
        """
        Cancel a confirmed sale and return its quantity to stock.

        Raises:
            ForbiddenError: actor is not the Owner
            SaleNotFoundError: no such sale
            AlreadyCancelledError: sale was cancelled before
        """
        require_owner(actor, "cancel sale")

        async with self._tx.transaction():
            sale = await self._store.get_sale(sale_id)
            if sale is None:
                raise SaleNotFoundError(sale_id)
            if sale.is_cancelled:
                logger.warning("sale_already_cancelled", sale_id=sale_id)
                raise AlreadyCancelledError(sale_id)

            await self._ledger.commit_stock_change(
                sale.product, sale.quantity_kg, sale.id, LedgerChangeKind.CANCELLATION, actor
            )

            sale.status = SaleStatus.CANCELLED
            sale.cancellation_reason = reason
            sale.cancelled_by = actor.display_name
            sale.cancelled_at = utcnow()
            await self._store.update_sale(sale)
            await self._audit.record(
                AuditAction.SALE_CANCEL,
                actor,
                f"Cancelled sale {sale.id}: {reason}",
            )

        logger.info("sale_cancelled", sale_id=sale.id, quantity_kg=sale.quantity_kg)
        return sale

    async def get_sale(self, actor: User, sale_id: str) -> SalesEntry:
        sale = await self._store.get_sale(sale_id)
        if sale is None or (not actor.is_owner and sale.entered_by_id != actor.id):
            raise SaleNotFoundError(sale_id)
        return sale if actor.is_owner else sale.without_pricing()

    async def list_sales(self, actor: User, limit: int = 100, offset: int = 0) -> list[SalesEntry]:
        """
        Sales history in entry order.

        Supervisors see only sales they entered, without price or value.
        """
        if actor.is_owner:
            return await self._store.list_sales(limit=limit, offset=offset)

        sales = await self._store.list_sales(entered_by_id=actor.id, limit=limit, offset=offset)
        return [sale.without_pricing() for sale in sales]
