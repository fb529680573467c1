"""Raw groundnut counter: inward increments it, production consumes it."""

from datetime import date

from millbook.config import get_logger
from millbook.core.entities.audit import AuditAction
from millbook.core.entities.inward import InwardEntry
from millbook.core.entities.stock import STOCK_PRECISION, RawStock
from millbook.core.entities.user import User
from millbook.core.exceptions import InsufficientRawStockError, MissingFieldError, ValidationError
from millbook.core.interfaces import IRawStockStore, ITransactionManager
from millbook.core.services.audit_trail import AuditTrail

logger = get_logger(__name__)


class RawStockService:
    """Raw material counter and intake history."""

    def __init__(
        self,
        raw_store: IRawStockStore,
        audit_trail: AuditTrail,
        transactions: ITransactionManager,
    ):
        self._store = raw_store
        self._audit = audit_trail
        self._tx = transactions

    async def get_raw_stock(self) -> RawStock:
        return await self._store.get_raw_stock()

    async def list_inward(self, limit: int = 100, offset: int = 0) -> list[InwardEntry]:
        """Intakes newest first."""
        return await self._store.list_inward(limit=limit, offset=offset)

    async def record_inward(
        self,
        actor: User,
        supplier: str,
        weight_kg: float,
        vehicle_no: str = "",
        entry_date: date | None = None,
    ) -> InwardEntry:
        """Receive a load of groundnut and add its weight to raw stock."""
        if not supplier or not supplier.strip():
            raise MissingFieldError("supplier")
        if weight_kg <= 0:
            raise ValidationError("weight_kg", "must be greater than zero", weight_kg)

        entry = InwardEntry(
            supplier=supplier.strip(),
            vehicle_no=vehicle_no.strip(),
            weight_kg=weight_kg,
            entered_by=actor.display_name,
            entered_by_id=actor.id,
        )
        if entry_date is not None:
            entry.entry_date = entry_date

        async with self._tx.transaction():
            current = await self._store.get_raw_stock()
            await self._store.set_raw_stock(
                round(current.quantity_kg + weight_kg, STOCK_PRECISION)
            )
            await self._store.add_inward(entry)
            await self._audit.record(
                AuditAction.ENTRY_CREATE,
                actor,
                f"Inward: {weight_kg} kg from {entry.supplier}",
            )

        logger.info(
            "inward_recorded",
            entry_id=entry.id,
            weight_kg=weight_kg,
            supplier=entry.supplier,
        )
        return entry

    async def consume(self, quantity_kg: float) -> RawStock:
        """
        Take raw material out for crushing.

        Raises:
            InsufficientRawStockError: more requested than on hand
        """
        async with self._tx.transaction():
            current = await self._store.get_raw_stock()
            if quantity_kg > current.quantity_kg:
                logger.warning(
                    "raw_consumption_rejected",
                    requested=quantity_kg,
                    available=current.quantity_kg,
                )
                raise InsufficientRawStockError(quantity_kg, current.quantity_kg)

            return await self._store.set_raw_stock(
                round(current.quantity_kg - quantity_kg, STOCK_PRECISION) + 0.0
            )
