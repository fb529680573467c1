"""
Inventory adjustment workflow.

Anyone may request a correction; only the Owner approves or rejects it.
Stock moves only on approval.
"""

from millbook.config import get_logger
from millbook.core.entities.adjustment import AdjustmentStatus, InventoryAdjustment
from millbook.core.entities.audit import AuditAction
from millbook.core.entities.stock import STOCK_PRECISION, LedgerChangeKind, ProductType
from millbook.core.entities.user import User
from millbook.core.exceptions import (
    AdjustmentApprovalFailedError,
    AdjustmentNotFoundError,
    AlreadyProcessedError,
    InsufficientStockError,
    MissingFieldError,
    ValidationError,
)
from millbook.core.interfaces import IAdjustmentStore, ITransactionManager
from millbook.core.services.audit_trail import AuditTrail
from millbook.core.services.authorization import require_owner
from millbook.core.services.ledger_engine import StockLedgerEngine
from millbook.core.time_utils import utcnow

logger = get_logger(__name__)


class AdjustmentWorkflow:
    """PENDING requests that move once to APPROVED or REJECTED."""

    def __init__(
        self,
        adjustment_store: IAdjustmentStore,
        ledger: StockLedgerEngine,
        audit_trail: AuditTrail,
        transactions: ITransactionManager,
    ):
        self._store = adjustment_store
        self._ledger = ledger
        self._audit = audit_trail
        self._tx = transactions

    async def request_adjustment(
        self,
        actor: User,
        product: ProductType,
        requested_change: float,
        reason: str,
    ) -> InventoryAdjustment:
        """File a PENDING request. Stock is not touched."""
        if not reason or not reason.strip():
            raise MissingFieldError("reason")
        if round(requested_change, STOCK_PRECISION) == 0:
            raise ValidationError("requested_change", "must not be zero", requested_change)

        adjustment = InventoryAdjustment(
            product=product,
            requested_change=requested_change,
            reason=reason.strip(),
            requested_by=actor.display_name,
            requested_by_id=actor.id,
        )

        async with self._tx.transaction():
            await self._store.create_adjustment(adjustment)
            await self._audit.record(
                AuditAction.ADJUSTMENT_REQUEST,
                actor,
                f"Requested {requested_change:+} kg {product.value}: {adjustment.reason}",
            )

        logger.info(
            "adjustment_requested",
            adjustment_id=adjustment.id,
            product=product.value,
            requested_change=requested_change,
        )
        return adjustment

    async def approve(self, actor: User, adjustment_id: str) -> InventoryAdjustment:
        """
        Apply a pending adjustment to stock.

        Raises:
            ForbiddenError: actor is not the Owner
            AdjustmentNotFoundError: no such request
            AlreadyProcessedError: request is no longer PENDING
            AdjustmentApprovalFailedError: stock would go negative; the
                request stays PENDING and stock is unchanged
        """
        require_owner(actor, "approve adjustment")

        async with self._tx.transaction():
            adjustment = await self._get_pending(adjustment_id)

            try:
                await self._ledger.commit_stock_change(
                    adjustment.product,
                    adjustment.requested_change,
                    adjustment.id,
                    LedgerChangeKind.ADJUSTMENT,
                    actor,
                )
            except InsufficientStockError as e:
                logger.warning(
                    "adjustment_approval_failed",
                    adjustment_id=adjustment.id,
                    product=adjustment.product.value,
                    requested_change=adjustment.requested_change,
                    available=e.details["available"],
                )
                raise AdjustmentApprovalFailedError(
                    adjustment.id,
                    adjustment.product.value,
                    e.details["requested"],
                    e.details["available"],
                ) from e

            await self._action(adjustment, AdjustmentStatus.APPROVED, actor)

        logger.info("adjustment_approved", adjustment_id=adjustment.id)
        return adjustment

    async def reject(self, actor: User, adjustment_id: str) -> InventoryAdjustment:
        """Close a pending adjustment without touching stock."""
        require_owner(actor, "reject adjustment")

        async with self._tx.transaction():
            adjustment = await self._get_pending(adjustment_id)
            await self._action(adjustment, AdjustmentStatus.REJECTED, actor)

        logger.info("adjustment_rejected", adjustment_id=adjustment.id)
        return adjustment

    async def get_adjustment(self, adjustment_id: str) -> InventoryAdjustment:
        adjustment = await self._store.get_adjustment(adjustment_id)
        if adjustment is None:
            raise AdjustmentNotFoundError(adjustment_id)
        return adjustment

    async def list_adjustments(
        self,
        status: AdjustmentStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryAdjustment]:
        """Requests newest first, optionally by status."""
        return await self._store.list_adjustments(status=status, limit=limit, offset=offset)

    async def _get_pending(self, adjustment_id: str) -> InventoryAdjustment:
        adjustment = await self.get_adjustment(adjustment_id)
        if not adjustment.is_pending:
            raise AlreadyProcessedError(adjustment_id, adjustment.status.value)
        return adjustment

    async def _action(
        self,
        adjustment: InventoryAdjustment,
        status: AdjustmentStatus,
        actor: User,
    ) -> None:
        adjustment.status = status
        adjustment.actioned_by = actor.display_name
        adjustment.actioned_at = utcnow()
        await self._store.update_adjustment(adjustment)
        await self._audit.record(
            AuditAction.ADJUSTMENT_ACTION,
            actor,
            f"{status.value} adjustment {adjustment.id}",
        )
