"""
Finished stock ledger engine.

The only writer of the oil and cake counters and of the inventory ledger.
Every counter change goes through ``commit_stock_change``, which validates,
updates the counter and appends the matching ledger row in one transaction.
"""

import asyncio
from dataclasses import dataclass

from millbook.config import get_logger
from millbook.core.entities.stock import (
    STOCK_PRECISION,
    FinishedStock,
    LedgerChangeKind,
    LedgerEntry,
    ProductType,
    StockBalance,
)
from millbook.core.entities.user import User
from millbook.core.exceptions import InsufficientStockError
from millbook.core.interfaces import IFinishedStockStore, ITransactionManager

logger = get_logger(__name__)


@dataclass
class LedgerReconciliation:
    """Outcome of replaying one product's ledger against its counter."""

    product: ProductType
    counter_kg: float
    replayed_kg: float
    entry_count: int
    broken_entry_ids: list[int]

    @property
    def is_consistent(self) -> bool:
        return self.counter_kg == self.replayed_kg and not self.broken_entry_ids


class StockLedgerEngine:
    """
    Single mutation choke-point for finished stock.

    Writers are serialized twice over: the SQLite write transaction is
    exclusive, and a per-product lock guards the read-validate-write window
    within this process. The counter update is also a compare-and-set on the
    stored version, so a stale read fails loudly instead of overwriting.

    The transaction is always opened before the lock is taken; taking them in
    the other order can deadlock against a caller already holding the
    transaction for a different product.
    """

    def __init__(
        self,
        stock_store: IFinishedStockStore,
        transactions: ITransactionManager,
    ):
        self._store = stock_store
        self._tx = transactions
        self._locks = {product: asyncio.Lock() for product in ProductType}

    async def commit_stock_change(
        self,
        product: ProductType,
        delta: float,
        reference_id: str,
        change_kind: LedgerChangeKind,
        actor: User,
    ) -> LedgerEntry:
        """
        Apply a signed change to one finished-stock counter.

        Args:
            product: Counter to move
            delta: Signed kilograms. The balance check uses the exact amount;
                the counter and ledger row use it rounded to two decimals
            reference_id: Production, sale or adjustment the change belongs to
            change_kind: Why the counter moves
            actor: User performing the change

        Returns:
            The appended ledger entry

        Raises:
            InsufficientStockError: the counter would go below zero; nothing is written
        """
        requested = delta
        delta = round(delta, STOCK_PRECISION) + 0.0

        async with self._tx.transaction():
            async with self._locks[product]:
                balance = await self._store.get_balance(product)
                new_quantity = round(balance.quantity_kg + delta, STOCK_PRECISION) + 0.0

                if balance.quantity_kg + requested < 0 or new_quantity < 0:
                    logger.warning(
                        "stock_change_rejected",
                        product=product.value,
                        delta=requested,
                        available=balance.quantity_kg,
                        reference_id=reference_id,
                    )
                    raise InsufficientStockError(
                        product.value,
                        requested=abs(requested),
                        available=balance.quantity_kg,
                    )

                await self._store.update_balance(product, new_quantity, balance.version)
                entry = await self._store.append_ledger_entry(
                    LedgerEntry(
                        product=product,
                        change_kind=change_kind,
                        reference_id=reference_id,
                        quantity_change=delta,
                        balance_after=new_quantity,
                        performed_by=actor.display_name,
                        performed_by_id=actor.id,
                    )
                )

        logger.info(
            "stock_change_committed",
            product=product.value,
            change_kind=change_kind.value,
            delta=delta,
            balance_after=new_quantity,
            reference_id=reference_id,
        )
        return entry

    async def get_finished_stock(self) -> FinishedStock:
        return await self._store.get_finished_stock()

    async def get_balance(self, product: ProductType) -> StockBalance:
        return await self._store.get_balance(product)

    async def list_ledger(
        self,
        product: ProductType | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerEntry]:
        """Ledger rows newest first."""
        return await self._store.list_ledger(product=product, limit=limit, offset=offset)

    async def verify_ledger(self) -> dict[ProductType, LedgerReconciliation]:
        """
        Replay each product's ledger from zero and compare with its counter.

        An entry is reported as broken when its recorded balance does not
        match the running total at that point.
        """
        results: dict[ProductType, LedgerReconciliation] = {}

        for product in ProductType:
            balance = await self._store.get_balance(product)
            entries = await self._store.list_ledger(product=product, newest_first=False)

            running = 0.0
            broken: list[int] = []
            for entry in entries:
                running = round(running + entry.quantity_change, STOCK_PRECISION) + 0.0
                if running != entry.balance_after and entry.id is not None:
                    broken.append(entry.id)

            results[product] = LedgerReconciliation(
                product=product,
                counter_kg=balance.quantity_kg,
                replayed_kg=running,
                entry_count=len(entries),
                broken_entry_ids=broken,
            )

            if not results[product].is_consistent:
                logger.error(
                    "ledger_mismatch",
                    product=product.value,
                    counter_kg=balance.quantity_kg,
                    replayed_kg=running,
                    broken_entries=len(broken),
                )

        return results
