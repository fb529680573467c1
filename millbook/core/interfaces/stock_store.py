"""Abstract interfaces for raw and finished stock persistence."""

from abc import ABC, abstractmethod

from millbook.core.entities.inward import InwardEntry
from millbook.core.entities.stock import (
    FinishedStock,
    LedgerEntry,
    ProductType,
    RawStock,
    StockBalance,
)


class IRawStockStore(ABC):
    """Interface for the raw material counter and its intake history."""

    @abstractmethod
    async def get_raw_stock(self) -> RawStock:
        """Current raw stock."""
        pass

    @abstractmethod
    async def set_raw_stock(self, quantity_kg: float) -> RawStock:
        """Overwrite the raw stock counter."""
        pass

    @abstractmethod
    async def add_inward(self, entry: InwardEntry) -> InwardEntry:
        """Record an intake."""
        pass

    @abstractmethod
    async def list_inward(self, limit: int = 100, offset: int = 0) -> list[InwardEntry]:
        """List intakes newest first."""
        pass


class IFinishedStockStore(ABC):
    """
    Interface for the finished-goods counters and the movement ledger.

    Only the ledger engine may call the mutating methods.
    """

    @abstractmethod
    async def get_balance(self, product: ProductType) -> StockBalance:
        """Current counter and version for one product."""
        pass

    @abstractmethod
    async def get_finished_stock(self) -> FinishedStock:
        """Both counters."""
        pass

    @abstractmethod
    async def update_balance(
        self,
        product: ProductType,
        quantity_kg: float,
        expected_version: int,
    ) -> StockBalance:
        """
        Write a counter if its version still matches.

        Raises:
            StockVersionConflictError: the stored version moved on.
        """
        pass

    @abstractmethod
    async def append_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Append a ledger row and assign its ID."""
        pass

    @abstractmethod
    async def list_ledger(
        self,
        product: ProductType | None = None,
        limit: int | None = None,
        offset: int = 0,
        newest_first: bool = True,
    ) -> list[LedgerEntry]:
        """List ledger rows, newest first unless asked otherwise."""
        pass
