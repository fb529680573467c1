"""Abstract interface for sales persistence."""

from abc import ABC, abstractmethod

from millbook.core.entities.sale import SalesEntry


class ISalesStore(ABC):
    """Interface for sales records."""

    @abstractmethod
    async def create_sale(self, sale: SalesEntry) -> SalesEntry:
        """Insert a sale."""
        pass

    @abstractmethod
    async def get_sale(self, sale_id: str) -> SalesEntry | None:
        """Get a sale by ID."""
        pass

    @abstractmethod
    async def update_sale(self, sale: SalesEntry) -> SalesEntry:
        """Persist status and cancellation fields."""
        pass

    @abstractmethod
    async def list_sales(
        self,
        entered_by_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[SalesEntry]:
        """List sales in entry order, optionally only one user's."""
        pass
