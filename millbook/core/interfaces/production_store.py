"""Abstract interface for production entry persistence."""

from abc import ABC, abstractmethod
from datetime import date

from millbook.core.entities.production import ProductionEntry


class IProductionStore(ABC):
    """Interface for shift records."""

    @abstractmethod
    async def add_entry(self, entry: ProductionEntry) -> ProductionEntry:
        """Insert a shift record."""
        pass

    @abstractmethod
    async def get_entry(self, entry_id: str) -> ProductionEntry | None:
        """Get a shift record by ID."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        entered_by_id: str | None = None,
        production_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ProductionEntry]:
        """List shift records in entry order, optionally filtered."""
        pass
