"""Abstract interface for adjustment request persistence."""

from abc import ABC, abstractmethod

from millbook.core.entities.adjustment import AdjustmentStatus, InventoryAdjustment


class IAdjustmentStore(ABC):
    """Interface for adjustment requests."""

    @abstractmethod
    async def create_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        """Insert a request."""
        pass

    @abstractmethod
    async def get_adjustment(self, adjustment_id: str) -> InventoryAdjustment | None:
        """Get a request by ID."""
        pass

    @abstractmethod
    async def update_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        """Persist a status transition."""
        pass

    @abstractmethod
    async def list_adjustments(
        self,
        status: AdjustmentStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryAdjustment]:
        """List requests newest first."""
        pass
