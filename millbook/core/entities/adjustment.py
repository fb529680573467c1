"""Inventory adjustment workflow entities."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from millbook.core.entities.stock import ProductType
from millbook.core.time_utils import utcnow


class AdjustmentStatus(str, Enum):
    """PENDING moves once, to APPROVED or REJECTED."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InventoryAdjustment(BaseModel):
    """A requested correction to a finished-stock counter."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=utcnow)
    product: ProductType
    requested_change: float  # signed kg
    reason: str
    requested_by: str
    requested_by_id: str
    status: AdjustmentStatus = AdjustmentStatus.PENDING
    actioned_by: str | None = None
    actioned_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == AdjustmentStatus.PENDING
