"""Finished goods sales entities."""

from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from millbook.core.entities.stock import ProductType
from millbook.core.time_utils import utcnow


class BuyerType(str, Enum):
    RETAILER = "retailer"
    WHOLESALER = "wholesaler"
    FACTORY = "factory"
    OTHER = "other"


class SaleStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class SalesEntry(BaseModel):
    """One dispatch of oil or cake to a buyer."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=utcnow)
    sale_date: date = Field(default_factory=lambda: utcnow().date())
    product: ProductType
    quantity_kg: float
    buyer_name: str
    buyer_type: BuyerType = BuyerType.OTHER
    vehicle_no: str | None = None
    rate_per_unit: float | None = None  # Owner only
    total_value: float | None = None  # Owner only
    status: SaleStatus = SaleStatus.CONFIRMED
    entered_by: str
    entered_by_id: str
    salesman_name: str | None = None
    salesman_id: str | None = None
    cancellation_reason: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == SaleStatus.CANCELLED

    def without_pricing(self) -> "SalesEntry":
        """Copy with price and value removed, for supervisor views."""
        return self.model_copy(update={"rate_per_unit": None, "total_value": None})
