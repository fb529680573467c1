"""Stock counter and ledger entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from millbook.core.time_utils import utcnow

# Finished-stock balances are kept to this many fractional digits.
STOCK_PRECISION = 2


class ProductType(str, Enum):
    """Finished goods tracked by the ledger."""

    OIL = "oil"
    CAKE = "cake"


class LedgerChangeKind(str, Enum):
    """Why a finished-stock counter moved."""

    PRODUCTION = "production"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    CANCELLATION = "cancellation"


class RawStock(BaseModel):
    """Unprocessed groundnut on hand."""

    quantity_kg: float = 0.0
    last_updated: datetime = Field(default_factory=utcnow)


class StockBalance(BaseModel):
    """One finished-stock counter with its optimistic-lock version."""

    product: ProductType
    quantity_kg: float = 0.0
    version: int = 0
    last_updated: datetime = Field(default_factory=utcnow)


class FinishedStock(BaseModel):
    """Both finished-goods counters."""

    oil_stock_kg: float = 0.0
    cake_stock_kg: float = 0.0
    last_updated: datetime = Field(default_factory=utcnow)

    def balance(self, product: ProductType) -> float:
        if product == ProductType.OIL:
            return self.oil_stock_kg
        return self.cake_stock_kg

    @classmethod
    def from_balances(cls, balances: list[StockBalance]) -> "FinishedStock":
        by_product = {b.product: b for b in balances}
        oil = by_product.get(ProductType.OIL)
        cake = by_product.get(ProductType.CAKE)
        stamps = [b.last_updated for b in balances]
        return cls(
            oil_stock_kg=oil.quantity_kg if oil else 0.0,
            cake_stock_kg=cake.quantity_kg if cake else 0.0,
            last_updated=max(stamps) if stamps else utcnow(),
        )


class LedgerEntry(BaseModel):
    """Immutable record of one finished-stock mutation."""

    id: int | None = None  # assigned on append; increases monotonically
    timestamp: datetime = Field(default_factory=utcnow)
    product: ProductType
    change_kind: LedgerChangeKind
    reference_id: str  # production, sale or adjustment id
    quantity_change: float  # signed
    balance_after: float
    performed_by: str
    performed_by_id: str | None = None
