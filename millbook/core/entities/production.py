"""Production shift entities."""

from datetime import date, datetime, time
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from millbook.core.time_utils import utcnow


class Shift(str, Enum):
    DAY = "Day"
    NIGHT = "Night"


class ProductionMetrics(BaseModel):
    """Derived figures for one shift."""

    runtime_minutes: int
    oil_yield_percent: float
    cake_yield_percent: float
    total_accounted_percent: float
    process_loss_percent: float
    oil_per_hour: float


class ProductionEntry(BaseModel):
    """Immutable record of one crushing shift."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=utcnow)
    production_date: date = Field(default_factory=lambda: utcnow().date())
    shift: Shift = Shift.DAY
    line_id: str = ""
    supervisor_name: str = ""
    helper_name: str | None = None
    start_time: time
    end_time: time
    breakdown_minutes: int = 0
    breakdown_reason: str = "None"
    opening_stock_kg: float
    raw_consumed_kg: float
    oil_produced_kg: float
    cake_produced_kg: float
    runtime_minutes: int
    oil_yield_percent: float
    cake_yield_percent: float
    total_accounted_percent: float
    process_loss_percent: float
    oil_per_hour: float
    is_voided: bool = False  # read by reporting; nothing sets it
    entered_by: str
    entered_by_id: str


class AlertKind(str, Enum):
    LOW_OIL_YIELD = "low_oil_yield"
    HIGH_PROCESS_LOSS = "high_process_loss"
    LONG_BREAKDOWN = "long_breakdown"
    SHORT_RUNTIME = "short_runtime"


class ProductionAlert(BaseModel):
    """Advisory notice raised for an accepted shift."""

    kind: AlertKind
    value: float
    threshold: float
    message: str
