"""Request DTOs for the command surface.

Pydantic v2 models validated before any use case runs. Name and login fields
are left unconstrained so blank values reach the services and raise
MissingFieldError.
"""

from datetime import date, time

from pydantic import BaseModel, Field

from millbook.core.entities.production import Shift
from millbook.core.entities.sale import BuyerType
from millbook.core.entities.stock import ProductType


# --- Identity ---


class OwnerSetupRequest(BaseModel):
    """First-run creation of the Owner account."""

    login_id: str = Field(..., description="Login handle (case-insensitive)", examples=["owner"])
    display_name: str = Field(..., description="Name shown in logs and records")
    password: str = Field(..., description="Initial password")
    employee_code: str | None = Field(default=None, description="Employee code")
    email: str | None = Field(default=None, description="Contact email")
    phone: str | None = Field(default=None, description="Contact phone")


class CreateSupervisorRequest(BaseModel):
    """Owner creates a supervisor account."""

    display_name: str = Field(..., description="Supervisor name")
    login_id: str = Field(..., description="Login handle (case-insensitive)", examples=["ravi"])
    employee_code: str | None = Field(default=None, description="Employee code")
    email: str | None = Field(default=None, description="Contact email")
    phone: str | None = Field(default=None, description="Contact phone")


# --- Raw material ---


class RecordInwardRequest(BaseModel):
    """A load of groundnut received at the gate."""

    supplier: str = Field(..., description="Supplier or farmer name")
    vehicle_no: str = Field(default="", description="Truck registration")
    weight_kg: float = Field(..., gt=0, description="Net weight received")
    entry_date: date | None = Field(default=None, description="Receipt date (defaults to today)")


# --- Production ---


class RecordProductionRequest(BaseModel):
    """One crushing shift."""

    shift: Shift = Field(default=Shift.DAY, description="Day or Night shift")
    line_id: str = Field(default="Line-01", description="Crushing line")
    helper_name: str | None = Field(default=None, description="Helper on the line")
    start_time: time = Field(..., description="Machine start (24h)", examples=["08:00"])
    end_time: time = Field(..., description="Machine stop (24h, may pass midnight)")
    breakdown_minutes: int = Field(default=0, ge=0, description="Minutes lost to breakdowns")
    breakdown_reason: str = Field(default="None", description="Cause of breakdown")
    raw_consumed_kg: float = Field(..., ge=0, description="Groundnut crushed")
    oil_produced_kg: float = Field(..., ge=0, description="Oil output")
    cake_produced_kg: float = Field(..., ge=0, description="Cake output")
    production_date: date | None = Field(default=None, description="Shift date (defaults to today)")


# --- Sales ---


class CreateSaleRequest(BaseModel):
    """Dispatch of oil or cake to a buyer."""

    product: ProductType = Field(..., description="oil or cake")
    quantity_kg: float = Field(..., gt=0, description="Quantity dispatched")
    buyer_name: str = Field(..., description="Buyer name")
    buyer_type: BuyerType = Field(default=BuyerType.OTHER, description="Buyer category")
    vehicle_no: str | None = Field(default=None, description="Truck registration")
    rate_per_unit: float | None = Field(
        default=None,
        ge=0,
        description="Price per kg; kept only for Owner entries",
    )
    salesman_id: str | None = Field(
        default=None,
        description="User credited with the sale (defaults to the entering user)",
    )
    sale_date: date | None = Field(default=None, description="Sale date (defaults to today)")


# --- Adjustments ---


class AdjustmentRequest(BaseModel):
    """Request a correction to a finished-stock counter."""

    product: ProductType = Field(..., description="oil or cake")
    requested_change: float = Field(..., description="Signed kg; negative removes stock")
    reason: str = Field(..., description="Why the correction is needed")
