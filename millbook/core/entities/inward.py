"""Raw material intake entities."""

from datetime import date, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from millbook.core.time_utils import utcnow


class InwardEntry(BaseModel):
    """A truckload of groundnut received at the gate."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=utcnow)
    entry_date: date = Field(default_factory=lambda: utcnow().date())
    supplier: str
    vehicle_no: str = ""
    weight_kg: float
    entered_by: str
    entered_by_id: str
