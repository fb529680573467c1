"""Data Transfer Objects for the command surface."""

from millbook.application.dto.requests import (
    AdjustmentRequest,
    CreateSaleRequest,
    CreateSupervisorRequest,
    OwnerSetupRequest,
    RecordInwardRequest,
    RecordProductionRequest,
)

__all__ = [
    "OwnerSetupRequest",
    "CreateSupervisorRequest",
    "RecordInwardRequest",
    "RecordProductionRequest",
    "CreateSaleRequest",
    "AdjustmentRequest",
]
