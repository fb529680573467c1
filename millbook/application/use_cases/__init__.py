"""Application use cases."""

from millbook.application.use_cases.create_sale import CreateSaleUseCase
from millbook.application.use_cases.create_supervisor import CreateSupervisorUseCase
from millbook.application.use_cases.record_inward import RecordInwardUseCase
from millbook.application.use_cases.record_production import RecordProductionUseCase
from millbook.application.use_cases.request_adjustment import RequestAdjustmentUseCase
from millbook.application.use_cases.setup_owner import SetupOwnerUseCase

__all__ = [
    "SetupOwnerUseCase",
    "CreateSupervisorUseCase",
    "RecordInwardUseCase",
    "RecordProductionUseCase",
    "CreateSaleUseCase",
    "RequestAdjustmentUseCase",
]
