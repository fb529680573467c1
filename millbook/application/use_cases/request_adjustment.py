"""Request Adjustment Use Case."""

from millbook.application.dto.requests import AdjustmentRequest
from millbook.config import get_logger
from millbook.core.entities.adjustment import InventoryAdjustment
from millbook.core.entities.user import User
from millbook.core.services.adjustment_workflow import AdjustmentWorkflow

logger = get_logger(__name__)


class RequestAdjustmentUseCase:
    def __init__(self, workflow: AdjustmentWorkflow):
        self._workflow = workflow

    async def execute(self, actor: User, request: AdjustmentRequest) -> InventoryAdjustment:
        logger.info(
            "request_adjustment_started",
            actor_id=actor.id,
            product=request.product.value,
        )
        return await self._workflow.request_adjustment(actor, **request.model_dump())
