"""Record Production Use Case - one crushing shift."""

from millbook.application.dto.requests import RecordProductionRequest
from millbook.config import get_logger
from millbook.core.entities.user import User
from millbook.core.services.production_recorder import ProductionRecorder, ProductionResult

logger = get_logger(__name__)


class RecordProductionUseCase:
    """
    Use case for booking a shift.

    Flow:
    1. Validate request (DTO)
    2. Compute runtime and metrics
    3. Consume raw stock, add oil and cake through the ledger
    4. Return the entry with advisory alerts
    """

    def __init__(self, recorder: ProductionRecorder):
        self._recorder = recorder

    async def execute(self, actor: User, request: RecordProductionRequest) -> ProductionResult:
        logger.info(
            "record_production_started",
            actor_id=actor.id,
            raw_consumed_kg=request.raw_consumed_kg,
        )
        result = await self._recorder.record_production(actor, **request.model_dump())
        logger.info(
            "record_production_complete",
            entry_id=result.entry.id,
            alerts=[a.kind.value for a in result.alerts],
        )
        return result
