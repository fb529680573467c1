"""Record Inward Use Case - raw material intake."""

from millbook.application.dto.requests import RecordInwardRequest
from millbook.config import get_logger
from millbook.core.entities.inward import InwardEntry
from millbook.core.entities.user import User
from millbook.core.services.raw_stock_service import RawStockService

logger = get_logger(__name__)


class RecordInwardUseCase:
    def __init__(self, raw_stock: RawStockService):
        self._raw_stock = raw_stock

    async def execute(self, actor: User, request: RecordInwardRequest) -> InwardEntry:
        logger.info(
            "record_inward_started",
            actor_id=actor.id,
            weight_kg=request.weight_kg,
        )
        return await self._raw_stock.record_inward(actor, **request.model_dump())
