"""Create Sale Use Case - dispatch with balance check."""

from millbook.application.dto.requests import CreateSaleRequest
from millbook.config import get_logger
from millbook.core.entities.sale import SalesEntry
from millbook.core.entities.user import User
from millbook.core.services.identity_service import IdentityService
from millbook.core.services.sales_recorder import SalesRecorder

logger = get_logger(__name__)


class CreateSaleUseCase:
    """Record a sale, crediting the named salesman or the entering user."""

    def __init__(self, sales: SalesRecorder, identity: IdentityService):
        self._sales = sales
        self._identity = identity

    async def execute(self, actor: User, request: CreateSaleRequest) -> SalesEntry:
        logger.info(
            "create_sale_started",
            actor_id=actor.id,
            product=request.product.value,
            quantity_kg=request.quantity_kg,
        )

        salesman = None
        if request.salesman_id:
            salesman = await self._identity.get_user(request.salesman_id)

        sale = await self._sales.create_sale(
            actor,
            **request.model_dump(exclude={"salesman_id"}),
            salesman=salesman,
        )
        return sale if actor.is_owner else sale.without_pricing()
