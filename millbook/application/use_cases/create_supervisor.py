"""Create Supervisor Use Case."""

from millbook.application.dto.requests import CreateSupervisorRequest
from millbook.config import get_logger
from millbook.core.entities.user import User
from millbook.core.services.identity_service import IdentityService, SupervisorCreated

logger = get_logger(__name__)


class CreateSupervisorUseCase:
    """Owner adds a supervisor; the temporary password comes back once."""

    def __init__(self, identity: IdentityService):
        self._identity = identity

    async def execute(self, actor: User, request: CreateSupervisorRequest) -> SupervisorCreated:
        logger.info("create_supervisor_started", actor_id=actor.id, login_id=request.login_id)
        return await self._identity.create_supervisor(actor, **request.model_dump())
