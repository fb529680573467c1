"""Setup Owner Use Case - first-run system initialization."""

from millbook.application.dto.requests import OwnerSetupRequest
from millbook.config import get_logger
from millbook.core.entities.user import User
from millbook.core.services.identity_service import IdentityService

logger = get_logger(__name__)


class SetupOwnerUseCase:
    """Create the Owner account on an empty system."""

    def __init__(self, identity: IdentityService):
        self._identity = identity

    async def execute(self, request: OwnerSetupRequest) -> User:
        logger.info("setup_owner_started", login_id=request.login_id)
        return await self._identity.initialize(**request.model_dump())
