"""Role checks shared by the command services."""

from millbook.core.entities.user import User
from millbook.core.exceptions import ForbiddenError


def require_owner(actor: User, action: str) -> None:
    """Raise ForbiddenError unless the actor holds the Owner role."""
    if not actor.is_owner:
        raise ForbiddenError(action, actor.role.value)
