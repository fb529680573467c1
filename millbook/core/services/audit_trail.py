"""
Audit trail service.

Every state-changing command appends exactly one entry through here. Call it
inside the command's transaction so the entry commits or rolls back with it.
"""

from millbook.config import get_logger
from millbook.core.entities.audit import AuditAction, AuditLogEntry
from millbook.core.entities.user import User
from millbook.core.interfaces.audit_store import IAuditStore

logger = get_logger(__name__)


class AuditTrail:
    """Append-only log of security and operational events."""

    def __init__(self, audit_store: IAuditStore):
        self._store = audit_store

    async def record(
        self,
        action: AuditAction,
        actor: User,
        details: str = "",
    ) -> AuditLogEntry:
        entry = await self._store.append(
            AuditLogEntry(
                action=action,
                actor_id=actor.id,
                actor_name=actor.display_name,
                details=details,
            )
        )
        logger.debug("audit_recorded", action=action.value, actor_id=actor.id)
        return entry

    async def list_entries(
        self,
        action: AuditAction | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        """Entries newest first."""
        return await self._store.list_entries(action=action, limit=limit, offset=offset)
