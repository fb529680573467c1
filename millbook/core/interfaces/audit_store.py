"""Abstract interface for the audit log."""

from abc import ABC, abstractmethod

from millbook.core.entities.audit import AuditAction, AuditLogEntry


class IAuditStore(ABC):
    """Append-only audit log persistence."""

    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry and assign its ID."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        action: AuditAction | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        """List entries newest first."""
        pass
