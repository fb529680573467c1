"""SQLite implementation of the append-only audit log."""

import aiosqlite

from millbook.core.entities.audit import AuditAction, AuditLogEntry
from millbook.core.interfaces.audit_store import IAuditStore
from millbook.core.time_utils import parse_stored_datetime
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool


class SQLiteAuditStore(IAuditStore):
    """SQLite implementation of audit log storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry and assign its ID."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO audit_log (timestamp, action, actor_id, actor_name, details)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    entry.timestamp.isoformat(),
                    entry.action.value,
                    entry.actor_id,
                    entry.actor_name,
                    entry.details,
                ),
            )
            entry.id = cursor.lastrowid
            return entry

    async def list_entries(
        self,
        action: AuditAction | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        """List entries newest first."""
        query = "SELECT * FROM audit_log"
        params: list = []
        if action is not None:
            query += " WHERE action = ?"
            params.append(action.value)
        query += " ORDER BY id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> AuditLogEntry:
        return AuditLogEntry(
            id=row["id"],
            timestamp=parse_stored_datetime(row["timestamp"]),
            action=AuditAction(row["action"]),
            actor_id=row["actor_id"],
            actor_name=row["actor_name"],
            details=row["details"],
        )
