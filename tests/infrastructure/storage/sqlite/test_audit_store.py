"""Tests for SQLiteAuditStore."""

import aiosqlite
import pytest

from millbook.core.entities.audit import AuditAction, AuditLogEntry
from millbook.infrastructure.storage.sqlite.audit_store import SQLiteAuditStore


@pytest.fixture
def store(pool) -> SQLiteAuditStore:
    return SQLiteAuditStore(pool)


def make_entry(action: AuditAction, details: str = "") -> AuditLogEntry:
    return AuditLogEntry(action=action, actor_id="u1", actor_name="Mill Owner", details=details)


class TestSQLiteAuditStore:
    async def test_append_assigns_id(self, store):
        entry = await store.append(make_entry(AuditAction.LOGIN))
        assert entry.id is not None

    async def test_list_newest_first(self, store):
        await store.append(make_entry(AuditAction.LOGIN, "one"))
        await store.append(make_entry(AuditAction.SALE_CREATE, "two"))
        await store.append(make_entry(AuditAction.LOGOUT, "three"))

        entries = await store.list_entries()

        assert [e.details for e in entries] == ["three", "two", "one"]
        assert entries[0].action == AuditAction.LOGOUT
        assert entries[0].actor_name == "Mill Owner"

    async def test_filter_by_action(self, store):
        await store.append(make_entry(AuditAction.LOGIN))
        await store.append(make_entry(AuditAction.SALE_CREATE))
        await store.append(make_entry(AuditAction.LOGIN))

        logins = await store.list_entries(action=AuditAction.LOGIN)

        assert len(logins) == 2
        assert all(e.action == AuditAction.LOGIN for e in logins)

    async def test_rows_cannot_be_rewritten(self, store, pool):
        entry = await store.append(make_entry(AuditAction.LOGIN))

        with pytest.raises(aiosqlite.IntegrityError):
            async with pool.transaction() as conn:
                await conn.execute("DELETE FROM audit_log WHERE id = ?", (entry.id,))

        assert len(await store.list_entries()) == 1
