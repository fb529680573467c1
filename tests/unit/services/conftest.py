"""Fixtures for service tests that run against AsyncMock stores."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from millbook.core.entities.audit import AuditLogEntry
from millbook.core.entities.user import User, UserRole
from millbook.core.interfaces import ITransactionManager
from millbook.core.security import hash_password
from millbook.core.services.audit_trail import AuditTrail


class FakeTransactions(ITransactionManager):
    """Counts transactions without touching a database."""

    def __init__(self):
        self.opened = 0
        self.active = False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        self.opened += 1
        self.active = True
        try:
            yield None
        finally:
            self.active = False


@pytest.fixture
def transactions() -> FakeTransactions:
    return FakeTransactions()


@pytest.fixture
def audit_store() -> AsyncMock:
    store = AsyncMock()
    store.append.side_effect = lambda entry: entry
    return store


@pytest.fixture
def audit_trail(audit_store: AsyncMock) -> AuditTrail:
    return AuditTrail(audit_store)


@pytest.fixture
def audit_actions(audit_store: AsyncMock):
    """Callable returning the audit actions appended so far."""

    def actions() -> list[str]:
        entries: list[AuditLogEntry] = [c.args[0] for c in audit_store.append.call_args_list]
        return [e.action.value for e in entries]

    return actions


@pytest.fixture
def owner_user() -> User:
    return User(
        login_id="owner",
        display_name="Mill Owner",
        role=UserRole.OWNER,
        password_hash=hash_password("owner-pass", rounds=4),
    )


@pytest.fixture
def supervisor_user() -> User:
    return User(
        login_id="ravi",
        display_name="Ravi Kumar",
        role=UserRole.SUPERVISOR,
        password_hash=hash_password("ravi-pass", rounds=4),
    )
