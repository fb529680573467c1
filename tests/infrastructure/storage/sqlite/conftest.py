"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from millbook.core.entities.user import User, UserRole
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool
from millbook.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def pool(temp_db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over a fully migrated database."""
    await initialize_database(temp_db_path)
    pool = ConnectionPool(temp_db_path, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def sample_user() -> User:
    return User(
        login_id="ravi",
        display_name="Ravi Kumar",
        role=UserRole.SUPERVISOR,
        password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhash",
        phone="9876543210",
        is_first_login=True,
    )
