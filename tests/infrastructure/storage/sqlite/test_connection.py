"""Unit tests for SQLite connection pool."""

from pathlib import Path

import pytest

from millbook.infrastructure.storage.sqlite.connection import ConnectionPool


class Boom(Exception):
    pass


async def count_rows(pool: ConnectionPool) -> int:
    async with pool.acquire() as conn:
        cursor = await conn.execute("SELECT COUNT(*) FROM items")
        row = await cursor.fetchone()
        return row[0]


@pytest.fixture
async def items_pool(temp_db_path: Path):
    pool = ConnectionPool(temp_db_path, pool_size=2)
    async with pool.acquire() as conn:
        await conn.execute("CREATE TABLE items (name TEXT NOT NULL)")
    yield pool
    await pool.close()


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_init_sets_db_path(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path

    def test_init_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False
        assert pool.in_transaction is False


class TestConnectionPoolInitialize:
    """Tests for ConnectionPool.initialize()."""

    async def test_initialize_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        assert len(pool._connections) == 1
        await pool.close()

    async def test_initialize_is_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.initialize()
        assert len(pool._connections) == 2
        await pool.close()

    async def test_close_resets_state(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()
        await pool.close()
        assert pool._initialized is False
        assert pool._connections == []

    async def test_pragmas_applied(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"
        await pool.close()


class TestTransactions:
    """Tests for transaction() and nested savepoints."""

    async def test_commit_on_success(self, items_pool: ConnectionPool):
        async with items_pool.transaction() as conn:
            await conn.execute("INSERT INTO items VALUES ('a')")
        assert await count_rows(items_pool) == 1

    async def test_rollback_on_error(self, items_pool: ConnectionPool):
        with pytest.raises(Boom):
            async with items_pool.transaction() as conn:
                await conn.execute("INSERT INTO items VALUES ('a')")
                raise Boom()
        assert await count_rows(items_pool) == 0

    async def test_in_transaction_flag(self, items_pool: ConnectionPool):
        assert items_pool.in_transaction is False
        async with items_pool.transaction():
            assert items_pool.in_transaction is True
        assert items_pool.in_transaction is False

    async def test_acquire_inside_transaction_reuses_connection(self, items_pool: ConnectionPool):
        async with items_pool.transaction() as outer:
            await outer.execute("INSERT INTO items VALUES ('a')")
            async with items_pool.acquire() as inner:
                assert inner is outer
                cursor = await inner.execute("SELECT COUNT(*) FROM items")
                assert (await cursor.fetchone())[0] == 1

    async def test_nested_failure_rolls_back_inner_only(self, items_pool: ConnectionPool):
        async with items_pool.transaction() as conn:
            await conn.execute("INSERT INTO items VALUES ('outer')")
            with pytest.raises(Boom):
                async with items_pool.transaction() as inner:
                    await inner.execute("INSERT INTO items VALUES ('inner')")
                    raise Boom()
        assert await count_rows(items_pool) == 1

    async def test_outer_failure_rolls_back_committed_inner(self, items_pool: ConnectionPool):
        with pytest.raises(Boom):
            async with items_pool.transaction():
                async with items_pool.transaction() as inner:
                    await inner.execute("INSERT INTO items VALUES ('inner')")
                raise Boom()
        assert await count_rows(items_pool) == 0

    async def test_deeply_nested(self, items_pool: ConnectionPool):
        async with items_pool.transaction():
            async with items_pool.transaction():
                async with items_pool.transaction() as conn:
                    await conn.execute("INSERT INTO items VALUES ('deep')")
        assert await count_rows(items_pool) == 1
