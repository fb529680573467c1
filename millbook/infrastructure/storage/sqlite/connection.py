"""
Async SQLite connection pool with aiosqlite.

Provides connection management with proper async context handling and
nested write transactions shared across stores.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path

import aiosqlite

from millbook.config import get_logger
from millbook.core.interfaces.transaction import ITransactionManager

logger = get_logger(__name__)


class ConnectionPool(ITransactionManager):
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size. Connections run in
    autocommit mode; ``transaction()`` issues ``BEGIN IMMEDIATE`` so writers
    are serialized by SQLite, and nested ``transaction()`` calls in the same
    task become savepoints on the same connection.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()
        # (connection, savepoint depth) of the transaction open in this task
        self._active: ContextVar[tuple[aiosqlite.Connection, int] | None] = ContextVar(
            f"millbook_tx_{id(self)}", default=None
        )

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a new database connection with optimized settings."""
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    @property
    def in_transaction(self) -> bool:
        """Whether the current task has a transaction open on this pool."""
        return self._active.get() is not None

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Inside a transaction the transaction's connection is returned, so
        reads see the uncommitted writes made earlier in the same unit.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        active = self._active.get()
        if active is not None:
            yield active[0]
            return

        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection with transaction context.

        Automatically commits on success, rolls back on exception.
        """
        active = self._active.get()
        if active is not None:
            async with self._savepoint(*active) as conn:
                yield conn
            return

        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            token = self._active.set((conn, 1))
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            else:
                await conn.execute("COMMIT")
            finally:
                self._active.reset(token)

    @asynccontextmanager
    async def _savepoint(
        self, conn: aiosqlite.Connection, depth: int
    ) -> AsyncIterator[aiosqlite.Connection]:
        name = f"sp_{depth}"
        await conn.execute(f"SAVEPOINT {name}")
        token = self._active.set((conn, depth + 1))
        try:
            yield conn
        except BaseException:
            await conn.execute(f"ROLLBACK TO SAVEPOINT {name}")
            await conn.execute(f"RELEASE SAVEPOINT {name}")
            raise
        else:
            await conn.execute(f"RELEASE SAVEPOINT {name}")
        finally:
            self._active.reset(token)

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            while not self._pool.empty():
                self._pool.get_nowait()
            self._initialized = False
            logger.info("connection_pool_closed")
