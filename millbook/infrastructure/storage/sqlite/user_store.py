"""SQLite implementation of user and session storage."""

import aiosqlite

from millbook.config import get_logger
from millbook.core.entities.user import Session, User, UserRole
from millbook.core.interfaces.user_store import ISessionStore, IUserStore
from millbook.core.time_utils import parse_stored_datetime
from millbook.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteUserStore(IUserStore):
    """SQLite implementation of user storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_user(self, user: User) -> User:
        """Insert a new user."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO users (
                    id, login_id, display_name, role, password_hash,
                    employee_code, email, phone,
                    is_first_login, is_disabled, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user.id,
                    user.login_id,
                    user.display_name,
                    user.role.value,
                    user.password_hash,
                    user.employee_code,
                    user.email,
                    user.phone,
                    int(user.is_first_login),
                    int(user.is_disabled),
                    user.created_at.isoformat(),
                ),
            )
            logger.info("user_created", user_id=user.id, role=user.role.value)
            return user

    async def get_user(self, user_id: str) -> User | None:
        """Get user by ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            return self._row_to_user(row) if row else None

    async def get_user_by_login_id(self, login_id: str) -> User | None:
        """Get user by login handle (case-insensitive)."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM users WHERE login_id = ? COLLATE NOCASE",
                (login_id.strip(),),
            )
            row = await cursor.fetchone()
            return self._row_to_user(row) if row else None

    async def update_user(self, user: User) -> User:
        """Persist password, first-login and disabled changes."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                UPDATE users SET
                    display_name = ?,
                    password_hash = ?,
                    employee_code = ?,
                    email = ?,
                    phone = ?,
                    is_first_login = ?,
                    is_disabled = ?
                WHERE id = ?
                """,
                (
                    user.display_name,
                    user.password_hash,
                    user.employee_code,
                    user.email,
                    user.phone,
                    int(user.is_first_login),
                    int(user.is_disabled),
                    user.id,
                ),
            )
            return user

    async def list_users(self) -> list[User]:
        """List all users, oldest first."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM users ORDER BY created_at, rowid")
            rows = await cursor.fetchall()
            return [self._row_to_user(row) for row in rows]

    async def count_users(self) -> int:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM users")
            row = await cursor.fetchone()
            return row[0]

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """Convert a database row to a User entity."""
        return User(
            id=row["id"],
            login_id=row["login_id"],
            display_name=row["display_name"],
            role=UserRole(row["role"]),
            password_hash=row["password_hash"],
            employee_code=row["employee_code"],
            email=row["email"],
            phone=row["phone"],
            is_first_login=bool(row["is_first_login"]),
            is_disabled=bool(row["is_disabled"]),
            created_at=parse_stored_datetime(row["created_at"]),
        )


class SQLiteSessionStore(ISessionStore):
    """Single-row session table."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def get_session(self) -> Session | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM session WHERE id = 1")
            row = await cursor.fetchone()
            if row is None:
                return None
            return Session(
                user_id=row["user_id"],
                started_at=parse_stored_datetime(row["started_at"]),
            )

    async def set_session(self, session: Session) -> Session:
        async with self._pool.transaction() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO session (id, user_id, started_at) VALUES (1, ?, ?)",
                (session.user_id, session.started_at.isoformat()),
            )
            return session

    async def clear_session(self) -> None:
        async with self._pool.transaction() as conn:
            await conn.execute("DELETE FROM session WHERE id = 1")
