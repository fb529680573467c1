"""
Schema migrator for the mill database.

Migrations are numbered SQL files (v001_initial_schema.sql, ...) applied in
order. Each one runs in its own transaction together with its row in
schema_migrations, so a failed script leaves the database at the previous
version. An applied migration whose file has since changed is refused.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from millbook.config import get_logger, get_settings
from millbook.core.exceptions import SchemaError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d{3})_(\w+)\.sql")

# Tables the stores rely on; checked after every run
REQUIRED_TABLES = frozenset({
    "users",
    "session",
    "audit_log",
    "raw_stock",
    "inward_entries",
    "finished_stock",
    "inventory_ledger",
    "production_entries",
    "sales",
    "adjustments",
    "schema_migrations",
})


@dataclass(frozen=True)
class Migration:
    """One numbered schema script."""

    version: str
    name: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode()).hexdigest()[:16]

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise SchemaError(f"Unrecognised migration file name: {path.name}")
        return cls(
            version=match.group(1),
            name=match.group(2),
            sql=path.read_text(encoding="utf-8"),
        )


def discover_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Every v*.sql file in version order. Duplicate version numbers are an error."""
    migrations = sorted(
        (Migration.from_file(path) for path in migrations_dir.glob("v*.sql")),
        key=lambda m: m.version,
    )
    versions = [m.version for m in migrations]
    if len(versions) != len(set(versions)):
        raise SchemaError("Duplicate migration versions", versions=versions)
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> recorded checksum. Empty on a fresh database."""
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> None:
    started = time.perf_counter()
    try:
        # executescript commits any open transaction first, so the script
        # carries its own BEGIN to stay atomic with its bookkeeping row
        await conn.executescript(f"BEGIN;\n{migration.sql}\n")
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.perf_counter() - started) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        raise SchemaError(
            f"Migration {migration.version} failed: {e}", version=migration.version
        ) from e

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=int((time.perf_counter() - started) * 1000),
    )


async def _check_required_tables(conn: aiosqlite.Connection) -> None:
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    missing = REQUIRED_TABLES - {row[0] for row in await cursor.fetchall()}
    if missing:
        raise SchemaError("Schema is missing tables", missing=sorted(missing))


async def initialize_database(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[Migration]:
    """
    Bring the database file up to the newest schema.

    Creates the file and its directory when absent. Safe to call on every
    start; returns the migrations applied by this call (empty when current).

    Raises:
        SchemaError: a script failed, an applied script was edited, or a
            required table is missing afterwards
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    migrations = discover_migrations(migrations_dir)

    applied_now: list[Migration] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await get_applied_migrations(conn)
        for migration in migrations:
            recorded = applied.get(migration.version)
            if recorded is None:
                await _apply(conn, migration)
                applied_now.append(migration)
            elif recorded != migration.checksum:
                logger.error("migration_checksum_changed", version=migration.version)
                raise SchemaError(
                    f"Migration {migration.version} changed after it was applied",
                    version=migration.version,
                )

        await _check_required_tables(conn)

    logger.info(
        "database_ready",
        db_path=str(db_path),
        applied=[m.version for m in applied_now],
    )
    return applied_now
