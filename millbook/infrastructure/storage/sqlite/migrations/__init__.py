"""Database migrations module."""

from millbook.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    Migration,
    discover_migrations,
    get_current_version,
    initialize_database,
)

__all__ = [
    "REQUIRED_TABLES",
    "Migration",
    "discover_migrations",
    "get_current_version",
    "initialize_database",
]
