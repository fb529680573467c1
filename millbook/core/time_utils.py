"""Clock helpers shared by entities and stores."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time in UTC (naive, canonical for storage)."""
    return datetime.now(UTC).replace(tzinfo=None)


def parse_stored_datetime(value: str | None, default: datetime | None = None) -> datetime:
    """Parse an ISO timestamp read back from SQLite."""
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return default or utcnow()
