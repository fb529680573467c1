"""Audit log entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from millbook.core.time_utils import utcnow


class AuditAction(str, Enum):
    """Kinds of state-changing actions recorded in the audit log."""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE_USER = "CREATE_USER"
    DISABLE_USER = "DISABLE_USER"
    RESET_PASSWORD = "RESET_PASSWORD"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    ENTRY_CREATE = "ENTRY_CREATE"
    SALE_CREATE = "SALE_CREATE"
    SALE_CANCEL = "SALE_CANCEL"
    ADJUSTMENT_REQUEST = "ADJUSTMENT_REQUEST"
    ADJUSTMENT_ACTION = "ADJUSTMENT_ACTION"


class AuditLogEntry(BaseModel):
    """One append-only audit record."""

    id: int | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    action: AuditAction
    actor_id: str
    actor_name: str
    details: str = ""
