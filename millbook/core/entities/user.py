"""Identity domain entities."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from millbook.core.time_utils import utcnow


class UserRole(str, Enum):
    """Permission roles."""

    OWNER = "OWNER"
    SUPERVISOR = "SUPERVISOR"


class User(BaseModel):
    """A person who can log in and act on stock."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    login_id: str
    display_name: str
    role: UserRole
    password_hash: str
    employee_code: str | None = None
    email: str | None = None
    phone: str | None = None
    is_first_login: bool = False
    is_disabled: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("login_id")
    @classmethod
    def normalize_login_id(cls, v: str) -> str:
        """Login handles are case-insensitive."""
        return v.strip().lower()

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER


class Session(BaseModel):
    """The single active login."""

    user_id: str
    started_at: datetime = Field(default_factory=utcnow)
