"""Abstract interfaces for user and session persistence."""

from abc import ABC, abstractmethod

from millbook.core.entities.user import Session, User


class IUserStore(ABC):
    """Interface for user record persistence."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """Insert a new user."""
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_user_by_login_id(self, login_id: str) -> User | None:
        """Get user by login handle (case-insensitive)."""
        pass

    @abstractmethod
    async def update_user(self, user: User) -> User:
        """Persist password, first-login and disabled changes."""
        pass

    @abstractmethod
    async def list_users(self) -> list[User]:
        """List all users, oldest first."""
        pass

    @abstractmethod
    async def count_users(self) -> int:
        """Number of users ever created."""
        pass


class ISessionStore(ABC):
    """Interface for the single active session."""

    @abstractmethod
    async def get_session(self) -> Session | None:
        """Return the active session, if any."""
        pass

    @abstractmethod
    async def set_session(self, session: Session) -> Session:
        """Replace the active session."""
        pass

    @abstractmethod
    async def clear_session(self) -> None:
        """Remove the active session."""
        pass
