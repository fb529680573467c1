"""
Identity and session service.

Owns user accounts, the single persisted session and password handling.
Depends only on core entities, interfaces and exceptions.
"""

import asyncio
from dataclasses import dataclass

from millbook.config import get_logger, get_settings
from millbook.config.settings import SecuritySettings
from millbook.core.entities.audit import AuditAction
from millbook.core.entities.user import Session, User, UserRole
from millbook.core.exceptions import (
    AccountDisabledError,
    DuplicateLoginIdError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    MissingFieldError,
    SystemAlreadyInitializedError,
    UserNotFoundError,
    WeakPasswordError,
)
from millbook.core.interfaces import ISessionStore, ITransactionManager, IUserStore
from millbook.core.security import generate_temporary_password, hash_password, verify_password
from millbook.core.services.audit_trail import AuditTrail
from millbook.core.services.authorization import require_owner

logger = get_logger(__name__)


@dataclass
class SupervisorCreated:
    """A new supervisor and the temporary password shown to the owner once."""

    user: User
    temporary_password: str


class IdentityService:
    """
    User accounts and the active session.

    Required interfaces for DI:
    - IUserStore: user records
    - ISessionStore: the single active login
    - ITransactionManager: groups each command with its audit entry
    """

    def __init__(
        self,
        user_store: IUserStore,
        session_store: ISessionStore,
        audit_trail: AuditTrail,
        transactions: ITransactionManager,
        security: SecuritySettings | None = None,
    ):
        self._users = user_store
        self._sessions = session_store
        self._audit = audit_trail
        self._tx = transactions
        self._security = security or get_settings().security

    async def is_initialized(self) -> bool:
        """True once the owner account exists."""
        return await self._users.count_users() > 0

    async def initialize(
        self,
        login_id: str,
        display_name: str,
        password: str,
        employee_code: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> User:
        """
        Create the sole Owner account.

        Raises:
            SystemAlreadyInitializedError: any user already exists
            MissingFieldError: blank name or login ID
            WeakPasswordError: password shorter than the minimum
        """
        _require_field("login_id", login_id)
        _require_field("display_name", display_name)
        self._check_strength(password)
        password_hash = await self._hash(password)

        async with self._tx.transaction():
            if await self._users.count_users() > 0:
                raise SystemAlreadyInitializedError()

            owner = User(
                login_id=login_id,
                display_name=display_name.strip(),
                role=UserRole.OWNER,
                password_hash=password_hash,
                employee_code=employee_code,
                email=email,
                phone=phone,
                is_first_login=False,
            )
            await self._users.create_user(owner)
            await self._audit.record(
                AuditAction.CREATE_USER, owner, f"System initialized by {owner.login_id}"
            )

        logger.info("system_initialized", owner_id=owner.id)
        return owner

    async def login(self, login_id: str, password: str) -> User:
        """
        Authenticate and replace the active session.

        Checks run in order: unknown login, disabled account, wrong password.
        """
        user = await self._users.get_user_by_login_id(login_id)
        if user is None:
            logger.warning("login_failed", login_id=login_id, reason="not_found")
            raise UserNotFoundError(login_id)
        if user.is_disabled:
            logger.warning("login_failed", login_id=login_id, reason="disabled")
            raise AccountDisabledError(user.login_id)
        if not await self._verify(password, user.password_hash):
            logger.warning("login_failed", login_id=login_id, reason="invalid_credentials")
            raise InvalidCredentialsError(user.login_id)

        async with self._tx.transaction():
            await self._sessions.set_session(Session(user_id=user.id))
            await self._audit.record(AuditAction.LOGIN, user, "User logged in")

        logger.info("user_logged_in", user_id=user.id, role=user.role.value)
        return user

    async def logout(self) -> None:
        """Record the logout and clear the session. Does nothing if nobody is logged in."""
        user = await self.get_current_user()
        if user is None:
            return

        async with self._tx.transaction():
            await self._audit.record(AuditAction.LOGOUT, user, "User logged out")
            await self._sessions.clear_session()

        logger.info("user_logged_out", user_id=user.id)

    async def get_current_user(self) -> User | None:
        session = await self._sessions.get_session()
        if session is None:
            return None
        return await self._users.get_user(session.user_id)

    async def get_user(self, user_id: str) -> User:
        user = await self._users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def find_user_by_login_id(self, login_id: str) -> User | None:
        return await self._users.get_user_by_login_id(login_id)

    async def list_users(self) -> list[User]:
        return await self._users.list_users()

    async def create_supervisor(
        self,
        actor: User,
        display_name: str,
        login_id: str,
        employee_code: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> SupervisorCreated:
        """
        Create a supervisor with a random temporary password.

        The plain password is returned here and never again; only its hash
        is stored.
        """
        require_owner(actor, "create supervisor")
        _require_field("display_name", display_name)
        _require_field("login_id", login_id)

        temporary_password = generate_temporary_password(self._security.temp_password_length)
        password_hash = await self._hash(temporary_password)

        async with self._tx.transaction():
            if await self._users.get_user_by_login_id(login_id) is not None:
                logger.warning("duplicate_login_id", login_id=login_id)
                raise DuplicateLoginIdError(login_id.strip().lower())

            supervisor = User(
                login_id=login_id,
                display_name=display_name.strip(),
                role=UserRole.SUPERVISOR,
                password_hash=password_hash,
                employee_code=employee_code,
                email=email,
                phone=phone,
                is_first_login=True,
            )
            await self._users.create_user(supervisor)
            await self._audit.record(
                AuditAction.CREATE_USER, actor, f"Created supervisor {supervisor.login_id}"
            )

        logger.info("supervisor_created", user_id=supervisor.id, created_by=actor.id)
        return SupervisorCreated(user=supervisor, temporary_password=temporary_password)

    async def toggle_status(self, actor: User, target_id: str) -> User:
        """Flip a user's disabled flag. The Owner account is never disabled."""
        require_owner(actor, "toggle user status")

        async with self._tx.transaction():
            target = await self.get_user(target_id)
            if target.is_owner:
                return target

            target.is_disabled = not target.is_disabled
            await self._users.update_user(target)
            verb = "Disabled" if target.is_disabled else "Enabled"
            await self._audit.record(
                AuditAction.DISABLE_USER, actor, f"{verb} user {target.login_id}"
            )

        logger.info(
            "user_status_toggled",
            user_id=target.id,
            is_disabled=target.is_disabled,
        )
        return target

    async def update_password(
        self,
        user_id: str,
        new_password: str,
        actor: User | None = None,
    ) -> User:
        """
        Unconditionally set a new password and clear the first-login flag.

        Used for the forced first-login change and owner-mediated recovery.
        """
        self._check_strength(new_password)
        password_hash = await self._hash(new_password)

        async with self._tx.transaction():
            user = await self.get_user(user_id)
            user.password_hash = password_hash
            user.is_first_login = False
            await self._users.update_user(user)
            await self._audit.record(
                AuditAction.RESET_PASSWORD, actor or user, f"Password reset for {user.login_id}"
            )

        logger.info("password_reset", user_id=user.id)
        return user

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> User:
        """Change a password after verifying the current one."""
        user = await self.get_user(user_id)
        if not await self._verify(old_password, user.password_hash):
            logger.warning("password_change_rejected", user_id=user_id)
            raise IncorrectPasswordError(user_id)
        self._check_strength(new_password)
        password_hash = await self._hash(new_password)

        async with self._tx.transaction():
            # Re-read so a concurrent status change is not overwritten
            user = await self.get_user(user_id)
            user.password_hash = password_hash
            user.is_first_login = False
            await self._users.update_user(user)
            await self._audit.record(AuditAction.PASSWORD_CHANGE, user, "Password changed")

        logger.info("password_changed", user_id=user.id)
        return user

    def _check_strength(self, password: str) -> None:
        if len(password) < self._security.min_password_length:
            raise WeakPasswordError(self._security.min_password_length)

    # bcrypt is CPU bound; run it in the default executor so the loop keeps serving
    # and no write transaction is held open while hashing.
    async def _hash(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, hash_password, password, self._security.bcrypt_rounds
        )

    async def _verify(self, password: str, password_hash: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, verify_password, password, password_hash)


def _require_field(name: str, value: str | None) -> None:
    if value is None or not value.strip():
        raise MissingFieldError(name)
