"""
Account Registry

Sign-up and login against the in-memory user registry.

Credential tokens are salted PBKDF2-SHA256 hashes produced by passlib.
This is a demonstration app: nothing here should be read as a security
boundary beyond "the password is not stored in clear".
"""

from typing import Optional
from uuid import UUID

from passlib.context import CryptContext

from investwise.audit import AuditLogger
from investwise.config import SecuritySettings, get_settings
from investwise.models.account import User
from investwise.models.state import AppState
from investwise.services.base import SnapshotBackedService
from investwise.services.storage import SnapshotStorageInterface


class DuplicateUsernameError(Exception):
    """The username is already registered."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


class AuthenticationError(Exception):
    """
    Login failed.

    Deliberately the same for an unknown username and a wrong password.
    """

    def __init__(self):
        super().__init__("Invalid username or password.")


class CredentialHasher:
    """Derives and checks credential tokens."""

    def __init__(self, settings: Optional[SecuritySettings] = None):
        settings = settings or get_settings().security
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            pbkdf2_sha256__default_rounds=settings.hash_rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, token: str) -> bool:
        return self._context.verify(password, token)

    def dummy_verify(self) -> None:
        """Spend the same time as a real check when there is no user."""
        self._context.dummy_verify()


class AccountRegistry(SnapshotBackedService):
    """
    User registry operations.

    Format checks on email, password and username happen in the
    console before register() is called; uniqueness is enforced here.
    """

    def __init__(
        self,
        state: AppState,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        hasher: Optional[CredentialHasher] = None,
    ):
        super().__init__(state, storage, audit_logger)
        self._hasher = hasher or CredentialHasher()

    def exists(self, username: str) -> bool:
        return username in self._state.users

    def get(self, username: str) -> Optional[User]:
        return self._state.users.get(username)

    async def register(
        self,
        username: str,
        name: str,
        email: str,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """
        Create a user.

        Raises:
            DuplicateUsernameError: If the username is taken (registry unchanged)
            PersistenceError: If the snapshot save fails (user stays registered in memory)
        """
        username = username.strip()
        if username in self._state.users:
            raise DuplicateUsernameError(username)

        user = User(
            name=name,
            email=email,
            username=username,
            credential_token=self._hasher.hash(password),
        )
        self._state.users[user.username] = user

        await self._audit_logger.log_user_registered(user.username, correlation_id)
        await self._persist(user.username, correlation_id)
        return user

    async def authenticate(
        self,
        username: str,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """
        Check a username/password pair.

        Raises:
            AuthenticationError: For an unknown user or a wrong password alike
        """
        user = self._state.users.get(username)
        if user is None:
            self._hasher.dummy_verify()
            ok = False
        else:
            ok = self._hasher.verify(password, user.credential_token)

        if not ok:
            await self._audit_logger.log_login_failed(correlation_id)
            raise AuthenticationError()

        await self._audit_logger.log_login_succeeded(user.username, correlation_id)
        return user
