"""
Main Orchestrator for InvestWise

This module ties together all the components and defines the session
the console drives:
1. Startup (load snapshots, fall back to empty stores on failure)
2. Sign up / login / logout
3. Portfolio, zakat and bank operations for the logged-in user
4. Shutdown (save everything)

DESIGN DECISION: There is no ambient global state. The session owns the
AppState and hands it to each service explicitly.
"""

from typing import Optional
from uuid import UUID

import structlog

from investwise.audit import AuditLogger, create_correlation_id
from investwise.config import Settings, get_settings
from investwise.models.account import BankAccount, User
from investwise.models.state import AppState
from investwise.services.accounts import AccountRegistry, CredentialHasher
from investwise.services.bank import BankLinkService
from investwise.services.portfolio import PortfolioService
from investwise.services.storage import (
    InMemorySnapshotStorage,
    JsonLinesAuditStorage,
    JsonSnapshotStorage,
    PersistenceError,
    SnapshotStorageInterface,
)


logger = structlog.get_logger(__name__)


class NotAuthenticatedError(Exception):
    """An operation needs a logged-in user and there is none."""

    def __init__(self):
        super().__init__("Please log in first.")


async def load_state(
    storage: SnapshotStorageInterface,
    audit_logger: Optional[AuditLogger] = None,
    correlation_id: Optional[UUID] = None,
) -> AppState:
    """
    Load all three snapshots.

    If any of them cannot be loaded, ALL stores start empty and the
    failure is logged. Availability wins over surfacing a hard stop, at
    the cost of losing the unreadable data on the next save.
    """
    try:
        return AppState(
            users=await storage.load_users(),
            portfolios=await storage.load_portfolios(),
            bank_accounts=await storage.load_bank_accounts(),
        )
    except PersistenceError as e:
        if audit_logger:
            await audit_logger.log_snapshot_load_failed(
                snapshot=e.snapshot,
                error_message=str(e),
                correlation_id=correlation_id,
            )
        return AppState()


class InvestWiseSession:
    """
    One console session: the loaded state, the services over it, and
    who (if anyone) is logged in.
    """

    def __init__(
        self,
        state: AppState,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        hasher: Optional[CredentialHasher] = None,
        settings: Optional[Settings] = None,
        persistent: bool = True,
    ):
        self._settings = settings or get_settings()
        self._persistent = persistent
        self._state = state
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._current_user: Optional[User] = None

        self.accounts = AccountRegistry(
            state,
            storage,
            audit_logger=self._audit_logger,
            hasher=hasher or CredentialHasher(self._settings.security),
        )
        self.bank = BankLinkService(
            state,
            storage,
            audit_logger=self._audit_logger,
            settings=self._settings.bank,
        )

    @classmethod
    async def start(
        cls,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        hasher: Optional[CredentialHasher] = None,
        settings: Optional[Settings] = None,
        persistent: bool = True,
    ) -> 'InvestWiseSession':
        """Load persisted state (with fallback) and build a session over it."""
        audit_logger = audit_logger or AuditLogger()
        state = await load_state(storage, audit_logger, create_correlation_id())
        logger.info(
            "session_started",
            users=len(state.users),
            portfolios=len(state.portfolios),
            bank_accounts=len(state.bank_accounts),
        )
        return cls(
            state,
            storage,
            audit_logger=audit_logger,
            hasher=hasher,
            settings=settings,
            persistent=persistent,
        )

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def persistent(self) -> bool:
        """False when nothing may be written to the data directory."""
        return self._persistent

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    def _require_user(self) -> User:
        if self._current_user is None:
            raise NotAuthenticatedError()
        return self._current_user

    async def sign_up(
        self,
        username: str,
        name: str,
        email: str,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """Register a user. Does not log them in."""
        return await self.accounts.register(
            username=username,
            name=name,
            email=email,
            password=password,
            correlation_id=correlation_id,
        )

    async def login(
        self,
        username: str,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        user = await self.accounts.authenticate(username, password, correlation_id)
        self._current_user = user
        return user

    async def logout(self, correlation_id: Optional[UUID] = None) -> None:
        user = self._current_user
        self._current_user = None
        if user is not None:
            await self._audit_logger.log_logged_out(user.username, correlation_id)

    def portfolio(self) -> PortfolioService:
        """Portfolio operations for the logged-in user."""
        user = self._require_user()
        return PortfolioService(
            user.username,
            self._state,
            self._storage,
            audit_logger=self._audit_logger,
        )

    async def link_bank(
        self,
        bank_name: str,
        card_number: str,
        otp: str,
        correlation_id: Optional[UUID] = None,
    ) -> BankAccount:
        user = self._require_user()
        return await self.bank.link(
            username=user.username,
            bank_name=bank_name,
            card_number=card_number,
            otp=otp,
            correlation_id=correlation_id,
        )

    def linked_bank(self) -> Optional[BankAccount]:
        user = self._require_user()
        return self.bank.get(user.username)

    async def shutdown(self, correlation_id: Optional[UUID] = None) -> None:
        """
        Persist every store before exit.

        Raises:
            PersistenceError: If the final save fails
        """
        try:
            await self._storage.save_state(self._state)
        except PersistenceError as e:
            await self._audit_logger.log_snapshot_save_failed(
                snapshot=e.snapshot,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise
        logger.info("session_closed")


async def create_session(
    settings: Optional[Settings] = None,
    persist: bool = True,
) -> InvestWiseSession:
    """
    Factory function to create a session with its storage backends.

    Args:
        settings: Settings to use (defaults to get_settings()).
        persist: When False, snapshots are kept in memory only and
                 the audit trail goes to the log alone.
    """
    settings = settings or get_settings()

    if persist:
        storage: SnapshotStorageInterface = JsonSnapshotStorage(settings.storage)
        audit_logger = AuditLogger(JsonLinesAuditStorage(settings.storage))
    else:
        storage = InMemorySnapshotStorage()
        audit_logger = AuditLogger()

    return await InvestWiseSession.start(
        storage,
        audit_logger=audit_logger,
        settings=settings,
        persistent=persist,
    )
