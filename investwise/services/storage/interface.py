"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap JSON files for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

Persistence is whole-snapshot: each of the three top-level stores is
loaded in full at startup and overwritten in full after every mutation.
There is no atomic rename, so a crash mid-write can corrupt a snapshot.
"""

from abc import ABC, abstractmethod

from investwise.models.account import BankAccount, User
from investwise.models.audit import AuditEvent
from investwise.models.portfolio import Portfolio
from investwise.models.state import AppState


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for snapshot persistence of the three stores.

    A store that has never been saved loads as an empty mapping.
    """

    @abstractmethod
    async def load_users(self) -> dict[str, User]:
        """
        Load the user registry.

        Raises:
            PersistenceError: If the snapshot cannot be read or parsed
        """
        pass

    @abstractmethod
    async def save_users(self, users: dict[str, User]) -> None:
        """
        Overwrite the user registry snapshot.

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def load_portfolios(self) -> dict[str, Portfolio]:
        """Load portfolios keyed by username."""
        pass

    @abstractmethod
    async def save_portfolios(self, portfolios: dict[str, Portfolio]) -> None:
        """Overwrite the portfolios snapshot."""
        pass

    @abstractmethod
    async def load_bank_accounts(self) -> dict[str, BankAccount]:
        """Load bank links keyed by username."""
        pass

    @abstractmethod
    async def save_bank_accounts(self, bank_accounts: dict[str, BankAccount]) -> None:
        """Overwrite the bank accounts snapshot."""
        pass

    async def save_state(self, state: AppState) -> None:
        """Write all three snapshots."""
        await self.save_users(state.users)
        await self.save_portfolios(state.portfolios)
        await self.save_bank_accounts(state.bank_accounts)


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[dict]:
        """
        Get the most recent audit events.

        Returns:
            List of event dicts (newest first)
        """
        pass


class PersistenceError(Exception):
    """Base exception for storage operations."""

    def __init__(self, snapshot: str, message: str):
        self.snapshot = snapshot
        super().__init__(f"{snapshot}: {message}")


class SnapshotCorruptError(PersistenceError):
    """A snapshot exists but could not be parsed."""
    pass
