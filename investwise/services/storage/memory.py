"""
In-Memory Storage Implementation

Keeps serialized snapshots in a dict instead of on disk. Used by tests
and by `--no-persist` runs. Snapshots are stored as JSON bytes so a
load returns fresh objects, the same as reading a file would.
"""

from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from investwise.models.account import BankAccount, User
from investwise.models.portfolio import Portfolio
from investwise.services.storage.interface import (
    PersistenceError,
    SnapshotCorruptError,
    SnapshotStorageInterface,
)
from investwise.services.storage.json_files import (
    BANK_ACCOUNTS_ADAPTER,
    PORTFOLIOS_ADAPTER,
    USERS_ADAPTER,
)


T = TypeVar("T")


class InMemorySnapshotStorage(SnapshotStorageInterface):
    """
    Snapshot storage backed by a dict of JSON payloads.

    Set `fail_saves` to make every save raise PersistenceError.
    """

    def __init__(self, fail_saves: bool = False):
        self.snapshots: dict[str, bytes] = {}
        self.fail_saves = fail_saves
        self.save_count = 0

    def _load(self, name: str, adapter: TypeAdapter[T]) -> T:
        try:
            return adapter.validate_json(self.snapshots.get(name, b"{}"))
        except ValidationError as e:
            raise SnapshotCorruptError(
                name,
                f"snapshot is not valid ({e.error_count()} errors)",
            ) from e

    def _store(self, name: str, payload: bytes) -> None:
        if self.fail_saves:
            raise PersistenceError(name, "simulated write failure")
        self.snapshots[name] = payload
        self.save_count += 1

    async def load_users(self) -> dict[str, User]:
        return self._load("users", USERS_ADAPTER)

    async def save_users(self, users: dict[str, User]) -> None:
        self._store("users", USERS_ADAPTER.dump_json(users))

    async def load_portfolios(self) -> dict[str, Portfolio]:
        return self._load("portfolios", PORTFOLIOS_ADAPTER)

    async def save_portfolios(self, portfolios: dict[str, Portfolio]) -> None:
        self._store("portfolios", PORTFOLIOS_ADAPTER.dump_json(portfolios))

    async def load_bank_accounts(self) -> dict[str, BankAccount]:
        return self._load("bank_accounts", BANK_ACCOUNTS_ADAPTER)

    async def save_bank_accounts(self, bank_accounts: dict[str, BankAccount]) -> None:
        self._store("bank_accounts", BANK_ACCOUNTS_ADAPTER.dump_json(bank_accounts))
