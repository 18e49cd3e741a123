"""
JSON File Storage Implementation

DESIGN DECISION: Local JSON files are the storage backend because:
1. The app is single-user and runs on one machine
2. No database setup required
3. The files are human-readable if something needs fixing by hand

TRADEOFFS:
- Whole-file overwrite on every save (fine for a personal portfolio)
- No atomic rename: a crash mid-write can leave a corrupt snapshot
- No locking: one process at a time

Serialization goes through pydantic TypeAdapters so field names, float
precision and asset order survive a save/load round trip unchanged.
"""

from pathlib import Path
from typing import Optional, TypeVar

from pydantic import TypeAdapter, ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from investwise.config import StorageSettings, get_settings
from investwise.models.account import BankAccount, User
from investwise.models.portfolio import Portfolio
from investwise.services.storage.interface import (
    PersistenceError,
    SnapshotCorruptError,
    SnapshotStorageInterface,
)


T = TypeVar("T")

USERS_ADAPTER = TypeAdapter(dict[str, User])
PORTFOLIOS_ADAPTER = TypeAdapter(dict[str, Portfolio])
BANK_ACCOUNTS_ADAPTER = TypeAdapter(dict[str, BankAccount])


class JsonSnapshotStorage(SnapshotStorageInterface):
    """
    Stores each top-level map as one JSON file in the data directory.

    Missing files load as empty maps. Writes are retried on transient
    OSErrors before surfacing as PersistenceError.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    @property
    def data_dir(self) -> Path:
        return self._settings.data_dir

    def _read(self, path: Path, adapter: TypeAdapter[T]) -> T:
        if not path.exists():
            return adapter.validate_python({})
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise PersistenceError(path.name, f"could not read snapshot: {e}") from e
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            raise SnapshotCorruptError(
                path.name,
                f"snapshot is not valid ({e.error_count()} errors)",
            ) from e

    def _write(self, path: Path, adapter: TypeAdapter[T], data: T) -> None:
        payload = adapter.dump_json(data, indent=2)
        retrying = Retrying(
            stop=stop_after_attempt(self._settings.save_retry_attempts),
            wait=wait_exponential(multiplier=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_bytes(payload)
        except OSError as e:
            raise PersistenceError(path.name, f"could not write snapshot: {e}") from e

    async def load_users(self) -> dict[str, User]:
        return self._read(self._settings.users_path, USERS_ADAPTER)

    async def save_users(self, users: dict[str, User]) -> None:
        self._write(self._settings.users_path, USERS_ADAPTER, users)

    async def load_portfolios(self) -> dict[str, Portfolio]:
        return self._read(self._settings.portfolios_path, PORTFOLIOS_ADAPTER)

    async def save_portfolios(self, portfolios: dict[str, Portfolio]) -> None:
        self._write(self._settings.portfolios_path, PORTFOLIOS_ADAPTER, portfolios)

    async def load_bank_accounts(self) -> dict[str, BankAccount]:
        return self._read(self._settings.bank_accounts_path, BANK_ACCOUNTS_ADAPTER)

    async def save_bank_accounts(self, bank_accounts: dict[str, BankAccount]) -> None:
        self._write(
            self._settings.bank_accounts_path,
            BANK_ACCOUNTS_ADAPTER,
            bank_accounts,
        )
