"""Shared fixtures for the InvestWise tests."""

import pytest

from investwise.audit import AuditLogger
from investwise.config import (
    AppSettings,
    BankSettings,
    SecuritySettings,
    Settings,
    StorageSettings,
)
from investwise.models.state import AppState
from investwise.services.accounts import CredentialHasher
from investwise.services.storage import InMemorySnapshotStorage


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a temp dir, with cheap hashing and no bank delay."""
    return Settings(
        storage=StorageSettings(data_dir=tmp_path, save_retry_attempts=1),
        security=SecuritySettings(hash_rounds=1000),
        bank=BankSettings(verification_delay_seconds=0),
        app=AppSettings(),
    )


@pytest.fixture
def hasher(settings):
    return CredentialHasher(settings.security)


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def storage():
    return InMemorySnapshotStorage()


@pytest.fixture
def audit_logger():
    return AuditLogger()


def scripted_input(answers):
    """input() replacement that replays `answers`, then signals EOF."""
    remaining = iter(answers)

    def _input(prompt: str = "") -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return _input


@pytest.fixture
def scripted():
    return scripted_input
