"""
Bank Link Service

Records which bank card a user has "connected". There is no bank API:
the OTP is only format-checked by the console and the verification step
is a fixed delay.

The delay is an asyncio sleep, so cancelling it (Ctrl+C, task cancel)
abandons the link before anything is recorded.
"""

import asyncio
from typing import Optional
from uuid import UUID

import structlog

from investwise.audit import AuditLogger
from investwise.config import BankSettings, get_settings
from investwise.models.account import BankAccount
from investwise.models.state import AppState
from investwise.services.base import SnapshotBackedService
from investwise.services.storage import SnapshotStorageInterface


logger = structlog.get_logger(__name__)


class BankLinkService(SnapshotBackedService):
    """Links a bank card to a user, replacing any previous link."""

    def __init__(
        self,
        state: AppState,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[BankSettings] = None,
    ):
        super().__init__(state, storage, audit_logger)
        self._settings = settings or get_settings().bank

    def get(self, username: str) -> Optional[BankAccount]:
        return self._state.bank_accounts.get(username)

    async def _verify_otp(self, otp: str) -> None:
        # Simulated round trip to the bank; the OTP is never checked
        logger.debug("bank_otp_verification_started", otp_length=len(otp))
        await asyncio.sleep(self._settings.verification_delay_seconds)

    async def link(
        self,
        username: str,
        bank_name: str,
        card_number: str,
        otp: str,
        correlation_id: Optional[UUID] = None,
    ) -> BankAccount:
        """
        Record a bank link for `username` (last write wins).

        Raises:
            asyncio.CancelledError: If cancelled during verification (nothing recorded)
            PersistenceError: If the snapshot save fails (link stays in memory)
        """
        await self._verify_otp(otp)

        account = BankAccount.from_card_number(bank_name, card_number)
        replaced = username in self._state.bank_accounts
        self._state.bank_accounts[username] = account

        await self._audit_logger.log_bank_linked(
            username=username,
            bank_name=account.bank_name,
            masked_card=account.masked_card_number,
            replaced_previous=replaced,
            correlation_id=correlation_id,
        )
        await self._persist(username, correlation_id)
        return account
