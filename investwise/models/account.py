"""
Account Models for InvestWise

Users and linked bank accounts.

SECURITY NOTE: The card "obfuscation" below is a reversible placeholder.
It only keeps the literal digits out of the snapshot file and is NOT
encryption. Anyone with the snapshot can recover the card number.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


OBFUSCATION_PREFIX = "ENC-"

# Field limits, shared with the console input checks
MAX_USERNAME_LENGTH = 100
MAX_NAME_LENGTH = 200
MAX_EMAIL_LENGTH = 254
MAX_BANK_NAME_LENGTH = 200


def obfuscate_card_number(card_number: str) -> str:
    """Reversible, NOT secure: prefix plus the digits in reverse order."""
    return OBFUSCATION_PREFIX + card_number[::-1]


def reveal_card_number(obfuscated: str) -> str:
    """Inverse of obfuscate_card_number."""
    if not obfuscated.startswith(OBFUSCATION_PREFIX):
        raise ValueError("Not an obfuscated card number")
    return obfuscated[len(OBFUSCATION_PREFIX):][::-1]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """
    A registered user.

    Created once at sign-up and never edited afterwards.
    The credential token is a salted hash; the password itself is
    never stored.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description="Display name"
    )
    email: str = Field(
        ...,
        min_length=3,
        max_length=MAX_EMAIL_LENGTH,
        description="Contact email"
    )
    username: str = Field(
        ...,
        min_length=1,
        max_length=MAX_USERNAME_LENGTH,
        description="Unique registry key"
    )
    credential_token: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Password-derived credential token"
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        description="When the user signed up"
    )

    def to_log_dict(self) -> dict[str, Any]:
        """Fields that are safe to log (no email, no credential)."""
        return {
            "username": self.username,
            "created_at": self.created_at.isoformat(),
        }


class BankAccount(BaseModel):
    """
    A recorded association between a user and a bank card.

    At most one per user; linking again replaces the previous one.
    This is not a financial integration.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    bank_name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_BANK_NAME_LENGTH,
        description="Bank name as entered"
    )
    obfuscated_card: str = Field(
        ...,
        repr=False,
        description="Reversibly obfuscated card number (NOT encrypted)"
    )
    linked_at: datetime = Field(
        default_factory=_utcnow,
        description="When the link was recorded"
    )

    @classmethod
    def from_card_number(cls, bank_name: str, card_number: str) -> 'BankAccount':
        return cls(
            bank_name=bank_name,
            obfuscated_card=obfuscate_card_number(card_number),
        )

    @property
    def masked_card_number(self) -> str:
        """
        Display-safe form: only the last 4 characters of the obfuscated
        representation, e.g. '---4321'. Empty if the value is too short.
        """
        if len(self.obfuscated_card) < 8:
            return ""
        return "---" + self.obfuscated_card[-4:]
