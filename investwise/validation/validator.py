"""
Operator Input Validation

Everything the console reads goes through here before it reaches the
services. Each check either returns the cleaned value or raises
InputValidationError carrying a ValidationIssue, so the console can show
the message and re-prompt.

IMPORTANT: Validation NEVER silently fixes values beyond trimming
whitespace. Anything else is reported back to the operator.
"""

import math
import re
from collections.abc import Container
from typing import Optional

from investwise.models.account import (
    MAX_BANK_NAME_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_USERNAME_LENGTH,
)
from investwise.models.asset import AssetKind
from investwise.models.validation import ValidationIssue


EMAIL_PATTERN = re.compile(r"^[\w.-]+@([\w-]+\.)+[\w-]{2,4}$")
CARD_NUMBER_PATTERN = re.compile(r"^\d{16}$")
OTP_PATTERN = re.compile(r"^\d{6}$")

MIN_PASSWORD_LENGTH = 8
CANCEL_INDEX = -1


class InputValidationError(ValueError):
    """Operator input failed a format check."""

    def __init__(self, issue: ValidationIssue):
        self.issue = issue
        super().__init__(issue.message)


def _fail(
    field: str,
    issue_type: str,
    message: str,
    suggested_fix: Optional[str] = None,
) -> InputValidationError:
    return InputValidationError(ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        suggested_fix=suggested_fix,
    ))


class InputValidator:
    """
    Format checks for console input.

    Uniqueness of usernames is checked here against the registry so the
    console can re-prompt before collecting the rest of the sign-up form.
    The registry still enforces it again on register().
    """

    def non_empty(self, raw: str, field: str = "input", max_length: Optional[int] = None) -> str:
        value = raw.strip()
        label = field.replace('_', ' ').capitalize()
        if not value:
            raise _fail(field, "missing", f"{label} cannot be empty.")
        if max_length is not None and len(value) > max_length:
            raise _fail(
                field,
                "too_long",
                f"{label} must be at most {max_length} characters.",
                suggested_fix=f"Shorten it by {len(value) - max_length} characters",
            )
        return value

    def username(self, raw: str, existing: Container[str] = ()) -> str:
        value = self.non_empty(raw, "username", MAX_USERNAME_LENGTH)
        if value in existing:
            raise _fail(
                "username",
                "duplicate",
                "Username already exists.",
                suggested_fix="Please choose another username",
            )
        return value

    def name(self, raw: str) -> str:
        return self.non_empty(raw, "name", MAX_NAME_LENGTH)

    def bank_name(self, raw: str) -> str:
        return self.non_empty(raw, "bank_name", MAX_BANK_NAME_LENGTH)

    def email(self, raw: str) -> str:
        value = raw.strip()
        if len(value) > MAX_EMAIL_LENGTH:
            raise _fail(
                "email",
                "too_long",
                f"Email must be at most {MAX_EMAIL_LENGTH} characters.",
            )
        if not value or not EMAIL_PATTERN.match(value):
            raise _fail(
                "email",
                "invalid_format",
                "Invalid email format.",
                suggested_fix="Use the form name@example.com",
            )
        return value

    def password(self, raw: str) -> str:
        # Passwords are taken verbatim so login compares the same string
        if len(raw) < MIN_PASSWORD_LENGTH:
            raise _fail(
                "password",
                "too_short",
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
            )
        return raw

    def asset_kind(self, raw: str) -> AssetKind:
        key = re.sub(r"[\s-]+", "_", raw.strip()).upper()
        try:
            return AssetKind(key)
        except ValueError:
            choices = ", ".join(kind.value for kind in AssetKind)
            raise _fail(
                "asset_kind",
                "invalid_choice",
                "Invalid asset type.",
                suggested_fix=f"Please choose from: {choices}",
            ) from None

    def positive_quantity(self, raw: str, field: str = "quantity") -> float:
        try:
            value = float(raw.strip())
        except ValueError:
            raise _fail(field, "invalid_format", "Please enter a valid number.") from None
        if not math.isfinite(value):
            raise _fail(field, "invalid_format", "Please enter a valid number.")
        if value <= 0:
            raise _fail(field, "invalid_value", "Value must be positive.")
        return value

    def asset_index(self, raw: str, size: int) -> Optional[int]:
        """
        Parse a portfolio position.

        Returns None when the operator entered -1 to cancel.
        """
        try:
            index = int(raw.strip())
        except ValueError:
            raise _fail("index", "invalid_format", "Please enter a valid number.") from None
        if index == CANCEL_INDEX:
            return None
        if not 0 <= index < size:
            raise _fail("index", "out_of_range", "Invalid index. Please try again.")
        return index

    def card_number(self, raw: str) -> str:
        value = re.sub(r"\s+", "", raw)
        if not CARD_NUMBER_PATTERN.match(value):
            raise _fail(
                "card_number",
                "invalid_format",
                "Invalid card number. Must be 16 digits.",
            )
        return value

    def otp(self, raw: str) -> str:
        value = raw.strip()
        if not OTP_PATTERN.match(value):
            raise _fail("otp", "invalid_format", "Invalid OTP. Must be 6 digits.")
        return value

    def menu_choice(self, raw: str, options: int) -> int:
        try:
            choice = int(raw.strip())
        except ValueError:
            raise _fail("choice", "invalid_format", "Please enter a valid number.") from None
        if not 1 <= choice <= options:
            raise _fail("choice", "invalid_choice", "Invalid option. Please try again.")
        return choice


def format_issue(issue: ValidationIssue) -> str:
    """One or two lines the console prints for a failed check."""
    lines = [f"❌ {issue.message}"]
    if issue.suggested_fix:
        lines.append(f"   💡 {issue.suggested_fix}")
    return "\n".join(lines)
