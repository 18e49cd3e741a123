"""Tests for console input validation."""

import pytest

from investwise.models.account import (
    MAX_BANK_NAME_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_USERNAME_LENGTH,
    BankAccount,
    User,
)
from investwise.models.asset import AssetKind
from investwise.validation import InputValidationError, InputValidator, format_issue


@pytest.fixture
def validator():
    return InputValidator()


class TestAccountInput:

    def test_username_trimmed(self, validator):
        assert validator.username("  alice  ") == "alice"

    def test_username_empty(self, validator):
        with pytest.raises(InputValidationError) as exc:
            validator.username("   ")
        assert exc.value.issue.field == "username"
        assert exc.value.issue.issue_type == "missing"

    def test_username_taken(self, validator):
        with pytest.raises(InputValidationError) as exc:
            validator.username("alice", existing={"alice"})
        assert exc.value.issue.issue_type == "duplicate"

    @pytest.mark.parametrize("email", [
        "alice@example.com",
        "a.b-c@mail.example.org",
        "user_1@domain.io",
    ])
    def test_valid_email(self, validator, email):
        assert validator.email(f"  {email} ") == email

    @pytest.mark.parametrize("email", [
        "",
        "alice",
        "alice@",
        "@example.com",
        "alice@example",
        "alice@example.c",
        "alice@example.toolong",
    ])
    def test_invalid_email(self, validator, email):
        with pytest.raises(InputValidationError):
            validator.email(email)

    def test_password_length(self, validator):
        assert validator.password("12345678") == "12345678"
        with pytest.raises(InputValidationError, match="at least 8"):
            validator.password("1234567")

    def test_password_kept_verbatim(self, validator):
        assert validator.password(" pass word ") == " pass word "


class TestAssetInput:

    @pytest.mark.parametrize("raw,expected", [
        ("STOCK", AssetKind.STOCK),
        ("gold", AssetKind.GOLD),
        (" crypto ", AssetKind.CRYPTO),
        ("real_estate", AssetKind.REAL_ESTATE),
        ("Real Estate", AssetKind.REAL_ESTATE),
        ("real-estate", AssetKind.REAL_ESTATE),
    ])
    def test_asset_kind(self, validator, raw, expected):
        assert validator.asset_kind(raw) == expected

    def test_unknown_asset_kind(self, validator):
        with pytest.raises(InputValidationError) as exc:
            validator.asset_kind("bonds")
        assert "STOCK, REAL_ESTATE, CRYPTO, GOLD" in exc.value.issue.suggested_fix

    @pytest.mark.parametrize("raw,expected", [("10", 10.0), (" 0.5 ", 0.5), ("1e3", 1000.0)])
    def test_positive_quantity(self, validator, raw, expected):
        assert validator.positive_quantity(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "-2", "abc", "", "inf", "nan"])
    def test_bad_quantity(self, validator, raw):
        with pytest.raises(InputValidationError):
            validator.positive_quantity(raw)

    def test_asset_index(self, validator):
        assert validator.asset_index("1", size=2) == 1

    def test_asset_index_cancel(self, validator):
        assert validator.asset_index("-1", size=2) is None

    @pytest.mark.parametrize("raw", ["2", "-2", "x"])
    def test_asset_index_invalid(self, validator, raw):
        with pytest.raises(InputValidationError):
            validator.asset_index(raw, size=2)


class TestBankInput:

    def test_card_number_strips_spaces(self, validator):
        assert validator.card_number("1234 5678 1234 5678") == "1234567812345678"

    @pytest.mark.parametrize("raw", ["123456781234567", "12345678123456789", "1234abcd12345678"])
    def test_bad_card_number(self, validator, raw):
        with pytest.raises(InputValidationError, match="16 digits"):
            validator.card_number(raw)

    def test_otp(self, validator):
        assert validator.otp(" 123456 ") == "123456"

    @pytest.mark.parametrize("raw", ["12345", "1234567", "12a456"])
    def test_bad_otp(self, validator, raw):
        with pytest.raises(InputValidationError, match="6 digits"):
            validator.otp(raw)

    def test_bank_name_required(self, validator):
        with pytest.raises(InputValidationError, match="Bank name cannot be empty"):
            validator.non_empty("  ", "bank_name")


class TestMenuChoice:

    def test_valid_choice(self, validator):
        assert validator.menu_choice("2", options=3) == 2

    @pytest.mark.parametrize("raw", ["0", "4", "two"])
    def test_invalid_choice(self, validator, raw):
        with pytest.raises(InputValidationError):
            validator.menu_choice(raw, options=3)


def test_format_issue_includes_fix(validator):
    with pytest.raises(InputValidationError) as exc:
        validator.email("nope")
    text = format_issue(exc.value.issue)
    assert "Invalid email format." in text
    assert "name@example.com" in text


class TestLengthLimits:
    """Console checks accept exactly what the account models accept."""

    def test_username_at_limit(self, validator):
        assert validator.username("u" * MAX_USERNAME_LENGTH) == "u" * MAX_USERNAME_LENGTH

    def test_username_over_limit(self, validator):
        with pytest.raises(InputValidationError) as exc:
            validator.username("u" * (MAX_USERNAME_LENGTH + 1))
        assert exc.value.issue.issue_type == "too_long"

    def test_name_over_limit(self, validator):
        assert validator.name("n" * MAX_NAME_LENGTH) == "n" * MAX_NAME_LENGTH
        with pytest.raises(InputValidationError, match="at most 200"):
            validator.name("n" * (MAX_NAME_LENGTH + 1))

    def test_bank_name_over_limit(self, validator):
        assert validator.bank_name(" Test Bank ") == "Test Bank"
        with pytest.raises(InputValidationError, match="Bank name must be at most"):
            validator.bank_name("B" * (MAX_BANK_NAME_LENGTH + 1))

    def test_email_over_limit(self, validator):
        at_limit = "a" * (MAX_EMAIL_LENGTH - len("@example.com")) + "@example.com"
        assert validator.email(at_limit) == at_limit
        with pytest.raises(InputValidationError) as exc:
            validator.email("a" + at_limit)
        assert exc.value.issue.issue_type == "too_long"

    def test_accepted_values_build_models(self, validator):
        user = User(
            name=validator.name("n" * MAX_NAME_LENGTH),
            email=validator.email("a" * (MAX_EMAIL_LENGTH - 12) + "@example.com"),
            username=validator.username("u" * MAX_USERNAME_LENGTH),
            credential_token="token",
        )
        assert len(user.username) == MAX_USERNAME_LENGTH
        account = BankAccount.from_card_number(
            validator.bank_name("B" * MAX_BANK_NAME_LENGTH),
            validator.card_number("1234567812345678"),
        )
        assert account.masked_card_number == "---4321"
