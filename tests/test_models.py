"""
Tests for InvestWise

Test strategy:
1. Unit tests for individual components (models, validators, calculator)
2. Service tests against in-memory storage
3. Console scenarios driven by scripted input
"""

import pytest
from pydantic import ValidationError

from investwise.models.account import (
    BankAccount,
    User,
    obfuscate_card_number,
    reveal_card_number,
)
from investwise.models.asset import UNIT_PRICES, Asset, AssetKind, unit_price, value
from investwise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from investwise.models.portfolio import IndexOutOfRangeError, Portfolio
from investwise.models.state import AppState


class TestAssetValuation:
    """Tests for the fixed-price valuation table."""

    def test_unit_prices(self):
        """Test the exact unit price of each kind."""
        assert unit_price(AssetKind.STOCK) == 150
        assert unit_price(AssetKind.REAL_ESTATE) == 250000
        assert unit_price(AssetKind.CRYPTO) == 50000
        assert unit_price(AssetKind.GOLD) == 1800

    def test_price_table_covers_every_kind(self):
        """Test that no kind is missing a price."""
        assert set(UNIT_PRICES) == set(AssetKind)

    @pytest.mark.parametrize("kind", list(AssetKind))
    @pytest.mark.parametrize("quantity", [0.5, 1, 3.25, 1000])
    def test_value_is_quantity_times_price(self, kind, quantity):
        """Test value == quantity * unit price, exactly."""
        assert value(kind, quantity) == quantity * UNIT_PRICES[kind]

    def test_value_accepts_kind_string(self):
        """Test that the enum value string works as a kind."""
        assert value("GOLD", 2) == 3600

    def test_unknown_kind_is_rejected(self):
        """Test that an unknown kind raises instead of valuing at zero."""
        with pytest.raises(ValueError):
            unit_price("BONDS")

    def test_kind_label(self):
        assert AssetKind.REAL_ESTATE.label == "Real Estate"


class TestAssetModel:
    """Tests for the Asset model."""

    def test_asset_creation(self):
        """Test Asset model creation and value."""
        asset = Asset(kind=AssetKind.STOCK, quantity=10)
        assert asset.kind == AssetKind.STOCK
        assert asset.value == 1500

    @pytest.mark.parametrize("quantity", [0, -1, float("inf"), float("nan")])
    def test_asset_rejects_bad_quantity(self, quantity):
        """Test that quantity must be a positive finite number."""
        with pytest.raises(ValidationError):
            Asset(kind=AssetKind.GOLD, quantity=quantity)

    def test_asset_quantity_edit_is_validated(self):
        """Test that assigning a non-positive quantity fails and keeps the old one."""
        asset = Asset(kind=AssetKind.GOLD, quantity=2)
        with pytest.raises(ValidationError):
            asset.quantity = 0
        assert asset.quantity == 2

    def test_asset_kind_is_immutable(self):
        """Test that the kind cannot change after creation."""
        asset = Asset(kind=AssetKind.GOLD, quantity=2)
        with pytest.raises(ValidationError):
            asset.kind = AssetKind.CRYPTO
        assert asset.kind == AssetKind.GOLD


class TestPortfolio:
    """Tests for ordered portfolio operations."""

    @pytest.fixture
    def portfolio(self):
        portfolio = Portfolio(username="alice")
        portfolio.add(AssetKind.STOCK, 10)
        portfolio.add(AssetKind.GOLD, 2)
        return portfolio

    def test_empty_portfolio(self):
        """Test an empty portfolio lists nothing and totals zero."""
        portfolio = Portfolio(username="alice")
        assert portfolio.list_entries() == []
        assert portfolio.total_value() == 0

    def test_add_and_total(self, portfolio):
        """Test Stock x10 + Gold x2 totals 5100."""
        entries = portfolio.list_entries()
        assert [e.index for e in entries] == [0, 1]
        assert entries[0].value == 1500
        assert entries[1].value == 3600
        assert portfolio.total_value() == 5100

    def test_add_same_kind_twice_keeps_two_entries(self, portfolio):
        """Test there is no de-duplication."""
        portfolio.add(AssetKind.STOCK, 1)
        kinds = [e.asset.kind for e in portfolio.list_entries()]
        assert kinds == [AssetKind.STOCK, AssetKind.GOLD, AssetKind.STOCK]

    def test_edit_recomputes_total(self, portfolio):
        """Test editing index 0 to 20 gives (20*150)+3600."""
        portfolio.edit(0, 20)
        assert portfolio.assets[0].kind == AssetKind.STOCK
        assert portfolio.total_value() == 6600

    def test_remove_shifts_later_entries(self, portfolio):
        """Test removing index 0 leaves Gold at index 0."""
        removed = portfolio.remove(0)
        assert removed.kind == AssetKind.STOCK
        assert len(portfolio) == 1
        assert portfolio.assets[0].kind == AssetKind.GOLD
        assert portfolio.total_value() == 3600

        portfolio.edit(0, 5)
        assert portfolio.assets[0].kind == AssetKind.GOLD
        assert portfolio.assets[0].quantity == 5

    @pytest.mark.parametrize("index", [2, 5, -1])
    def test_edit_out_of_range(self, portfolio, index):
        """Test edit on a bad index fails without mutation."""
        before = portfolio.model_copy(deep=True)
        with pytest.raises(IndexOutOfRangeError):
            portfolio.edit(index, 3)
        assert portfolio == before

    @pytest.mark.parametrize("index", [2, 5, -1])
    def test_remove_out_of_range(self, portfolio, index):
        """Test remove on a bad index fails without mutation."""
        before = portfolio.model_copy(deep=True)
        with pytest.raises(IndexOutOfRangeError):
            portfolio.remove(index)
        assert portfolio == before

    def test_index_error_is_an_index_error(self):
        """Test that IndexOutOfRangeError can be caught as IndexError."""
        with pytest.raises(IndexError, match="portfolio is empty"):
            Portfolio(username="alice").remove(0)

    def test_listing_does_not_expose_live_assets(self, portfolio):
        """Test that listing rows are copies."""
        entry = portfolio.list_entries()[0]
        entry.asset.quantity = 99
        assert portfolio.assets[0].quantity == 10


class TestAccountModels:
    """Tests for users and bank accounts."""

    def test_user_is_immutable(self):
        """Test that users cannot be edited after creation."""
        user = User(
            name="Alice",
            email="alice@example.com",
            username="alice",
            credential_token="token",
        )
        with pytest.raises(ValidationError):
            user.name = "Mallory"

    def test_user_repr_hides_credential(self):
        user = User(
            name="Alice",
            email="alice@example.com",
            username="alice",
            credential_token="secret-token",
        )
        assert "secret-token" not in repr(user)
        assert "email" not in user.to_log_dict()

    def test_card_obfuscation_is_reversible(self):
        """Test the placeholder obfuscation round trip."""
        obfuscated = obfuscate_card_number("1234567812345678")
        assert obfuscated == "ENC-8765432187654321"
        assert "1234567812345678" not in obfuscated
        assert reveal_card_number(obfuscated) == "1234567812345678"

    def test_reveal_rejects_plain_digits(self):
        with pytest.raises(ValueError):
            reveal_card_number("1234567812345678")

    def test_masked_card_number(self):
        """Test that only the last 4 obfuscated characters are shown."""
        account = BankAccount.from_card_number("Test Bank", "1234567812345678")
        assert account.masked_card_number == "---4321"

    def test_masked_card_number_short_value(self):
        """Test that a too-short obfuscated value masks to empty."""
        account = BankAccount(bank_name="Test Bank", obfuscated_card="ENC-1")
        assert account.masked_card_number == ""


class TestAppState:
    """Tests for the top-level stores."""

    def test_portfolio_created_on_first_add(self):
        state = AppState()
        assert "alice" not in state.portfolios
        first = state.add_asset("alice", AssetKind.STOCK, 10)
        portfolio = state.portfolios["alice"]
        state.add_asset("alice", AssetKind.GOLD, 2)
        assert state.portfolios["alice"] is portfolio
        assert portfolio.assets[0] is first
        assert portfolio.total_value() == 5100

    def test_invalid_add_creates_no_portfolio(self):
        state = AppState()
        with pytest.raises(ValidationError):
            state.add_asset("alice", AssetKind.STOCK, 0)
        assert state.portfolios == {}

    def test_invalid_add_leaves_existing_portfolio_alone(self):
        state = AppState()
        state.add_asset("alice", AssetKind.STOCK, 10)
        with pytest.raises(ValidationError):
            state.add_asset("alice", AssetKind.GOLD, -1)
        assert [a.kind for a in state.portfolios["alice"].assets] == [AssetKind.STOCK]


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ASSET_ADDED,
            description="Asset added",
        )
        assert event.event_type == AuditEventType.ASSET_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.asset_added("alice", 0, "GOLD", 2.0)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "asset_added"
        assert log_dict["username"] == "alice"
        assert log_dict["details"]["kind"] == "GOLD"
        assert log_dict["is_user_action"] is True

    def test_login_failed_does_not_name_user(self):
        """Test that failed logins do not record the attempted username."""
        event = AuditEventBuilder.login_failed()
        assert event.username is None
        assert event.severity == AuditSeverity.WARNING

    def test_bank_linked_carries_masked_card_only(self):
        event = AuditEventBuilder.bank_linked("alice", "Test Bank", "---4321", False)
        assert event.details == {
            "bank_name": "Test Bank",
            "masked_card": "---4321",
            "replaced_previous": False,
        }

    def test_snapshot_save_failed_is_error(self):
        event = AuditEventBuilder.snapshot_save_failed("users.json", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
