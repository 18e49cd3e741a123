"""
Application State

The three top-level stores, each keyed by username. They are
independent: a portfolio or bank link does not depend on the user
record still existing, and nothing cascades.
"""

from pydantic import BaseModel, Field

from investwise.models.account import BankAccount, User
from investwise.models.asset import Asset, AssetKind
from investwise.models.portfolio import Portfolio


class AppState(BaseModel):
    """Everything that is persisted between runs."""

    users: dict[str, User] = Field(default_factory=dict)
    portfolios: dict[str, Portfolio] = Field(default_factory=dict)
    bank_accounts: dict[str, BankAccount] = Field(default_factory=dict)

    def add_asset(self, username: str, kind: AssetKind, quantity: float) -> Asset:
        """
        Append a holding to a user's portfolio.

        The portfolio is created on first use, and only once the holding
        has passed validation.
        """
        portfolio = self.portfolios.get(username) or Portfolio(username=username)
        asset = portfolio.add(kind, quantity)
        self.portfolios.setdefault(username, portfolio)
        return asset
