"""
Asset Models and Valuation for InvestWise

Valuation is deliberately simple: every asset kind has one fixed unit
price and the value of a holding is quantity times that price. There is
no price feed.

DESIGN DECISION: The price table must cover the AssetKind enum exactly.
It is checked when this module is imported, so adding a kind without a
price fails loudly at startup instead of valuing the holding at zero.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AssetKind(str, Enum):
    """
    Supported asset kinds.

    Values double as the names the operator types at the prompt.
    """
    STOCK = "STOCK"
    REAL_ESTATE = "REAL_ESTATE"
    CRYPTO = "CRYPTO"
    GOLD = "GOLD"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'Real Estate'."""
        return self.value.replace("_", " ").title()


# =============================================================================
# PRICE TABLE
# =============================================================================

UNIT_PRICES: dict[AssetKind, float] = {
    AssetKind.STOCK: 150.0,         # Average stock price
    AssetKind.REAL_ESTATE: 250000.0,  # Average property value
    AssetKind.CRYPTO: 50000.0,      # Average coin price
    AssetKind.GOLD: 1800.0,         # Per ounce
}


def _check_price_table() -> None:
    missing = set(AssetKind) - set(UNIT_PRICES)
    unknown = set(UNIT_PRICES) - set(AssetKind)
    if missing or unknown:
        raise RuntimeError(
            f"Unit price table out of sync with AssetKind "
            f"(missing: {sorted(k.value for k in missing)}, "
            f"unknown: {sorted(str(k) for k in unknown)})"
        )


_check_price_table()


def unit_price(kind: Union[AssetKind, str]) -> float:
    """
    Fixed per-unit price for an asset kind.

    Raises:
        ValueError: If kind is not one of the AssetKind values
    """
    return UNIT_PRICES[AssetKind(kind)]


def value(kind: Union[AssetKind, str], quantity: float) -> float:
    """Monetary value of `quantity` units of `kind`."""
    return quantity * unit_price(kind)


# =============================================================================
# HOLDING MODEL
# =============================================================================

class Asset(BaseModel):
    """
    A single holding in a portfolio.

    INVARIANT: quantity is strictly positive, both when the asset is
    created and whenever it is edited. Removing the holding is the only
    way to get rid of it.
    """
    model_config = ConfigDict(validate_assignment=True)

    kind: AssetKind = Field(
        ...,
        frozen=True,
        description="Asset kind (immutable once created)"
    )
    quantity: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Units held"
    )

    @property
    def value(self) -> float:
        """Current value of this holding at the fixed unit price."""
        return value(self.kind, self.quantity)
