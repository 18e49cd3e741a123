"""
Portfolio Model

A portfolio is an ordered list of holdings owned by one user.

DESIGN DECISION: Entries are addressed by their zero-based position.
Positions shift down after a removal, so callers must re-list before
addressing entries again. That is fine for a console tool with one
operator; concurrent access would need stable identifiers instead.
"""

from pydantic import BaseModel, ConfigDict, Field

from investwise.models.asset import Asset, AssetKind


class IndexOutOfRangeError(IndexError):
    """An edit or remove addressed a position that does not exist."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        if size == 0:
            message = f"Asset index {index} is out of range (portfolio is empty)"
        else:
            message = f"Asset index {index} is out of range (valid: 0-{size - 1})"
        super().__init__(message)


class PortfolioEntry(BaseModel):
    """One row of a portfolio listing."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    asset: Asset
    value: float


class Portfolio(BaseModel):
    """
    Ordered sequence of holdings for one username.

    Insertion order is preserved and is what `list_entries` indexes.
    Adding the same kind twice gives two separate entries.
    """

    username: str = Field(
        ...,
        min_length=1,
        description="Owning username"
    )
    assets: list[Asset] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.assets)

    def _check_index(self, index: int) -> None:
        # Negative positions are rejected rather than wrapped around
        if not 0 <= index < len(self.assets):
            raise IndexOutOfRangeError(index, len(self.assets))

    def get(self, index: int) -> Asset:
        self._check_index(index)
        return self.assets[index]

    def add(self, kind: AssetKind, quantity: float) -> Asset:
        """Append a new holding and return it."""
        asset = Asset(kind=kind, quantity=quantity)
        self.assets.append(asset)
        return asset

    def list_entries(self) -> list[PortfolioEntry]:
        return [
            PortfolioEntry(index=i, asset=asset.model_copy(), value=asset.value)
            for i, asset in enumerate(self.assets)
        ]

    def total_value(self) -> float:
        return sum((asset.value for asset in self.assets), 0.0)

    def edit(self, index: int, new_quantity: float) -> Asset:
        """
        Replace the quantity of the holding at `index`.

        Raises:
            IndexOutOfRangeError: If index is not a current position
            pydantic.ValidationError: If new_quantity is not positive
        """
        asset = self.get(index)
        asset.quantity = new_quantity
        return asset

    def remove(self, index: int) -> Asset:
        """Delete and return the holding at `index`."""
        self._check_index(index)
        return self.assets.pop(index)
