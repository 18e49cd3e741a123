"""
Portfolio Service

The per-user portfolio operations the console exposes: add, list,
total, edit, remove. Each mutation is written through to storage.

Positions returned by list_assets() are only valid until the next
remove; the console re-lists before every edit/remove prompt.
"""

from typing import Optional
from uuid import UUID

from investwise.audit import AuditLogger
from investwise.models.asset import Asset, AssetKind
from investwise.models.portfolio import Portfolio, PortfolioEntry
from investwise.models.state import AppState
from investwise.services.base import SnapshotBackedService
from investwise.services.storage import SnapshotStorageInterface
from investwise.zakat import ZakatReport


class PortfolioService(SnapshotBackedService):
    """Portfolio operations scoped to one username."""

    def __init__(
        self,
        username: str,
        state: AppState,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(state, storage, audit_logger)
        self._username = username

    @property
    def username(self) -> str:
        return self._username

    def _portfolio(self) -> Optional[Portfolio]:
        # Reads never create a portfolio; only add() does
        return self._state.portfolios.get(self._username)

    async def add_asset(
        self,
        kind: AssetKind,
        quantity: float,
        correlation_id: Optional[UUID] = None,
    ) -> Asset:
        """
        Append a holding to the end of the portfolio.

        Raises:
            pydantic.ValidationError: If quantity is not positive (nothing added)
            PersistenceError: If the snapshot save fails (asset stays added in memory)
        """
        asset = self._state.add_asset(self._username, kind, quantity)

        await self._audit_logger.log_asset_added(
            username=self._username,
            index=len(self._state.portfolios[self._username]) - 1,
            kind=asset.kind.value,
            quantity=asset.quantity,
            correlation_id=correlation_id,
        )
        await self._persist(self._username, correlation_id)
        return asset

    def list_assets(self) -> list[PortfolioEntry]:
        """Indexed listing; empty when the user has no portfolio yet."""
        portfolio = self._portfolio()
        if portfolio is None:
            return []
        return portfolio.list_entries()

    def total_value(self) -> float:
        portfolio = self._portfolio()
        if portfolio is None:
            return 0.0
        return portfolio.total_value()

    def has_assets(self) -> bool:
        portfolio = self._portfolio()
        return portfolio is not None and len(portfolio) > 0

    async def edit_asset(
        self,
        index: int,
        new_quantity: float,
        correlation_id: Optional[UUID] = None,
    ) -> Asset:
        """
        Replace the quantity of the holding at `index`; the kind is kept.

        Raises:
            IndexOutOfRangeError: If index is not a current position (no mutation)
            pydantic.ValidationError: If new_quantity is not positive (no mutation)
        """
        portfolio = self._portfolio() or Portfolio(username=self._username)
        old_quantity = portfolio.get(index).quantity
        asset = portfolio.edit(index, new_quantity)

        await self._audit_logger.log_asset_updated(
            username=self._username,
            index=index,
            kind=asset.kind.value,
            old_quantity=old_quantity,
            new_quantity=asset.quantity,
            correlation_id=correlation_id,
        )
        await self._persist(self._username, correlation_id)
        return asset

    async def remove_asset(
        self,
        index: int,
        correlation_id: Optional[UUID] = None,
    ) -> Asset:
        """
        Delete the holding at `index`; later holdings move down by one.

        Raises:
            IndexOutOfRangeError: If index is not a current position (no mutation)
        """
        portfolio = self._portfolio() or Portfolio(username=self._username)
        asset = portfolio.remove(index)

        await self._audit_logger.log_asset_removed(
            username=self._username,
            index=index,
            kind=asset.kind.value,
            quantity=asset.quantity,
            correlation_id=correlation_id,
        )
        await self._persist(self._username, correlation_id)
        return asset

    async def zakat_report(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> ZakatReport:
        """Build a zakat report over the current holdings."""
        portfolio = self._portfolio() or Portfolio(username=self._username)
        report = ZakatReport.from_portfolio(portfolio)
        if not report.is_empty:
            await self._audit_logger.log_zakat_calculated(
                username=self._username,
                total_value=report.total_value,
                zakat_due=report.zakat_due,
                correlation_id=correlation_id,
            )
        return report
