"""
Zakat Calculator

Zakat is a fixed 2.5% levy on the total value of the portfolio.
The rate is a domain constant, not a setting.

The calculation is a pure function of the portfolio aggregate. The report
wraps that number with the per-asset summary the console shows, and can
be written out as plain text.
"""

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from investwise.models.asset import AssetKind
from investwise.models.portfolio import Portfolio


ZAKAT_RATE = 0.025


def zakat_due(total_value: float) -> float:
    """
    Zakat owed on `total_value`.

    Raises:
        ValueError: If total_value is negative
    """
    if total_value < 0:
        raise ValueError(f"Total value cannot be negative: {total_value}")
    return total_value * ZAKAT_RATE


def format_money(amount: float, symbol: str = "$") -> str:
    """Format as e.g. '$1,234.50'."""
    return f"{symbol}{amount:,.2f}"


class ZakatReportLine(BaseModel):
    """Per-holding line of a zakat report."""

    kind: AssetKind
    quantity: float
    value: float


class ZakatReport(BaseModel):
    """
    Summary of one zakat calculation.

    An empty report (no holdings) has a total and levy of zero; the
    console shows "nothing to calculate" instead of displaying it.
    """

    username: str
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    lines: list[ZakatReportLine] = Field(default_factory=list)
    total_value: float = Field(ge=0)
    zakat_due: float = Field(ge=0)
    rate: float = ZAKAT_RATE

    @classmethod
    def from_portfolio(cls, portfolio: Portfolio) -> 'ZakatReport':
        lines = [
            ZakatReportLine(kind=a.kind, quantity=a.quantity, value=a.value)
            for a in portfolio.assets
        ]
        total = portfolio.total_value()
        return cls(
            username=portfolio.username,
            lines=lines,
            total_value=total,
            zakat_due=zakat_due(total),
        )

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_text(self, symbol: str = "$") -> str:
        """Render the report the way the console prints it."""
        out = [
            f"Zakat Report for {self.username}",
            f"Generated: {self.generated_at.strftime('%Y-%m-%d %H:%M UTC')}",
            "",
            "Asset Summary:",
        ]
        for line in self.lines:
            out.append(f"- {line.kind.value}: {format_money(line.value, symbol)}")
        out.append("")
        out.append(f"Total Value: {format_money(self.total_value, symbol)}")
        out.append(f"Zakat Due ({self.rate:.1%}): {format_money(self.zakat_due, symbol)}")
        return "\n".join(out)

    def export(self, directory: Path, symbol: str = "$") -> Path:
        """
        Write the report as a text file in `directory` and return its path.

        Raises:
            OSError: If the file cannot be written
        """
        directory.mkdir(parents=True, exist_ok=True)
        stamp = self.generated_at.strftime("%Y%m%d-%H%M%S")
        path = directory / f"zakat_{self.username}_{stamp}.txt"
        path.write_text(self.to_text(symbol) + "\n", encoding="utf-8")
        return path
