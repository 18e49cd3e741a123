"""Zakat calculation package."""

from investwise.zakat.calculator import (
    ZAKAT_RATE,
    ZakatReport,
    ZakatReportLine,
    format_money,
    zakat_due,
)

__all__ = [
    "ZAKAT_RATE",
    "ZakatReport",
    "ZakatReportLine",
    "format_money",
    "zakat_due",
]
