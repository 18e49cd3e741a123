"""
Data Models Package

This package contains all Pydantic models used in InvestWise.
All data flowing through the system must conform to these schemas.
"""

from investwise.models.account import (
    BankAccount,
    User,
    obfuscate_card_number,
    reveal_card_number,
)
from investwise.models.asset import (
    UNIT_PRICES,
    Asset,
    AssetKind,
    unit_price,
    value,
)
from investwise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from investwise.models.portfolio import (
    IndexOutOfRangeError,
    Portfolio,
    PortfolioEntry,
)
from investwise.models.state import AppState
from investwise.models.validation import ValidationIssue

__all__ = [
    # Asset models
    "UNIT_PRICES",
    "Asset",
    "AssetKind",
    "unit_price",
    "value",
    # Portfolio models
    "IndexOutOfRangeError",
    "Portfolio",
    "PortfolioEntry",
    # Account models
    "BankAccount",
    "User",
    "obfuscate_card_number",
    "reveal_card_number",
    # State
    "AppState",
    # Validation
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
