"""
Audit Models for InvestWise

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every change to a portfolio or account
2. Debugging information when a snapshot fails to load or save
3. A history the user can inspect after the fact

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
Passwords, emails and card digits never go into an event.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    USER_REGISTERED = "user_registered"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGGED_OUT = "logged_out"

    # Portfolio
    ASSET_ADDED = "asset_added"
    ASSET_UPDATED = "asset_updated"
    ASSET_REMOVED = "asset_removed"

    # Zakat
    ZAKAT_CALCULATED = "zakat_calculated"
    ZAKAT_REPORT_EXPORTED = "zakat_report_exported"

    # Bank
    BANK_LINKED = "bank_linked"

    # Persistence
    SNAPSHOT_LOAD_FAILED = "snapshot_load_failed"
    SNAPSHOT_SAVE_FAILED = "snapshot_save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who and what
    username: Optional[str] = Field(
        default=None,
        description="User the event concerns, if any"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'asset', 'user', 'snapshot')"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events from one console action"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by the operator?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "entity_type": self.entity_type,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_json_line(self) -> str:
        """Single-line JSON for the append-only audit file."""
        return json.dumps(self.to_log_dict(), sort_keys=True)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered("alice", correlation_id)
        event = AuditEventBuilder.asset_added("alice", 0, "GOLD", 2.0, correlation_id)
    """

    @staticmethod
    def user_registered(
        username: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            username=username,
            entity_type="user",
            correlation_id=correlation_id,
            description=f"User registered: {username}",
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(
        username: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            username=username,
            entity_type="user",
            correlation_id=correlation_id,
            description=f"Login succeeded: {username}",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        # The attempted username is left out so the trail does not
        # record which names exist.
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            correlation_id=correlation_id,
            description="Login failed",
            is_user_action=True,
        )

    @staticmethod
    def logged_out(
        username: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGGED_OUT,
            username=username,
            entity_type="user",
            correlation_id=correlation_id,
            description=f"Logged out: {username}",
            is_user_action=True,
        )

    @staticmethod
    def asset_added(
        username: str,
        index: int,
        kind: str,
        quantity: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSET_ADDED,
            username=username,
            entity_type="asset",
            correlation_id=correlation_id,
            description=f"Asset added: {kind} x {quantity}",
            details={
                "index": index,
                "kind": kind,
                "quantity": quantity,
            },
            is_user_action=True,
        )

    @staticmethod
    def asset_updated(
        username: str,
        index: int,
        kind: str,
        old_quantity: float,
        new_quantity: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSET_UPDATED,
            username=username,
            entity_type="asset",
            correlation_id=correlation_id,
            description=f"Asset {index} updated: {kind} {old_quantity} -> {new_quantity}",
            details={
                "index": index,
                "kind": kind,
                "old_quantity": old_quantity,
                "new_quantity": new_quantity,
            },
            is_user_action=True,
        )

    @staticmethod
    def asset_removed(
        username: str,
        index: int,
        kind: str,
        quantity: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ASSET_REMOVED,
            username=username,
            entity_type="asset",
            correlation_id=correlation_id,
            description=f"Asset {index} removed: {kind} x {quantity}",
            details={
                "index": index,
                "kind": kind,
                "quantity": quantity,
            },
            is_user_action=True,
        )

    @staticmethod
    def zakat_calculated(
        username: str,
        total_value: float,
        zakat_due: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ZAKAT_CALCULATED,
            username=username,
            entity_type="portfolio",
            correlation_id=correlation_id,
            description="Zakat calculated",
            details={
                "total_value": total_value,
                "zakat_due": zakat_due,
            },
            is_user_action=True,
        )

    @staticmethod
    def zakat_report_exported(
        username: str,
        path: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ZAKAT_REPORT_EXPORTED,
            username=username,
            entity_type="report",
            correlation_id=correlation_id,
            description="Zakat report exported",
            details={
                "path": path,
            },
            is_user_action=True,
        )

    @staticmethod
    def bank_linked(
        username: str,
        bank_name: str,
        masked_card: str,
        replaced_previous: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BANK_LINKED,
            username=username,
            entity_type="bank_account",
            correlation_id=correlation_id,
            description=f"Bank account linked: {bank_name}",
            details={
                "bank_name": bank_name,
                "masked_card": masked_card,
                "replaced_previous": replaced_previous,
            },
            is_user_action=True,
        )

    @staticmethod
    def snapshot_load_failed(
        snapshot: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Snapshot load failed, starting empty: {snapshot}",
            error_message=error_message,
            details={
                "snapshot": snapshot,
            },
        )

    @staticmethod
    def snapshot_save_failed(
        snapshot: str,
        error_message: str,
        username: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            username=username,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Snapshot save failed: {snapshot}",
            error_message=error_message,
            details={
                "snapshot": snapshot,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
