"""
Audit Logger

DESIGN DECISION: Sign-ups, logins, portfolio edits, zakat runs and bank
links each leave one audit event behind, tagged with a correlation ID
when the console supplies one.

Events go to the structured log first. When a JSONL trail is configured
they are appended there too; a failed append is logged and never reaches
the caller.
"""

import logging
from pathlib import Path
from typing import Optional
from uuid import UUID, uuid4

import structlog

from investwise.models.audit import AuditEvent, AuditEventBuilder
from investwise.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Route structured logs to a file (or stderr when no file is given).

    The console UI owns stdout, so log lines never go there.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)


class AuditLogger:
    """
    Writes audit events to the structured log and, optionally, to an
    append-only trail.
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("investwise.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_user_registered(
        self,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.user_registered(username, correlation_id))

    async def log_login_succeeded(
        self,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.login_succeeded(username, correlation_id))

    async def log_login_failed(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.login_failed(correlation_id))

    async def log_logged_out(
        self,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.logged_out(username, correlation_id))

    async def log_asset_added(
        self,
        username: str,
        index: int,
        kind: str,
        quantity: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new holding."""
        event = AuditEventBuilder.asset_added(
            username=username,
            index=index,
            kind=kind,
            quantity=quantity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_asset_updated(
        self,
        username: str,
        index: int,
        kind: str,
        old_quantity: float,
        new_quantity: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a quantity edit."""
        event = AuditEventBuilder.asset_updated(
            username=username,
            index=index,
            kind=kind,
            old_quantity=old_quantity,
            new_quantity=new_quantity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_asset_removed(
        self,
        username: str,
        index: int,
        kind: str,
        quantity: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a removal."""
        event = AuditEventBuilder.asset_removed(
            username=username,
            index=index,
            kind=kind,
            quantity=quantity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_zakat_calculated(
        self,
        username: str,
        total_value: float,
        zakat_due: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.zakat_calculated(
            username=username,
            total_value=total_value,
            zakat_due=zakat_due,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_zakat_report_exported(
        self,
        username: str,
        path: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.zakat_report_exported(
            username=username,
            path=path,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_bank_linked(
        self,
        username: str,
        bank_name: str,
        masked_card: str,
        replaced_previous: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a bank link (masked card only)."""
        event = AuditEventBuilder.bank_linked(
            username=username,
            bank_name=bank_name,
            masked_card=masked_card,
            replaced_previous=replaced_previous,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_load_failed(
        self,
        snapshot: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.snapshot_load_failed(
            snapshot=snapshot,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_save_failed(
        self,
        snapshot: str,
        error_message: str,
        username: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.snapshot_save_failed(
            snapshot=snapshot,
            error_message=error_message,
            username=username,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new console action (e.g., Add Asset).
    Pass it through all subsequent operations.
    """
    return uuid4()
