"""
Write-through persistence shared by the domain services.

Every successful mutation is followed by a full snapshot save. If the
save fails the in-memory change stays in place, the failure is audited,
and PersistenceError is raised so the caller can warn the operator.
Memory and disk then differ until the next successful save.
"""

from typing import Optional
from uuid import UUID

from investwise.audit import AuditLogger
from investwise.models.state import AppState
from investwise.services.storage import PersistenceError, SnapshotStorageInterface


class SnapshotBackedService:
    """Base for services that mutate AppState and write it through."""

    def __init__(
        self,
        state: AppState,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._state = state
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def state(self) -> AppState:
        return self._state

    async def _persist(
        self,
        username: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        try:
            await self._storage.save_state(self._state)
        except PersistenceError as e:
            await self._audit_logger.log_snapshot_save_failed(
                snapshot=e.snapshot,
                error_message=str(e),
                username=username,
                correlation_id=correlation_id,
            )
            raise
