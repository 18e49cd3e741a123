"""
JSON Lines Audit Storage

The audit trail is a plain append-only file with one JSON object per
line. Lines are never rewritten.
"""

import json
from pathlib import Path
from typing import Optional

from investwise.config import StorageSettings, get_settings
from investwise.models.audit import AuditEvent
from investwise.services.storage.interface import AuditStorageInterface


class JsonLinesAuditStorage(AuditStorageInterface):
    """Appends audit events to `<data_dir>/audit.jsonl`."""

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    @property
    def path(self) -> Path:
        return self._settings.audit_path

    async def append_event(self, event: AuditEvent) -> bool:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(event.to_json_line() + "\n")
        return True

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[dict]:
        if not self.path.exists():
            return []

        events = []
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(json.loads(line))
                except json.JSONDecodeError:
                    # A torn last line from a crash; skip it
                    continue

        events.reverse()
        return events[:limit]
