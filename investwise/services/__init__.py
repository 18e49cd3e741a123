"""
Services package.

Domain services (accounts, portfolio, bank) live in their own modules
and are imported from there; they depend on the audit logger, which in
turn depends on storage, so only storage is re-exported here.
"""

from investwise.services.storage import (
    AuditStorageInterface,
    InMemorySnapshotStorage,
    JsonLinesAuditStorage,
    JsonSnapshotStorage,
    PersistenceError,
    SnapshotCorruptError,
    SnapshotStorageInterface,
)

__all__ = [
    "AuditStorageInterface",
    "InMemorySnapshotStorage",
    "JsonLinesAuditStorage",
    "JsonSnapshotStorage",
    "PersistenceError",
    "SnapshotCorruptError",
    "SnapshotStorageInterface",
]
