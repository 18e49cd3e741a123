"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements local JSON files as the backend, but designed to be swappable.
"""

from investwise.services.storage.interface import (
    AuditStorageInterface,
    PersistenceError,
    SnapshotCorruptError,
    SnapshotStorageInterface,
)
from investwise.services.storage.json_files import JsonSnapshotStorage
from investwise.services.storage.memory import InMemorySnapshotStorage
from investwise.services.storage.audit_log import JsonLinesAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "PersistenceError",
    "SnapshotCorruptError",
    # Implementations
    "InMemorySnapshotStorage",
    "JsonLinesAuditStorage",
    "JsonSnapshotStorage",
]
