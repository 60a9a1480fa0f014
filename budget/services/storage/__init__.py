"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Reports are stored as row files on disk, with in-memory variants for tests.
"""

from budget.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    ReportStorageInterface,
    StorageError,
)
from budget.services.storage.local_files import LocalFileReportStorage
from budget.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryReportStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ReportStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryReportStorage",
    "LocalFileReportStorage",
]
