"""Services package."""

from budget.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryReportStorage,
    LocalFileReportStorage,
    NotFoundError,
    ReportStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryReportStorage",
    "LocalFileReportStorage",
    "NotFoundError",
    "ReportStorageInterface",
    "StorageError",
]
