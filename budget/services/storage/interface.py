"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep report files on disk today and somewhere else later
2. Use in-memory storage for testing
3. Keep the report core free of any I/O decisions

The interface is intentionally simple: reports are saved and loaded
whole, in the row format, keyed by a caller-supplied filename.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from budget.models.audit import AuditEvent
from budget.reports import BaseReport


class ReportStorageInterface(ABC):
    """
    Abstract interface for report storage operations.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def save_report(self, report: BaseReport, filename: str) -> bool:
        """
        Save a report's rows under `filename`, replacing any previous file.

        Args:
            report: The report to save
            filename: Target name, relative to the storage root

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails. No partially written file is left.
        """
        pass

    @abstractmethod
    def load_report(self, name: str, filename: str) -> BaseReport:
        """
        Read a report back from `filename`.

        Args:
            name: Name to give the loaded report
            filename: Source name, relative to the storage root

        Raises:
            NotFoundError: If the file doesn't exist
            StorageError: If the file can't be read
            ReportFormatError: If the rows are malformed
        """
        pass

    @abstractmethod
    def exists(self, filename: str) -> bool:
        pass

    @abstractmethod
    def list_reports(self) -> list[str]:
        """
        List stored report filenames.

        Returns:
            Filenames in alphabetical order
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one merge-and-save flow).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
        report_name: Optional[str] = None,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return
            report_name: Only events about this report, if given

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Report file not found in storage."""
    pass
