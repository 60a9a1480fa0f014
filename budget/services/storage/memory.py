"""
In-Memory Storage Implementations

Used by tests and by the web front end's session. Reports are kept as
row text, so loading goes through the same codec as file storage.
"""

import io
from typing import Optional
from uuid import UUID

from budget.models.audit import AuditEvent
from budget.reports import BaseReport, load_report
from budget.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    ReportStorageInterface,
)


class InMemoryReportStorage(ReportStorageInterface):
    """Dict of filename -> row text."""

    def __init__(self, files: Optional[dict[str, str]] = None):
        self._files: dict[str, str] = dict(files or {})

    def save_report(self, report: BaseReport, filename: str) -> bool:
        buffer = io.StringIO()
        report.write_rows(buffer)
        self._files[filename] = buffer.getvalue()
        return True

    def load_report(self, name: str, filename: str) -> BaseReport:
        try:
            text = self._files[filename]
        except KeyError:
            raise NotFoundError(f"Report file not found: {filename}") from None
        return load_report(name, text)

    def exists(self, filename: str) -> bool:
        return filename in self._files

    def list_reports(self) -> list[str]:
        return sorted(self._files)

    def read_text(self, filename: str) -> str:
        """Raw row text of a stored report."""
        try:
            return self._files[filename]
        except KeyError:
            raise NotFoundError(f"Report file not found: {filename}") from None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(
        self,
        limit: int = 100,
        report_name: Optional[str] = None,
    ) -> list[AuditEvent]:
        events = [
            e for e in reversed(self._events)
            if report_name is None or e.report_name == report_name
        ]
        return events[:limit]
