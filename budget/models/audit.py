"""
Audit Models for Budget Reports

Every significant report operation is logged for audit purposes:
building, loading, combining, rendering and saving, plus every failure.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every report operation has its own event type.
    """
    # Report lifecycle
    REPORT_BUILT = "report_built"
    REPORT_LOADED = "report_loaded"
    REPORTS_COMBINED = "reports_combined"
    REPORT_RENDERED = "report_rendered"
    REPORT_SAVED = "report_saved"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    ROW_PARSE_FAILED = "row_parse_failed"
    VARIANT_MISMATCH = "variant_mismatch"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
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

    # Context - which report is this about?
    report_name: Optional[str] = Field(
        default=None,
        description="Name of the report the event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., load + combine + save)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "report_name": self.report_name,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.report_built(report, correlation_id)
        event = AuditEventBuilder.save_failed(name, filename, error, correlation_id)
    """

    @staticmethod
    def report_built(
        report_name: str,
        variant: str,
        transaction_count: int,
        net_income: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_BUILT,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Report built with {transaction_count} transactions",
            details={
                "variant": variant,
                "transaction_count": transaction_count,
                "net_income": net_income,
            },
        )

    @staticmethod
    def report_loaded(
        report_name: str,
        filename: str,
        variant: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_LOADED,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Report loaded from {filename}",
            details={
                "filename": filename,
                "variant": variant,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def reports_combined(
        report_name: str,
        source_names: list[str],
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORTS_COMBINED,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Combined {len(source_names)} reports",
            details={
                "sources": source_names,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def report_rendered(
        report_name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_RENDERED,
            severity=AuditSeverity.DEBUG,
            report_name=report_name,
            correlation_id=correlation_id,
            description="Report rendered for display",
        )

    @staticmethod
    def report_saved(
        report_name: str,
        filename: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_SAVED,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Report saved to {filename}",
            details={
                "filename": filename,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def validation_failed(
        report_name: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Transaction input failed validation with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def row_parse_failed(
        report_name: str,
        filename: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROW_PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Could not parse rows from {filename}",
            details={"filename": filename},
            error_message=error_message,
        )

    @staticmethod
    def variant_mismatch(
        report_name: str,
        variants: list[str],
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VARIANT_MISMATCH,
            severity=AuditSeverity.WARNING,
            report_name=report_name,
            correlation_id=correlation_id,
            description="Refused to combine reports of different variants",
            details={"variants": variants},
            error_message=error_message,
        )

    @staticmethod
    def load_failed(
        report_name: str,
        filename: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Could not read {filename}",
            details={"filename": filename},
            error_message=error_message,
        )

    @staticmethod
    def save_failed(
        report_name: str,
        filename: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            report_name=report_name,
            correlation_id=correlation_id,
            description=f"Could not save report to {filename}",
            details={"filename": filename},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
