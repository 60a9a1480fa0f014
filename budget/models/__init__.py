"""
Data Models Package

This package contains all Pydantic models used in the budget system.
All data flowing through the system must conform to these schemas.
"""

from budget.models.currency import (
    CURRENCY_SYMBOL,
    Euro,
    add_euros,
    sum_euros,
    to_decimal,
)
from budget.models.transaction import (
    BasicTransaction,
    PayerTransaction,
    ReportVariant,
)
from budget.models.validation import (
    TransactionInput,
    ValidationIssue,
    ValidationResult,
)
from budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Currency
    "CURRENCY_SYMBOL",
    "Euro",
    "add_euros",
    "sum_euros",
    "to_decimal",
    # Transaction models
    "BasicTransaction",
    "PayerTransaction",
    "ReportVariant",
    # Validation models
    "TransactionInput",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
