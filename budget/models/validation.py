"""
Input and Validation Models

Transactions typed into the front end arrive as raw text. These models
hold that raw input and the outcome of validating it, before anything
is turned into a BasicTransaction/PayerTransaction.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from budget.models.transaction import ReportVariant


class TransactionInput(BaseModel):
    """One transaction as entered by the user. Nothing is trusted yet."""
    model_config = ConfigDict(str_strip_whitespace=True)

    time: str = Field(
        default="",
        description="When the income was earned / expense occurred"
    )
    amount: str = Field(
        default="",
        description="Amount without currency symbol, e.g. '-25.50'"
    )
    description: str = Field(
        default="",
        description="Category of the transaction"
    )
    paid_by: Optional[str] = Field(
        default=None,
        description="Who earned/paid, for shared budgets"
    )

    @field_validator("time", "amount", "description", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> Any:
        """Number widgets hand us floats/Decimals; keep everything as text."""
        if v is None:
            return ""
        if isinstance(v, (int, float, Decimal)):
            return str(v)
        return v

    @field_validator("paid_by", mode="before")
    @classmethod
    def blank_payer_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue, e.g. 'transactions[2].amount'"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (required fields, parseable amounts)
    Stage 2: Semantic validation (suspicious but acceptable input)
    """

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    variant: Optional[ReportVariant] = Field(
        default=None,
        description="Report variant the input maps to, when known"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        """Messages of non-blocking issues."""
        return [issue.message for issue in self.issues if issue.severity == "warning"]
