"""
Two-Stage Transaction Input Validation

The report core trusts the transactions it is given. This module is the
gate in front of it: raw user input is checked here and only clean
input becomes BasicTransaction/PayerTransaction values.

STAGE 1 - SCHEMA VALIDATION:
- Time and description present
- Amount parses as a finite decimal
- Payer given on all rows or on none (one report = one variant)

STAGE 2 - SEMANTIC VALIDATION:
- Absurd amount detection
- Sub-cent amounts (they will be rounded)
- Zero amounts (recorded as income)
- Exact duplicates

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; only errors block building a report.
"""

from decimal import Decimal
from typing import Optional, Sequence

from budget.config import ReportSettings, get_settings
from budget.models.currency import to_decimal
from budget.models.transaction import BasicTransaction, PayerTransaction, ReportVariant
from budget.models.validation import TransactionInput, ValidationIssue, ValidationResult


def has_sub_cent_digits(amount: Decimal) -> bool:
    """True for amounts like 1.005 that cannot be stored exactly in cents."""
    return amount.normalize().as_tuple().exponent < -2


class InvalidTransactionInputError(ValueError):
    """Raised when input with error-level issues is turned into transactions."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"{result.error_count} invalid transaction(s): {messages}")


class TransactionValidator:
    """
    Validates raw transaction input through a two-stage pipeline.

    Stage 2 only runs when stage 1 passed.
    """

    def __init__(self, settings: Optional[ReportSettings] = None):
        self._settings = settings or get_settings().reports

    @staticmethod
    def variant_of(inputs: Sequence[TransactionInput]) -> ReportVariant:
        """Any payer at all makes this a shared (multi-payer) budget."""
        if any(entry.paid_by for entry in inputs):
            return ReportVariant.MULTI_PAYER
        return ReportVariant.BASIC

    def _validate_schema(
        self,
        inputs: Sequence[TransactionInput],
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        shared = self.variant_of(inputs) == ReportVariant.MULTI_PAYER

        for index, entry in enumerate(inputs):
            prefix = f"transactions[{index}]"

            if not entry.time:
                issues.append(ValidationIssue(
                    field=f"{prefix}.time",
                    issue_type="missing",
                    message=f"Transaction {index + 1} has no time",
                    severity="error",
                    suggested_fix="Enter when the income was earned or the expense occurred",
                ))

            if not entry.description:
                issues.append(ValidationIssue(
                    field=f"{prefix}.description",
                    issue_type="missing",
                    message=f"Transaction {index + 1} has no description",
                    severity="error",
                    suggested_fix="Enter a category such as 'Rent' or 'Salary'",
                ))

            if not entry.amount:
                issues.append(ValidationIssue(
                    field=f"{prefix}.amount",
                    issue_type="missing",
                    message=f"Transaction {index + 1} has no amount",
                    severity="error",
                    suggested_fix="Enter the amount without currency symbol",
                ))
            else:
                try:
                    to_decimal(entry.amount)
                except ValueError:
                    issues.append(ValidationIssue(
                        field=f"{prefix}.amount",
                        issue_type="invalid_format",
                        message=f"Transaction {index + 1} amount {entry.amount!r} is not a number",
                        severity="error",
                        suggested_fix="Use digits with an optional '-' and '.', e.g. -25.50",
                    ))

            if shared and not entry.paid_by:
                issues.append(ValidationIssue(
                    field=f"{prefix}.paid_by",
                    issue_type="missing",
                    message=f"Transaction {index + 1} has no payer but others do",
                    severity="error",
                    suggested_fix="Enter who earned or paid, or clear the payer everywhere",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        inputs: Sequence[TransactionInput],
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        seen: dict[tuple, int] = {}
        limit = self._settings.max_transaction_amount

        if not inputs:
            issues.append(ValidationIssue(
                field="transactions",
                issue_type="empty",
                message="No transactions entered; every total will be zero",
                severity="warning",
            ))

        for index, entry in enumerate(inputs):
            prefix = f"transactions[{index}]"
            amount = to_decimal(entry.amount)

            if abs(amount) > limit:
                issues.append(ValidationIssue(
                    field=f"{prefix}.amount",
                    issue_type="suspicious_value",
                    message=f"Transaction {index + 1} amount {amount} is unusually large",
                    severity="warning",
                    suggested_fix="Check for an extra digit",
                ))

            if self._settings.warn_on_sub_cent_amounts and has_sub_cent_digits(amount):
                issues.append(ValidationIssue(
                    field=f"{prefix}.amount",
                    issue_type="rounding",
                    message=(
                        f"Transaction {index + 1} amount {amount} has more than two "
                        "decimals and will be rounded to the nearest cent"
                    ),
                    severity="warning",
                ))

            if amount == 0:
                issues.append(ValidationIssue(
                    field=f"{prefix}.amount",
                    issue_type="zero_amount",
                    message=f"Transaction {index + 1} has a zero amount and counts as income",
                    severity="info",
                ))

            key = (entry.time, amount, entry.description, entry.paid_by)
            if key in seen:
                issues.append(ValidationIssue(
                    field=prefix,
                    issue_type="duplicate",
                    message=f"Transaction {index + 1} duplicates transaction {seen[key] + 1}",
                    severity="warning",
                    suggested_fix="Remove it if it was entered twice by mistake",
                ))
            else:
                seen[key] = index

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(self, inputs: Sequence[TransactionInput]) -> ValidationResult:
        """Run both stages and collect every issue."""
        schema_valid, issues = self._validate_schema(inputs)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(inputs)
            issues.extend(semantic_issues)

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            variant=self.variant_of(inputs),
            issues=issues,
        )

    def to_transactions(
        self,
        inputs: Sequence[TransactionInput],
    ) -> list[BasicTransaction]:
        """
        Validate and convert.

        Raises:
            InvalidTransactionInputError: If any error-level issue exists
        """
        result = self.validate(inputs)
        if result.has_errors:
            raise InvalidTransactionInputError(result)

        if result.variant == ReportVariant.MULTI_PAYER:
            return [
                PayerTransaction(
                    time=entry.time,
                    amount=entry.amount,
                    description=entry.description,
                    paid_by=entry.paid_by,
                )
                for entry in inputs
            ]
        return [
            BasicTransaction(time=entry.time, amount=entry.amount, description=entry.description)
            for entry in inputs
        ]
