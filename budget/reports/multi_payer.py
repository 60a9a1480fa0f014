"""
Shared-Budget Report

Summarizes a budget shared between several people. On top of the
report-level totals it partitions the same transactions by `paid_by`:
summing any per-payer mapping reproduces the matching report total.

Every payer that appears in the transactions has an entry in all three
mappings (zero where they had no income or no expense). The mappings are
read-only views, so the partition can't drift from the transactions.
"""

from types import MappingProxyType
from typing import Any, ClassVar, Mapping

from pydantic import Field, field_serializer, field_validator

from budget.models.currency import Euro
from budget.models.transaction import BasicTransaction, PayerTransaction, ReportVariant
from budget.reports.base import BaseReport, percentage


class MultiPayerReport(BaseReport):
    """Summarizes a budget of PayerTransaction values."""

    variant: ClassVar[ReportVariant] = ReportVariant.MULTI_PAYER
    transaction_type: ClassVar[type[BasicTransaction]] = PayerTransaction

    transactions: tuple[PayerTransaction, ...] = ()
    net_income_per_payer: Mapping[str, Euro] = Field(
        default_factory=dict, validate_default=True
    )
    total_income_per_payer: Mapping[str, Euro] = Field(
        default_factory=dict, validate_default=True
    )
    total_expense_per_payer: Mapping[str, Euro] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator(
        "net_income_per_payer", "total_income_per_payer", "total_expense_per_payer"
    )
    @classmethod
    def freeze_mapping(cls, v: Mapping[str, Euro]) -> Mapping[str, Euro]:
        return MappingProxyType(dict(v))

    @field_serializer(
        "net_income_per_payer", "total_income_per_payer", "total_expense_per_payer"
    )
    def serialize_mapping(self, v: Mapping[str, Euro]) -> dict[str, Euro]:
        return dict(v)

    @classmethod
    def compute_totals(cls, transactions: tuple[PayerTransaction, ...]) -> dict[str, Any]:
        totals = super().compute_totals(transactions)
        income: dict[str, Euro] = {}
        expense: dict[str, Euro] = {}
        for tx in transactions:
            income.setdefault(tx.paid_by, Euro.zero())
            expense.setdefault(tx.paid_by, Euro.zero())
            if tx.is_expense:
                expense[tx.paid_by] = expense[tx.paid_by] + tx.amount
            else:
                income[tx.paid_by] = income[tx.paid_by] + tx.amount
        totals["total_income_per_payer"] = income
        totals["total_expense_per_payer"] = expense
        totals["net_income_per_payer"] = {
            payer: income[payer] + expense[payer] for payer in income
        }
        return totals

    @property
    def payers(self) -> list[str]:
        return sorted(self.net_income_per_payer)

    def render_breakdowns(self) -> list[str]:
        lines = ["Total Income Per Person (% of total income)"]
        for payer in self.payers:
            amount = self.total_income_per_payer[payer]
            lines.append(f"{payer}: {amount} ({percentage(amount, self.total_income)}%)")
        lines.append("Total Expense Per Person (% of total expenses)")
        for payer in self.payers:
            amount = self.total_expense_per_payer[payer]
            lines.append(f"{payer}: {amount} ({percentage(amount, self.total_expense)}%)")
        lines.append("Net Income Per Person")
        for payer in self.payers:
            lines.append(f"{payer}: {self.net_income_per_payer[payer]}")
        return lines
