"""
Report Contract

A report aggregates the transactions of one period:
- total_income  = sum of amounts >= 0
- total_expense = sum of amounts < 0 (zero or negative)
- net_income    = total_income + total_expense

DESIGN DECISION: Reports are immutable values. `build()` is the only
place totals are computed; a model validator re-checks them so a report
with inconsistent totals cannot exist. Changing a report means building
a new one.

Both concrete variants (BasicReport, MultiPayerReport) share every
operation defined here. Variants only add totals and render sections.
"""

import csv
import io
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, ClassVar, Iterable, TextIO

from pydantic import BaseModel, ConfigDict, Field, model_validator

from budget.models.currency import Euro, sum_euros
from budget.models.transaction import BasicTransaction, ReportVariant
from budget.reports.errors import VariantMismatchError


def percentage(part: Euro, whole: Euro) -> str:
    """
    Share of `whole` as a two-decimal percentage string.

    A zero `whole` renders "0.00" instead of dividing by zero, and a zero
    `part` never renders as "-0.00".
    """
    if whole.cents == 0 or part.cents == 0:
        return "0.00"
    value = Decimal(part.cents) * 100 / Decimal(whole.cents)
    return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"


def sort_by_magnitude(transactions: Iterable[BasicTransaction]) -> list[BasicTransaction]:
    """Largest |amount| first. Stable: equal magnitudes keep input order."""
    return sorted(transactions, key=lambda tx: abs(tx.amount.cents), reverse=True)


class BaseReport(BaseModel):
    """
    Shared behavior of all report variants.

    Not instantiated directly; subclasses set `variant` and
    `transaction_type` and narrow the `transactions` field.
    """
    model_config = ConfigDict(frozen=True)

    variant: ClassVar[ReportVariant]
    transaction_type: ClassVar[type[BasicTransaction]]

    name: str = Field(
        ...,
        description="Period name, e.g. 'January 2025'"
    )
    net_income: Euro = Field(default_factory=Euro.zero)
    total_income: Euro = Field(default_factory=Euro.zero)
    total_expense: Euro = Field(default_factory=Euro.zero)
    transactions: tuple[BasicTransaction, ...] = ()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def build(cls, name: str, transactions: Iterable[BasicTransaction]) -> "BaseReport":
        """Create a report, computing every total from `transactions`."""
        transactions = tuple(transactions)
        return cls(name=name, transactions=transactions, **cls.compute_totals(transactions))

    @classmethod
    def compute_totals(cls, transactions: tuple[BasicTransaction, ...]) -> dict[str, Any]:
        total_income = sum_euros(tx.amount for tx in transactions if tx.is_income)
        total_expense = sum_euros(tx.amount for tx in transactions if tx.is_expense)
        return {
            "total_income": total_income,
            "total_expense": total_expense,
            "net_income": total_income + total_expense,
        }

    @classmethod
    def combine(cls, name: str, reports: Iterable["BaseReport"]) -> "BaseReport":
        """
        Merge reports of this exact variant into a new report.

        Transactions are concatenated in argument order, each report's
        internal order preserved.

        Raises:
            VariantMismatchError: If any report is not a `cls`
        """
        transactions: list[BasicTransaction] = []
        for report in reports:
            if type(report) is not cls:
                raise VariantMismatchError(cls, type(report))
            transactions.extend(report.transactions)
        return cls.build(name, transactions)

    @model_validator(mode="after")
    def validate_transactions_and_totals(self) -> "BaseReport":
        """Reject foreign transaction shapes and totals that don't add up."""
        for tx in self.transactions:
            if type(tx) is not self.transaction_type:
                raise ValueError(
                    f"{type(self).__name__} holds {self.transaction_type.__name__} "
                    f"values, got {type(tx).__name__}"
                )
        for field, expected in self.compute_totals(self.transactions).items():
            if getattr(self, field) != expected:
                raise ValueError(f"{field} does not match the report's transactions")
        return self

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def total_expense_by_category(self) -> dict[str, Euro]:
        """Sum of expenses per description. Income-only descriptions are absent."""
        per_category: dict[str, Euro] = {}
        for tx in self.transactions:
            if tx.is_expense:
                per_category[tx.description] = (
                    per_category.get(tx.description, Euro.zero()) + tx.amount
                )
        return per_category

    def incomes(self) -> list[BasicTransaction]:
        return [tx for tx in self.transactions if tx.is_income]

    def expenses(self) -> list[BasicTransaction]:
        return [tx for tx in self.transactions if tx.is_expense]

    def sorted_incomes(self) -> list[BasicTransaction]:
        """Incomes from largest to smallest."""
        return sort_by_magnitude(self.incomes())

    def sorted_expenses(self) -> list[BasicTransaction]:
        """Expenses from most to least expensive."""
        return sort_by_magnitude(self.expenses())

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def format_rows(self, plain: bool = True) -> str:
        """
        Header plus one row per transaction: sorted incomes, then sorted
        expenses. No trailing newline.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(self.transaction_type.COLUMNS)
        for tx in self.sorted_incomes() + self.sorted_expenses():
            writer.writerow(tx.to_row(plain=plain))
        return buffer.getvalue()[:-1]

    def write_rows(self, sink: TextIO) -> None:
        """Write the row format (the one `load_report` reads back) to `sink`."""
        sink.write(self.format_rows(plain=True))

    def render_breakdowns(self) -> list[str]:
        """Variant-specific summary lines between totals and categories."""
        return []

    def render(self) -> str:
        """Human-readable summary followed by the transaction table."""
        lines = [
            f"Budget Report for the period {self.name}",
            f"Total Income: {self.total_income}, "
            f"Total Expense: {self.total_expense}, "
            f"Net Income: {self.net_income}",
        ]
        lines.extend(self.render_breakdowns())
        lines.append("Total Expense Per Category (% of total expenses)")
        for category, amount in sorted(self.total_expense_by_category().items()):
            lines.append(f"{category}: {amount} ({percentage(amount, self.total_expense)}%)")
        lines.append(self.format_rows(plain=False))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()

    def __hash__(self) -> int:
        # Every total derives from the transactions
        return hash((type(self), self.name, self.transactions))
