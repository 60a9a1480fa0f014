"""Plain income/expense report."""

from typing import ClassVar

from budget.models.transaction import BasicTransaction, ReportVariant
from budget.reports.base import BaseReport


class BasicReport(BaseReport):
    """Summarizes a budget of BasicTransaction values."""

    variant: ClassVar[ReportVariant] = ReportVariant.BASIC
    transaction_type: ClassVar[type[BasicTransaction]] = BasicTransaction

    transactions: tuple[BasicTransaction, ...] = ()
