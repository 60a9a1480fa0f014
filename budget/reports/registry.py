"""
Report Registry / Dispatch

Routes raw rows and already-typed reports to the matching variant.
The variant tag (`ReportVariant`) is explicit on every report class, so
dispatch is a table lookup rather than a chain of isinstance checks.
"""

from typing import Iterable, Sequence

from budget.models.transaction import BasicTransaction, ReportVariant
from budget.reports.base import BaseReport
from budget.reports.basic import BasicReport
from budget.reports.errors import (
    EmptyCombinationError,
    EmptySourceError,
    VariantMismatchError,
)
from budget.reports.multi_payer import MultiPayerReport
from budget.reports.rows import (
    RowSource,
    read_rows,
    transaction_type_for,
    transactions_from_rows,
)


REPORT_TYPES: dict[ReportVariant, type[BaseReport]] = {
    ReportVariant.BASIC: BasicReport,
    ReportVariant.MULTI_PAYER: MultiPayerReport,
}

_REPORT_TYPES_BY_TRANSACTION: dict[type[BasicTransaction], type[BaseReport]] = {
    report_type.transaction_type: report_type for report_type in REPORT_TYPES.values()
}


def report_type_for(variant: ReportVariant) -> type[BaseReport]:
    return REPORT_TYPES[ReportVariant(variant)]


def build_report(
    name: str,
    transactions: Sequence[BasicTransaction],
    variant: ReportVariant = ReportVariant.BASIC,
) -> BaseReport:
    """
    Build a report of `variant`.

    `variant` only matters for an empty transaction list; otherwise
    every transaction must have the variant's shape.

    Raises:
        VariantMismatchError: If any transaction belongs to another variant
    """
    report_type = report_type_for(variant)
    for tx in transactions:
        inferred = _REPORT_TYPES_BY_TRANSACTION.get(type(tx))
        if inferred is not report_type:
            raise VariantMismatchError(report_type, inferred or type(tx))
    return report_type.build(name, transactions)


def load_report(name: str, source: RowSource) -> BaseReport:
    """
    Parse rows (header optional) into a report of the matching variant.

    A header-only source gives an empty report of the header's variant.

    Raises:
        EmptySourceError: If there are no rows at all
        UnsupportedFormatError: If the first row is neither 3 nor 4 columns
        MalformedRowError: If any row is unusable
    """
    rows = read_rows(source)
    if not rows:
        raise EmptySourceError(f"No rows found for report {name!r}")
    _, first_row = rows[0]
    report_type = _REPORT_TYPES_BY_TRANSACTION[transaction_type_for(first_row)]
    return report_type.build(name, transactions_from_rows(rows))


def combine_reports(name: str, reports: Iterable[BaseReport]) -> BaseReport:
    """
    Merge same-variant reports into a new one.

    Raises:
        EmptyCombinationError: If `reports` is empty
        VariantMismatchError: If the reports are not all the same variant
    """
    reports = list(reports)
    if not reports:
        raise EmptyCombinationError("At least one report is needed to combine")
    first = reports[0]
    report_type = REPORT_TYPES.get(getattr(first, "variant", None))
    if report_type is None or type(first) is not report_type:
        raise VariantMismatchError(BaseReport, type(first))
    for report in reports[1:]:
        if getattr(report, "variant", None) is not first.variant:
            raise VariantMismatchError(report_type, type(report))
    return report_type.combine(name, reports)
