"""Report package: the two report variants, the row codec and dispatch."""

from budget.reports.base import BaseReport, percentage, sort_by_magnitude
from budget.reports.basic import BasicReport
from budget.reports.errors import (
    EmptyCombinationError,
    EmptySourceError,
    MalformedRowError,
    ReportError,
    ReportFormatError,
    UnsupportedFormatError,
    VariantMismatchError,
)
from budget.reports.multi_payer import MultiPayerReport
from budget.reports.registry import (
    REPORT_TYPES,
    build_report,
    combine_reports,
    load_report,
    report_type_for,
)
from budget.reports.rows import is_header, parse_rows, read_rows

__all__ = [
    # Reports
    "BaseReport",
    "BasicReport",
    "MultiPayerReport",
    "percentage",
    "sort_by_magnitude",
    # Dispatch
    "REPORT_TYPES",
    "build_report",
    "combine_reports",
    "load_report",
    "report_type_for",
    # Row codec
    "is_header",
    "parse_rows",
    "read_rows",
    # Exceptions
    "EmptyCombinationError",
    "EmptySourceError",
    "MalformedRowError",
    "ReportError",
    "ReportFormatError",
    "UnsupportedFormatError",
    "VariantMismatchError",
]
