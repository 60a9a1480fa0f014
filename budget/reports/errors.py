"""
Report Errors

Every failure is local to one build/parse/combine call. Nothing here
is fatal to the process and no partial report is ever returned.
"""


class ReportError(Exception):
    """Base exception for report operations."""
    pass


class ReportFormatError(ReportError, ValueError):
    """Row input could not be turned into a report."""
    pass


class MalformedRowError(ReportFormatError):
    """A single row is unusable; parsing of the whole batch aborts."""

    def __init__(self, row_number: int, row: list[str], reason: str):
        self.row_number = row_number
        self.row = list(row)
        self.reason = reason
        super().__init__(
            f"Malformed row at line {row_number} {','.join(self.row)!r}: {reason}"
        )


class UnsupportedFormatError(ReportFormatError):
    """The rows have a column count no report variant understands."""

    def __init__(self, column_count: int, row: list[str]):
        self.column_count = column_count
        self.row = list(row)
        super().__init__(
            f"Unsupported row format with {column_count} columns: "
            f"{','.join(self.row)!r} (expected 3 or 4)"
        )


class EmptySourceError(ReportFormatError):
    """The row source holds no rows at all, not even a header."""
    pass


class VariantMismatchError(ReportError, TypeError):
    """Reports of different variants cannot be combined."""

    def __init__(self, expected: type, got: type):
        self.expected = expected
        self.got = got
        super().__init__(f"Expected {expected.__name__}, got {got.__name__}")


class EmptyCombinationError(ReportError, ValueError):
    """Combining needs at least one report."""
    pass
