"""
Row Codec

Reads the comma-separated row format written by `BaseReport.write_rows`:

    Time,Amount,Description            (3 columns, BasicTransaction)
    Time,Amount,Description,Name       (4 columns, PayerTransaction)

The header is optional, case-insensitive, and only recognized as the
first row. Blank lines are ignored. Any bad row aborts the whole batch.
Errors name the line the offending row starts on.
"""

import csv
import io
from typing import Iterable, TextIO, Union

from budget.models.currency import to_decimal
from budget.models.transaction import BasicTransaction, PayerTransaction
from budget.reports.errors import MalformedRowError, UnsupportedFormatError


RowSource = Union[str, TextIO, Iterable[str]]

# (line number, cells)
NumberedRow = tuple[int, list[str]]

# Column count -> transaction shape
TRANSACTION_TYPES_BY_WIDTH: dict[int, type[BasicTransaction]] = {
    len(BasicTransaction.COLUMNS): BasicTransaction,
    len(PayerTransaction.COLUMNS): PayerTransaction,
}

# Descriptions have no length limit, so neither may a read field.
# Largest value a C long accepts on every platform.
MAX_FIELD_SIZE = 2**31 - 1

csv.field_size_limit(MAX_FIELD_SIZE)


def read_rows(source: RowSource) -> list[NumberedRow]:
    """
    Split a text, stream or iterable of lines into non-blank CSV rows,
    each paired with the line it starts on.

    Raises:
        MalformedRowError: If the CSV itself can't be read
    """
    if isinstance(source, str):
        source = io.StringIO(source)
    reader = csv.reader(source)
    rows: list[NumberedRow] = []
    line_number = 1
    try:
        for row in reader:
            if row:
                rows.append((line_number, row))
            line_number = reader.line_num + 1
    except csv.Error as e:
        raise MalformedRowError(line_number, [], str(e)) from e
    return rows


def is_header(row: list[str]) -> bool:
    transaction_type = TRANSACTION_TYPES_BY_WIDTH.get(len(row))
    if transaction_type is None:
        return False
    expected = [column.lower() for column in transaction_type.COLUMNS]
    return [cell.strip().lower() for cell in row] == expected


def transaction_type_for(row: list[str]) -> type[BasicTransaction]:
    """
    Pick the transaction shape from a row's width.

    Raises:
        UnsupportedFormatError: If no shape has that many columns
    """
    try:
        return TRANSACTION_TYPES_BY_WIDTH[len(row)]
    except KeyError:
        raise UnsupportedFormatError(len(row), row) from None


def parse_rows(source: RowSource) -> list[BasicTransaction]:
    """Parse a row source into transactions. See `transactions_from_rows`."""
    return transactions_from_rows(read_rows(source))


def transactions_from_rows(rows: list[NumberedRow]) -> list[BasicTransaction]:
    """
    Turn rows from `read_rows` into transactions.

    The first row's width decides the shape for the whole batch.

    Raises:
        UnsupportedFormatError: If the first row is neither 3 nor 4 columns
        MalformedRowError: If a later row has a different width or an
            amount that is not a finite decimal
    """
    if not rows:
        return []
    transaction_type = transaction_type_for(rows[0][1])
    width = len(transaction_type.COLUMNS)

    transactions: list[BasicTransaction] = []
    for index, (line_number, row) in enumerate(rows):
        if index == 0 and is_header(row):
            continue
        if len(row) != width:
            raise MalformedRowError(
                line_number, row, f"expected {width} columns, got {len(row)}"
            )
        try:
            to_decimal(row[1])
        except ValueError as e:
            raise MalformedRowError(line_number, row, str(e)) from e
        transactions.append(transaction_type.from_row(row))
    return transactions
