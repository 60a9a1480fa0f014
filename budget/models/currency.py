"""
Fixed-Point Currency

DESIGN DECISION: Amounts are stored as an integer count of cents.
Floating point never touches a stored amount, so sums are exact
no matter how many transactions a report holds.

ROUNDING: Converting a major-unit amount (euros) to cents rounds
half away from zero (Decimal ROUND_HALF_UP):
    1.005  -> 101 cents
    -1.005 -> -101 cents
    2.994  -> 299 cents
"""

from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation, localcontext
from functools import total_ordering
from typing import Union

from pydantic import BaseModel, ConfigDict, StrictInt


CURRENCY_SYMBOL = "€"

_CENTS_PER_UNIT = Decimal(100)

# Amounts need at most this many digits before the decimal point
MAX_INTEGER_DIGITS = 30

AmountLike = Union[Decimal, int, str, float]


def to_decimal(amount: AmountLike) -> Decimal:
    """
    Convert user or file input into a finite Decimal.

    Floats go through str() so the literal the user typed is what
    gets rounded, not its binary approximation.

    Raises:
        ValueError: If the value is not a finite decimal number, or has
            more than MAX_INTEGER_DIGITS digits before the decimal point
    """
    if isinstance(amount, bool):
        raise ValueError(f"Not a monetary amount: {amount!r}")
    if isinstance(amount, float):
        amount = str(amount)
    if isinstance(amount, str):
        amount = amount.strip()
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"Not a valid decimal amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Amount must be finite, got {amount!r}")
    if value and value.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValueError(f"Amount is too large: {amount!r}")
    return value


@total_ordering
class Euro(BaseModel):
    """
    An exact monetary amount in cents.

    Equality, ordering and hashing all go through `cents`.
    """
    model_config = ConfigDict(frozen=True)

    cents: StrictInt = 0

    @classmethod
    def from_amount(cls, amount: AmountLike) -> "Euro":
        """Build from a major-unit amount, rounding half away from zero."""
        value = to_decimal(amount)
        try:
            with localcontext() as ctx:
                # x100 adds at most three digits; keep the product exact
                ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + 3)
                cents = (value * _CENTS_PER_UNIT).to_integral_value(rounding=ROUND_HALF_UP)
        except DecimalException as e:
            raise ValueError(f"Amount out of range: {amount!r}") from e
        return cls(cents=int(cents))

    @classmethod
    def zero(cls) -> "Euro":
        return cls(cents=0)

    @property
    def is_negative(self) -> bool:
        return self.cents < 0

    def compare(self, other: "Euro") -> int:
        """Three-way comparison: -1, 0 or 1."""
        return (self.cents > other.cents) - (self.cents < other.cents)

    def to_decimal(self) -> Decimal:
        """Major units as an exact Decimal."""
        return Decimal(self.cents).scaleb(-2)

    def to_plain(self) -> str:
        """Row-format numeral, e.g. "-25.00" (no symbol)."""
        return f"{self.to_decimal():.2f}"

    def __add__(self, other: "Euro") -> "Euro":
        if not isinstance(other, Euro):
            return NotImplemented
        return Euro(cents=self.cents + other.cents)

    def __neg__(self) -> "Euro":
        return Euro(cents=-self.cents)

    def __abs__(self) -> "Euro":
        return Euro(cents=abs(self.cents))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Euro):
            return NotImplemented
        return self.cents == other.cents

    def __hash__(self) -> int:
        return hash(self.cents)

    def __lt__(self, other: "Euro") -> bool:
        if not isinstance(other, Euro):
            return NotImplemented
        return self.cents < other.cents

    def __str__(self) -> str:
        sign = "-" if self.is_negative else ""
        return f"{sign}{CURRENCY_SYMBOL}{abs(self).to_plain()}"


def add_euros(a: Euro, b: Euro) -> Euro:
    """Exact sum of two amounts."""
    return a + b


def sum_euros(amounts) -> Euro:
    total = Euro.zero()
    for amount in amounts:
        total = total + amount
    return total
