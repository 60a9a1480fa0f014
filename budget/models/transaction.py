"""
Transaction Models

A transaction is a single monetary event. The sign of its amount is
its only classifier:
- amount >= 0 -> income (zero counts as income)
- amount < 0  -> expense

Two shapes exist:
- BasicTransaction: time, amount, description
- PayerTransaction: the same, attributed to whoever earned/paid it

Each shape knows its own row layout so the row codec never has to
special-case a variant.
"""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from budget.models.currency import Euro


class ReportVariant(str, Enum):
    """The concrete report shapes. Every report carries one of these."""
    BASIC = "basic"
    MULTI_PAYER = "multi_payer"


class BasicTransaction(BaseModel):
    """A single income or expense."""
    model_config = ConfigDict(frozen=True)

    COLUMNS: ClassVar[tuple[str, ...]] = ("Time", "Amount", "Description")

    time: str = Field(
        ...,
        description="Free-form time label, e.g. '2024-05-01' or '1'"
    )
    amount: Euro = Field(
        ...,
        description="Signed amount; negative means expense"
    )
    description: str = Field(
        ...,
        description="Category label used for expense breakdowns"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        """Accept major-unit numbers/text as well as Euro values."""
        if isinstance(v, (Euro, dict)):
            return v
        return Euro.from_amount(v)

    @property
    def is_income(self) -> bool:
        return not self.amount.is_negative

    @property
    def is_expense(self) -> bool:
        return self.amount.is_negative

    def to_row(self, plain: bool = True) -> list[str]:
        """
        Row cells in COLUMNS order.

        plain=True renders "-25.00" (file format), otherwise "-€25.00".
        """
        amount = self.amount.to_plain() if plain else str(self.amount)
        return [self.time, amount, self.description]

    @classmethod
    def from_row(cls, row: list[str]) -> "BasicTransaction":
        time, amount, description = row
        return cls(time=time, amount=amount, description=description)


class PayerTransaction(BasicTransaction):
    """A single income or expense, including who earned/paid it."""

    COLUMNS: ClassVar[tuple[str, ...]] = ("Time", "Amount", "Description", "Name")

    paid_by: str = Field(
        ...,
        description="Name of the person who earned or paid"
    )

    def to_row(self, plain: bool = True) -> list[str]:
        return super().to_row(plain) + [self.paid_by]

    @classmethod
    def from_row(cls, row: list[str]) -> "PayerTransaction":
        time, amount, description, paid_by = row
        return cls(time=time, amount=amount, description=description, paid_by=paid_by)
