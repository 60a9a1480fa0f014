"""Transaction input validation package."""

from budget.validation.validator import InvalidTransactionInputError, TransactionValidator

__all__ = ["InvalidTransactionInputError", "TransactionValidator"]
