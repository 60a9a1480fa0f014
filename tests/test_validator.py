"""
Tests for two-stage transaction input validation.
"""

from decimal import Decimal

import pytest

from budget.config import ReportSettings
from budget.models.currency import Euro
from budget.models.transaction import BasicTransaction, PayerTransaction, ReportVariant
from budget.models.validation import TransactionInput
from budget.validation import InvalidTransactionInputError, TransactionValidator
from budget.validation.validator import has_sub_cent_digits


@pytest.fixture
def validator():
    return TransactionValidator(settings=ReportSettings(_env_file=None))


def entry(time="1", amount="10.00", description="Salary", paid_by=None):
    return TransactionInput(time=time, amount=amount, description=description, paid_by=paid_by)


def issue_types(result):
    return [issue.issue_type for issue in result.issues]


class TestSchemaValidation:
    """Stage 1 tests."""

    def test_valid_basic_input(self, validator):
        """Test clean input passes both stages."""
        result = validator.validate([entry(), entry(time="2", amount="-4.50", description="Lunch")])
        assert result.is_valid
        assert result.schema_valid and result.semantic_valid
        assert result.variant == ReportVariant.BASIC
        assert result.issues == []

    def test_missing_fields(self, validator):
        """Test each missing field is an error."""
        result = validator.validate([entry(time="", amount="", description="")])
        assert not result.schema_valid
        assert not result.is_valid
        assert result.error_count == 3
        assert {issue.field for issue in result.issues} == {
            "transactions[0].time",
            "transactions[0].amount",
            "transactions[0].description",
        }

    @pytest.mark.parametrize("amount", ["ten", "12,50", "€5", "NaN", "1e999999"])
    def test_invalid_amount(self, validator, amount):
        """Test unparseable amounts are errors."""
        result = validator.validate([entry(amount=amount)])
        assert result.has_errors
        assert issue_types(result) == ["invalid_format"]

    def test_partial_payers(self, validator):
        """Test payers must be given on every row or none."""
        result = validator.validate([entry(paid_by="Alice"), entry(time="2")])
        assert result.variant == ReportVariant.MULTI_PAYER
        assert result.has_errors
        assert result.issues[0].field == "transactions[1].paid_by"

    def test_semantic_stage_skipped_on_schema_errors(self, validator):
        """Test stage 2 only runs after stage 1 passed."""
        result = validator.validate([entry(amount="ten"), entry(amount="0")])
        assert not result.semantic_valid
        assert "zero_amount" not in issue_types(result)


class TestSemanticValidation:
    """Stage 2 tests."""

    def test_empty_input_warns(self, validator):
        """Test an empty batch is allowed but flagged."""
        result = validator.validate([])
        assert result.is_valid
        assert issue_types(result) == ["empty"]

    def test_large_amount_warns(self, validator):
        """Test amounts above the limit are flagged, not rejected."""
        result = validator.validate([entry(amount="-2500000")])
        assert result.is_valid
        assert issue_types(result) == ["suspicious_value"]

    def test_sub_cent_amount_warns(self, validator):
        """Test amounts that will be rounded are flagged."""
        result = validator.validate([entry(amount="1.005")])
        assert result.is_valid
        assert issue_types(result) == ["rounding"]
        assert result.warnings

    def test_sub_cent_warning_can_be_disabled(self):
        """Test the rounding warning follows settings."""
        validator = TransactionValidator(
            settings=ReportSettings(_env_file=None, warn_on_sub_cent_amounts=False)
        )
        assert validator.validate([entry(amount="1.005")]).issues == []

    def test_zero_amount_is_info(self, validator):
        """Test zero amounts are noted as income."""
        result = validator.validate([entry(amount="0")])
        assert result.is_valid
        assert result.issues[0].severity == "info"
        assert result.warnings == []

    def test_duplicates_warn(self, validator):
        """Test identical entries are flagged."""
        result = validator.validate([entry(), entry(amount="10")])
        assert issue_types(result) == ["duplicate"]
        assert result.issues[0].field == "transactions[1]"

    def test_sub_cent_detection(self):
        """Test the sub-cent helper."""
        assert has_sub_cent_digits(Decimal("1.005"))
        assert not has_sub_cent_digits(Decimal("1.50"))
        assert not has_sub_cent_digits(Decimal("1.000"))
        assert not has_sub_cent_digits(Decimal("100"))


class TestToTransactions:
    """Tests for converting validated input."""

    def test_basic_transactions(self, validator):
        """Test input without payers becomes basic transactions."""
        (tx,) = validator.to_transactions([entry(amount="-4.50", description="Lunch")])
        assert type(tx) is BasicTransaction
        assert tx.amount == Euro.from_amount("-4.50")

    def test_payer_transactions(self, validator):
        """Test input with payers becomes payer transactions."""
        transactions = validator.to_transactions([
            entry(paid_by="Alice"),
            entry(time="2", amount="-3", description="Coffee", paid_by="Bob"),
        ])
        assert all(type(tx) is PayerTransaction for tx in transactions)
        assert [tx.paid_by for tx in transactions] == ["Alice", "Bob"]

    def test_warnings_do_not_block(self, validator):
        """Test warning-level issues still convert."""
        (tx,) = validator.to_transactions([entry(amount="1.005")])
        assert tx.amount == Euro(cents=101)

    def test_errors_block(self, validator):
        """Test error-level issues raise with the result attached."""
        with pytest.raises(InvalidTransactionInputError) as exc_info:
            validator.to_transactions([entry(description="")])
        assert exc_info.value.result.error_count == 1
        assert "no description" in str(exc_info.value)

    def test_out_of_range_amount_blocks(self, validator):
        """Test an absurdly large amount is an input error, not an overflow."""
        with pytest.raises(InvalidTransactionInputError, match="not a number"):
            validator.to_transactions([entry(amount="1e999999")])
