"""Tests for budget_kernel.domain.validation."""

from datetime import date
from decimal import Decimal

import pytest

from budget_kernel.domain.types import BudgetPeriod
from budget_kernel.domain.validation import (
    check_amount,
    coerce_amount,
    coerce_date,
    validate_budget_fields,
    validate_transaction_fields,
)
from budget_kernel.exceptions import BudgetValidationError, TransactionValidationError


class TestCoercion:
    @pytest.mark.parametrize("value", [None, True, "abc", "", "NaN", "Infinity", object()])
    def test_non_numbers(self, value):
        assert coerce_amount(value) is None

    def test_strings_and_ints(self):
        assert coerce_amount(" -12.5 ") == Decimal("-12.5")
        assert coerce_amount(7) == Decimal(7)

    def test_dates(self):
        assert coerce_date("2024-03-01") == date(2024, 3, 1)
        assert coerce_date(date(2024, 3, 1)) == date(2024, 3, 1)
        assert coerce_date("03/01/2024") is None
        assert coerce_date(20240301) is None


class TestCheckAmount:
    def test_quantizes_to_cents(self):
        errors = []
        assert str(check_amount("-1200", errors)) == "-1200.00"
        assert errors == []

    def test_rejects_sub_cent_precision(self):
        errors = []
        assert check_amount("1.005", errors) is None
        assert errors == ["Amount must have at most 2 decimal places"]

    def test_positive_rejects_negative(self):
        errors = []
        check_amount("-5", errors, positive=True)
        assert errors == ["Amount must be greater than zero"]


class TestValidateTransactionFields:
    def test_normalizes(self):
        assert validate_transaction_fields(" Coffee ", "-4.5", " Food ", "2024-01-10") == (
            "Coffee", Decimal("-4.50"), "Food", date(2024, 1, 10),
        )

    def test_collects_every_error(self):
        with pytest.raises(TransactionValidationError) as exc_info:
            validate_transaction_fields("", "0", "   ", "soon")

        assert exc_info.value.messages == (
            "Description is required",
            "Amount must be nonzero",
            "Category is required",
            "Date must be a valid date (YYYY-MM-DD)",
        )

    def test_description_length_limit(self):
        with pytest.raises(TransactionValidationError, match="at most 500 characters"):
            validate_transaction_fields("x" * 501, "1", "Food", date(2024, 1, 1))


class TestValidateBudgetFields:
    def test_normalizes(self):
        assert validate_budget_fields(" Food ", "400", "weekly") == (
            "Food", Decimal("400.00"), BudgetPeriod.WEEKLY,
        )

    def test_period_enum_accepted(self):
        _, _, period = validate_budget_fields("Food", "400", BudgetPeriod.YEARLY)
        assert period is BudgetPeriod.YEARLY

    def test_collects_every_error(self):
        with pytest.raises(BudgetValidationError) as exc_info:
            validate_budget_fields("", "-10", "daily")

        assert exc_info.value.messages == (
            "Category is required",
            "Amount must be greater than zero",
            "Period must be one of: weekly, monthly, yearly",
        )
