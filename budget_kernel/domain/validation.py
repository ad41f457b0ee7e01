"""
Field validation shared by every user-editable record.

Checks append a message to an ``errors`` list instead of raising, so a
validator can report every failing field at once and then raise a single
``FieldValidationError`` subclass.  Amounts come back quantized to cents.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from budget_kernel.domain.types import BudgetPeriod
from budget_kernel.exceptions import BudgetValidationError, TransactionValidationError

MAX_DESCRIPTION_LENGTH = 500
MAX_CATEGORY_LENGTH = 100
AMOUNT_DECIMAL_PLACES = 2

CENT = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)


def coerce_amount(value: Any) -> Decimal | None:
    """Convert user input to Decimal; None if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def coerce_date(value: Any) -> date | None:
    """Accept a ``date`` or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def check_text(value: Any, label: str, max_length: int, errors: list[str]) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        errors.append(f"{label} is required")
    elif len(text) > max_length:
        errors.append(f"{label} must be at most {max_length} characters")
    return text


def check_amount(value: Any, errors: list[str], *, positive: bool = False) -> Decimal | None:
    """Validate an amount; nonzero, or strictly positive when ``positive``."""
    amount = coerce_amount(value)
    if amount is None:
        errors.append("Amount must be a number")
        return None
    if positive and amount <= 0:
        errors.append("Amount must be greater than zero")
        return None
    if amount == 0:
        errors.append("Amount must be nonzero")
        return None
    if amount.as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
        errors.append(f"Amount must have at most {AMOUNT_DECIMAL_PLACES} decimal places")
        return None
    return amount.quantize(CENT)


def check_date(value: Any, label: str, errors: list[str]) -> date | None:
    on = coerce_date(value)
    if on is None:
        errors.append(f"{label} must be a valid date (YYYY-MM-DD)")
    return on


def validate_transaction_fields(
    description: Any, amount: Any, category: Any, on: Any,
) -> tuple[str, Decimal, str, date]:
    """
    Validate a one-off ledger transaction.

    Raises:
        TransactionValidationError: listing every failing field.
    """
    errors: list[str] = []
    text = check_text(description, "Description", MAX_DESCRIPTION_LENGTH, errors)
    value = check_amount(amount, errors)
    tag = check_text(category, "Category", MAX_CATEGORY_LENGTH, errors)
    when = check_date(on, "Date", errors)
    if errors:
        raise TransactionValidationError(errors)
    return text, value, tag, when


def validate_budget_fields(
    category: Any, amount: Any, period: Any,
) -> tuple[str, Decimal, BudgetPeriod]:
    """
    Validate a category budget.  The limit must be greater than zero.

    Raises:
        BudgetValidationError: listing every failing field.
    """
    errors: list[str] = []
    tag = check_text(category, "Category", MAX_CATEGORY_LENGTH, errors)
    value = check_amount(amount, errors, positive=True)
    parsed = BudgetPeriod.parse(period) if isinstance(period, str) else None
    if parsed is None:
        allowed = ", ".join(p.value for p in BudgetPeriod)
        errors.append(f"Period must be one of: {allowed}")
    if errors:
        raise BudgetValidationError(errors)
    return tag, value, parsed
