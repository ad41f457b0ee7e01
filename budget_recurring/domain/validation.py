"""
Field validation for recurring rules.

Pure functions: collect every problem with a proposed rule and raise a single
``RuleValidationError`` listing them all, so a caller can show the whole list
at once.  The per-field checks are the kernel's, shared with one-off
transactions and budgets.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from budget_kernel.domain.validation import (
    MAX_CATEGORY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    check_amount,
    check_date,
    check_text,
)
from budget_kernel.exceptions import RuleValidationError

from budget_recurring.domain.types import Frequency


def validate_rule_fields(
    description: Any,
    amount: Any,
    category: Any,
    frequency: Any,
    start_date: Any,
    last_processed: date | None = None,
) -> tuple[str, Decimal, str, Frequency, date]:
    """
    Validate and normalize the user-editable fields of a rule.

    Returns:
        ``(description, amount, category, frequency, start_date)`` with text
        trimmed, amount as Decimal quantized to cents, frequency as Frequency
        and start_date as date.

    Raises:
        RuleValidationError: listing every failing field.
    """
    errors: list[str] = []

    text = check_text(description, "Description", MAX_DESCRIPTION_LENGTH, errors)
    value = check_amount(amount, errors)
    tag = check_text(category, "Category", MAX_CATEGORY_LENGTH, errors)

    freq = Frequency.parse(frequency) if isinstance(frequency, str) else None
    if freq is None:
        allowed = ", ".join(f.value for f in Frequency)
        errors.append(f"Frequency must be one of: {allowed}")

    start = check_date(start_date, "Start date", errors)
    if start is not None and last_processed is not None and start > last_processed:
        errors.append(
            "Start date cannot be after the last processed date "
            f"({last_processed.isoformat()})"
        )

    if errors:
        raise RuleValidationError(errors)

    return text, value, tag, freq, start
