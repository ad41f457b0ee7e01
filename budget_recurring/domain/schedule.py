"""
Pure due-date evaluation for recurring rules.

Contract:
    ``is_due(rule, reference_date)`` is PURE -- no I/O, no side effects, no
    wall clock.  The reference date is always passed in by the caller.

Architecture: budget_recurring/domain.  ZERO I/O.

Rules, in order:
    1. A rule whose start date is after the reference date is never due.
    2. A rule that has never been processed is due.
    3. A reference date before ``last_processed`` is never due, so the
       marker cannot move backwards.
    4. Otherwise the frequency decides:
         daily / weekly / biweekly -- elapsed days reach 1 / 7 / 14;
         monthly   -- calendar month (or year) differs;
         quarterly -- at least 3 whole calendar months apart;
         yearly    -- reference year is later.
       Any other frequency value is never due.
"""

from __future__ import annotations

from datetime import date

from budget_recurring.domain.types import Frequency, RecurringRule

FREQUENCY_DAY_THRESHOLDS: dict[Frequency, int] = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}

QUARTER_MONTHS = 3


def months_between(earlier: date, later: date) -> int:
    """Whole calendar months from ``earlier`` to ``later`` (day of month ignored)."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def is_due(rule: RecurringRule, reference_date: date) -> bool:
    """Decide whether a new occurrence of ``rule`` is due on ``reference_date``."""
    if rule.start_date > reference_date:
        return False

    last = rule.last_processed
    if last is None:
        return True

    if reference_date < last:
        return False

    frequency = Frequency.parse(rule.frequency)
    if frequency is None:
        return False

    if frequency in FREQUENCY_DAY_THRESHOLDS:
        return (reference_date - last).days >= FREQUENCY_DAY_THRESHOLDS[frequency]

    if frequency == Frequency.MONTHLY:
        return (reference_date.year, reference_date.month) != (last.year, last.month)

    if frequency == Frequency.QUARTERLY:
        return months_between(last, reference_date) >= QUARTER_MONTHS

    if frequency == Frequency.YEARLY:
        return reference_date.year > last.year

    return False
