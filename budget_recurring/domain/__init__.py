"""
budget_recurring.domain -- Pure types, validation and due-date evaluation.

ZERO I/O.  All types are frozen dataclasses.
"""

from budget_recurring.domain.schedule import is_due, months_between
from budget_recurring.domain.types import (
    Frequency,
    ProcessingSummary,
    RecurringRule,
    RuleState,
)

__all__ = [
    "Frequency",
    "ProcessingSummary",
    "RecurringRule",
    "RuleState",
    "is_due",
    "months_between",
]
