"""Pure kernel domain objects: clock, transaction and budget DTOs, field validation."""

from budget_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from budget_kernel.domain.types import (
    Budget,
    BudgetPeriod,
    LedgerTransaction,
    TransactionDraft,
)

__all__ = [
    "Budget",
    "BudgetPeriod",
    "Clock",
    "DeterministicClock",
    "LedgerTransaction",
    "SystemClock",
    "TransactionDraft",
]
