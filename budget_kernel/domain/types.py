"""
budget_kernel.domain.types -- Frozen DTOs for ledger transactions and budgets.

ZERO I/O.  A ledger transaction is an independent entity: once written it
is never touched again by the recurring scheduler and carries no reference
to the rule that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class TransactionDraft:
    """Input for ``TransactionStore.create()`` -- a transaction not yet stored."""

    description: str
    amount: Decimal  # Negative = expense, positive = income
    category: str
    date: date


@dataclass(frozen=True)
class LedgerTransaction:
    """Immutable snapshot of a stored ledger transaction."""

    id: UUID
    description: str
    amount: Decimal
    category: str
    date: date
    created_at: datetime | None = None

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


class BudgetPeriod(str, Enum):
    """Period a category budget applies to."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: str | BudgetPeriod) -> BudgetPeriod | None:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Budget:
    """Spending limit for one category.  At most one budget per category."""

    id: UUID
    category: str
    amount: Decimal  # Non-negative limit
    period: BudgetPeriod
    created_at: datetime | None = None
