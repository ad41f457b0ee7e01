"""
budget_recurring.domain.types -- Pure frozen dataclasses for the scheduler.

ZERO I/O.  Rules are immutable snapshots: advancing a rule means building a
new snapshot with ``dataclasses.replace`` and saving it by id, never mutating
a shared object.

Invariants enforced:
    - ``last_processed`` is only changed by the Materializer.
    - ``version`` identifies the snapshot a save was based on (optimistic check).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class Frequency(str, Enum):
    """Recurrence frequency of a rule."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: str | Frequency) -> Frequency | None:
        """Return the matching member, or None for an unknown value."""
        try:
            return cls(value)
        except ValueError:
            return None


class RuleState(str, Enum):
    """Lifecycle state of a rule as seen by the scheduler."""

    PENDING_FIRST_RUN = "pending_first_run"  # Active, never materialized
    ACTIVE_CYCLING = "active_cycling"  # Active, materialized at least once
    PAUSED = "paused"  # Inactive; last_processed retained


@dataclass(frozen=True)
class RecurringRule:
    """Immutable snapshot of a recurring-transaction rule.

    ``frequency`` is normally a ``Frequency``; a stored value outside the
    enum is kept as the raw string so the evaluator can treat it as never due.
    """

    id: UUID
    description: str
    amount: Decimal  # Negative = expense, positive = income
    category: str
    frequency: Frequency | str
    start_date: date
    last_processed: date | None = None
    active: bool = True
    version: int = 1
    created_at: datetime | None = None

    @property
    def state(self) -> RuleState:
        if not self.active:
            return RuleState.PAUSED
        if self.last_processed is None:
            return RuleState.PENDING_FIRST_RUN
        return RuleState.ACTIVE_CYCLING


@dataclass(frozen=True)
class ProcessingSummary:
    """Aggregate result of one batch pass.

    ``processed`` counts materialized rules, ``errors`` counts rules whose
    processing raised, ``skipped`` counts active rules that were not due.
    """

    processed: int = 0
    errors: int = 0
    skipped: int = 0
    reference_date: date | None = None

    @property
    def total(self) -> int:
        return self.processed + self.errors + self.skipped

    @property
    def message(self) -> str:
        return (
            f"Processed {self.processed} recurring transactions "
            f"with {self.errors} errors"
        )

    def as_dict(self) -> dict[str, int]:
        return {"processed": self.processed, "errors": self.errors}
