"""
ORM model for recurring-transaction rules.

Contract:
    RecurringRuleModel persists a rule and its scheduling marker.  ``to_dto()``
    / ``from_dto()`` round-trip with ``budget_recurring.domain.types.RecurringRule``.

Architecture: budget_recurring/models.  Imports from budget_kernel.db.base only.

Invariants enforced:
    - ``version`` is incremented by every persisted update; stores compare it
      to detect concurrent modification.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TimestampedBase

if TYPE_CHECKING:
    from budget_recurring.domain.types import RecurringRule


class RecurringRuleModel(TimestampedBase):
    """Persistent recurring rule."""

    __tablename__ = "recurring_rules"

    __table_args__ = (
        Index("ix_recurring_rules_active", "active"),
        Index("ix_recurring_rules_created_at", "created_at"),
    )

    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")
    start_date: Mapped[dt.date] = mapped_column(nullable=False)
    last_processed: Mapped[dt.date | None] = mapped_column(nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def to_dto(self) -> RecurringRule:
        from budget_recurring.domain.types import Frequency, RecurringRule

        return RecurringRule(
            id=self.id,
            description=self.description,
            amount=self.amount,
            category=self.category,
            frequency=Frequency.parse(self.frequency) or self.frequency,
            start_date=self.start_date,
            last_processed=self.last_processed,
            active=self.active,
            version=self.version,
            created_at=self.created_at,
        )

    @classmethod
    def from_dto(cls, dto: RecurringRule) -> RecurringRuleModel:
        model = cls(
            id=dto.id,
            description=dto.description,
            amount=dto.amount,
            category=dto.category,
            frequency=frequency_value(dto.frequency),
            start_date=dto.start_date,
            last_processed=dto.last_processed,
            active=dto.active,
            version=dto.version,
        )
        if dto.created_at is not None:
            model.created_at = dto.created_at
        return model


def frequency_value(frequency) -> str:
    """Storage form of a frequency (enum member or raw string)."""
    return frequency.value if hasattr(frequency, "value") else str(frequency)
