"""
ORM model for category budgets.

Contract:
    BudgetModel persists one spending limit per category (``category`` is
    unique).  ``to_dto()`` converts to ``budget_kernel.domain.types.Budget``.

Architecture: budget_kernel/models.  Imports from budget_kernel.db.base only.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TimestampedBase
from budget_kernel.domain.types import Budget, BudgetPeriod


class BudgetModel(TimestampedBase):
    """Persistent category budget."""

    __tablename__ = "budgets"

    __table_args__ = (
        UniqueConstraint("category", name="uq_budgets_category"),
    )

    category: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    period: Mapped[str] = mapped_column(String(10), nullable=False, default="monthly")

    def to_dto(self) -> Budget:
        return Budget(
            id=self.id,
            category=self.category,
            amount=self.amount,
            period=BudgetPeriod.parse(self.period) or BudgetPeriod.MONTHLY,
            created_at=self.created_at,
        )
