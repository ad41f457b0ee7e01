"""
ORM model for ledger transactions.

Contract:
    TransactionModel persists one income/expense entry.  ``to_dto()`` /
    ``from_draft()`` convert between the row and the frozen DTOs in
    ``budget_kernel.domain.types``.

Architecture: budget_kernel/models.  Imports from budget_kernel.db.base only.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TimestampedBase
from budget_kernel.domain.types import LedgerTransaction, TransactionDraft


class TransactionModel(TimestampedBase):
    """Persistent ledger transaction."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_category", "category"),
    )

    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    date: Mapped[dt.date] = mapped_column(nullable=False)

    def to_dto(self) -> LedgerTransaction:
        return LedgerTransaction(
            id=self.id,
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date,
            created_at=self.created_at,
        )

    @classmethod
    def from_draft(
        cls, draft: TransactionDraft, created_at: dt.datetime | None = None,
    ) -> TransactionModel:
        model = cls(
            description=draft.description,
            amount=draft.amount,
            category=draft.category,
            date=draft.date,
        )
        if created_at is not None:
            model.created_at = created_at
        return model
