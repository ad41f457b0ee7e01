"""
Module: budget_kernel.selectors.transaction_selector
Responsibility: Read-only queries over ledger transactions.
Architecture position: Kernel > Selectors.  Selectors NEVER create, modify,
    or delete data; the caller owns the session and its transaction scope.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from budget_kernel.domain.types import LedgerTransaction
from budget_kernel.models.transaction import TransactionModel


class TransactionSelector:
    """Query ledger transactions, returning LedgerTransaction DTOs."""

    def __init__(self, session: Session):
        self.session = session

    def list_transactions(
        self,
        start: date | None = None,
        end: date | None = None,
        category: str | None = None,
    ) -> list[LedgerTransaction]:
        """
        List transactions ordered by date, then creation time.

        Args:
            start: Inclusive lower date bound.
            end: Inclusive upper date bound.
            category: Exact category match.
        """
        stmt = select(TransactionModel)
        if start is not None:
            stmt = stmt.where(TransactionModel.date >= start)
        if end is not None:
            stmt = stmt.where(TransactionModel.date <= end)
        if category is not None:
            stmt = stmt.where(TransactionModel.category == category)
        stmt = stmt.order_by(TransactionModel.date, TransactionModel.created_at)

        return [m.to_dto() for m in self.session.execute(stmt).scalars()]

    def count(self) -> int:
        return self.session.execute(
            select(func.count()).select_from(TransactionModel)
        ).scalar_one()
