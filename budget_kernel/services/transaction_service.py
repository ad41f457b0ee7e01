"""
TransactionService -- record, correct and remove one-off ledger transactions.

Contract:
    Manual bookkeeping next to the recurring scheduler: a user records an
    income (positive amount) or expense (negative amount) directly.  Every
    write validates the complete resulting transaction and raises a
    ``TransactionValidationError`` listing all problems.  Returns
    ``LedgerTransaction`` DTOs, never ORM rows.

Non-goals:
    - Does NOT call ``session.commit()`` -- caller controls boundaries.
    - Transactions carry no link to a recurring rule, so editing or deleting
      one never affects scheduling.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.types import LedgerTransaction, TransactionDraft
from budget_kernel.domain.validation import validate_transaction_fields
from budget_kernel.exceptions import (
    StorageError,
    TransactionNotFoundError,
    TransactionValidationError,
)
from budget_kernel.logging_config import get_logger
from budget_kernel.models.transaction import TransactionModel
from budget_kernel.selectors.transaction_selector import TransactionSelector

logger = get_logger("services.transactions")

UPDATABLE_FIELDS = frozenset({"description", "amount", "category", "date"})


class TransactionService:
    """Manage ledger transactions within the caller's session."""

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()

    def _get_model(self, transaction_id: UUID) -> TransactionModel:
        try:
            model = self._session.get(TransactionModel, transaction_id)
        except SQLAlchemyError as exc:
            raise StorageError("get_transaction", str(exc)) from exc
        if model is None:
            raise TransactionNotFoundError(str(transaction_id))
        return model

    def _flush(self, operation: str) -> None:
        try:
            self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(operation, str(exc)) from exc

    def create(
        self,
        description: str,
        amount: Decimal | int | str,
        category: str,
        on: dt.date | str | None = None,
    ) -> LedgerTransaction:
        """Record a transaction dated ``on`` (default: the clock's today).

        Raises:
            TransactionValidationError: If any field is missing or invalid.
        """
        text, value, tag, when = validate_transaction_fields(
            description, amount, category, on if on is not None else self._clock.today(),
        )
        model = TransactionModel.from_draft(
            TransactionDraft(description=text, amount=value, category=tag, date=when),
            created_at=self._clock.now(),
        )
        self._session.add(model)
        self._flush("create_transaction")

        logger.info(
            "transaction_created",
            extra={
                "transaction_id": str(model.id),
                "amount": value,
                "category": tag,
                "date": when,
            },
        )
        return model.to_dto()

    def get(self, transaction_id: UUID) -> LedgerTransaction:
        """Raises TransactionNotFoundError if the id is unknown."""
        return self._get_model(transaction_id).to_dto()

    def list_transactions(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
        category: str | None = None,
    ) -> list[LedgerTransaction]:
        return TransactionSelector(self._session).list_transactions(
            start=start, end=end, category=category,
        )

    def update(self, transaction_id: UUID, **changes: Any) -> LedgerTransaction:
        """Apply ``changes`` (description, amount, category, date).

        Raises:
            TransactionValidationError: On unknown fields or invalid values.
            TransactionNotFoundError: If the id is unknown.
        """
        forbidden = sorted(set(changes) - UPDATABLE_FIELDS)
        if forbidden:
            raise TransactionValidationError(
                [f"Field '{name}' cannot be updated" for name in forbidden]
            )

        model = self._get_model(transaction_id)
        text, value, tag, when = validate_transaction_fields(
            changes.get("description", model.description),
            changes.get("amount", model.amount),
            changes.get("category", model.category),
            changes.get("date", model.date),
        )
        model.description = text
        model.amount = value
        model.category = tag
        model.date = when
        self._flush("update_transaction")

        logger.info(
            "transaction_updated",
            extra={"transaction_id": str(transaction_id), "fields": sorted(changes)},
        )
        return model.to_dto()

    def delete(self, transaction_id: UUID) -> None:
        """Raises TransactionNotFoundError if the id is unknown."""
        model = self._get_model(transaction_id)
        self._session.delete(model)
        self._flush("delete_transaction")
        logger.info("transaction_deleted", extra={"transaction_id": str(transaction_id)})
