"""
SQLAlchemy implementations of the scheduler's store protocols.

Contract:
    Both stores share the caller's Session and only ``flush()`` -- they never
    commit or roll back.  Driver and ORM failures are re-raised as
    ``StorageError`` with the original exception chained.

Invariants enforced:
    - ``SqlRecurringRuleStore.save`` is a read-modify-write against the rule
      id guarded by the stored ``version`` (optimistic lock).
"""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock
from budget_kernel.domain.types import LedgerTransaction, TransactionDraft
from budget_kernel.exceptions import (
    OptimisticLockError,
    RecurringRuleNotFoundError,
    StorageError,
)
from budget_kernel.logging_config import get_logger
from budget_kernel.models.transaction import TransactionModel

from budget_recurring.domain.types import RecurringRule
from budget_recurring.models.recurring_rule import RecurringRuleModel, frequency_value

logger = get_logger("recurring.stores")


class SqlRecurringRuleStore:
    """RecurringRuleStore backed by the ``recurring_rules`` table."""

    def __init__(self, session: Session):
        self._session = session

    def find_active(self) -> list[RecurringRule]:
        try:
            models = self._session.execute(
                select(RecurringRuleModel)
                .where(RecurringRuleModel.active == True)  # noqa: E712
                .order_by(RecurringRuleModel.created_at, RecurringRuleModel.id)
            ).scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError("find_active", str(exc)) from exc
        return [m.to_dto() for m in models]

    def get(self, rule_id) -> RecurringRule:
        """Load one rule by id.

        Raises:
            RecurringRuleNotFoundError: If no rule has this id.
        """
        try:
            model = self._session.get(RecurringRuleModel, rule_id)
        except SQLAlchemyError as exc:
            raise StorageError("get", str(exc)) from exc
        if model is None:
            raise RecurringRuleNotFoundError(str(rule_id))
        return model.to_dto()

    def save(self, rule: RecurringRule) -> RecurringRule:
        new_version = rule.version + 1
        try:
            result = self._session.execute(
                update(RecurringRuleModel)
                .where(
                    RecurringRuleModel.id == rule.id,
                    RecurringRuleModel.version == rule.version,
                )
                .values(
                    description=rule.description,
                    amount=rule.amount,
                    category=rule.category,
                    frequency=frequency_value(rule.frequency),
                    start_date=rule.start_date,
                    last_processed=rule.last_processed,
                    active=rule.active,
                    version=new_version,
                )
                .execution_options(synchronize_session="evaluate")
            )
            updated = result.rowcount
            exists = updated > 0 or self._session.execute(
                select(RecurringRuleModel.id).where(RecurringRuleModel.id == rule.id)
            ).scalar_one_or_none() is not None
        except SQLAlchemyError as exc:
            raise StorageError("save", str(exc)) from exc

        if updated == 0:
            if not exists:
                raise RecurringRuleNotFoundError(str(rule.id))
            logger.warning(
                "recurring_rule_version_conflict",
                extra={"rule_id": str(rule.id), "expected_version": rule.version},
            )
            raise OptimisticLockError("RecurringRule", str(rule.id))

        return replace(rule, version=new_version)


class SqlTransactionStore:
    """TransactionStore backed by the ``transactions`` table."""

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock

    def create(self, draft: TransactionDraft) -> LedgerTransaction:
        created_at = self._clock.now() if self._clock is not None else None
        model = TransactionModel.from_draft(draft, created_at=created_at)
        try:
            self._session.add(model)
            self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("create_transaction", str(exc)) from exc
        return model.to_dto()
