"""
RecurringRuleService -- create, read, update, pause/resume and delete rules.

Contract:
    User-facing management of recurring rules.  Every write validates the
    complete resulting rule (``RuleValidationError`` lists all problems).
    Updates are read-modify-write against the rule id through
    ``SqlRecurringRuleStore.save`` and therefore carry the optimistic
    version check.

Invariants enforced:
    - ``last_processed`` is never writable here; only the Materializer
      advances it.
    - Pausing and resuming keep ``last_processed`` unchanged.

Non-goals:
    - Does NOT call ``session.commit()`` -- caller controls boundaries.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.exceptions import RuleValidationError, StorageError
from budget_kernel.logging_config import get_logger

from budget_recurring.domain.types import Frequency, RecurringRule
from budget_recurring.domain.validation import validate_rule_fields
from budget_recurring.models.recurring_rule import RecurringRuleModel
from budget_recurring.stores.sql import SqlRecurringRuleStore

logger = get_logger("recurring.rule_service")

UPDATABLE_FIELDS = frozenset(
    {"description", "amount", "category", "frequency", "start_date", "active"}
)


class RecurringRuleService:
    """Manage recurring rules within the caller's session."""

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()
        self._store = SqlRecurringRuleStore(session)

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create(
        self,
        description: str,
        amount: Decimal | int | str,
        category: str,
        frequency: Frequency | str = Frequency.MONTHLY,
        start_date: date | str | None = None,
        active: bool = True,
    ) -> RecurringRule:
        """Create a rule.  ``start_date`` defaults to the clock's today.

        Raises:
            RuleValidationError: If any field is missing or invalid.
        """
        if not isinstance(active, bool):
            raise RuleValidationError(["Active must be true or false"])

        text, value, tag, freq, start = validate_rule_fields(
            description,
            amount,
            category,
            frequency,
            start_date if start_date is not None else self._clock.today(),
        )

        rule = RecurringRule(
            id=uuid4(),
            description=text,
            amount=value,
            category=tag,
            frequency=freq,
            start_date=start,
            last_processed=None,
            active=active,
            version=1,
            created_at=self._clock.now(),
        )

        try:
            self._session.add(RecurringRuleModel.from_dto(rule))
            self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("create_rule", str(exc)) from exc

        logger.info(
            "recurring_rule_created",
            extra={
                "rule_id": str(rule.id),
                "frequency": freq.value,
                "start_date": start,
                "active": active,
            },
        )
        return rule

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, rule_id: UUID) -> RecurringRule:
        """Raises RecurringRuleNotFoundError if the id is unknown."""
        return self._store.get(rule_id)

    def list_rules(self) -> list[RecurringRule]:
        """All rules, newest first."""
        try:
            models = self._session.execute(
                select(RecurringRuleModel).order_by(
                    RecurringRuleModel.created_at.desc(), RecurringRuleModel.id,
                )
            ).scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError("list_rules", str(exc)) from exc
        return [m.to_dto() for m in models]

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update(self, rule_id: UUID, **changes: Any) -> RecurringRule:
        """Apply ``changes`` to a rule and save it.

        Raises:
            RuleValidationError: On unknown/forbidden fields or invalid values.
            RecurringRuleNotFoundError: If the id is unknown.
            OptimisticLockError: If the rule changed concurrently.
        """
        forbidden = sorted(set(changes) - UPDATABLE_FIELDS)
        if forbidden:
            raise RuleValidationError(
                [f"Field '{name}' cannot be updated" for name in forbidden]
            )
        if "active" in changes and not isinstance(changes["active"], bool):
            raise RuleValidationError(["Active must be true or false"])

        current = self._store.get(rule_id)

        text, value, tag, freq, start = validate_rule_fields(
            changes.get("description", current.description),
            changes.get("amount", current.amount),
            changes.get("category", current.category),
            changes.get("frequency", current.frequency),
            changes.get("start_date", current.start_date),
            last_processed=current.last_processed,
        )

        updated = self._store.save(
            replace(
                current,
                description=text,
                amount=value,
                category=tag,
                frequency=freq,
                start_date=start,
                active=changes.get("active", current.active),
            )
        )

        logger.info(
            "recurring_rule_updated",
            extra={
                "rule_id": str(rule_id),
                "fields": sorted(changes),
                "version": updated.version,
            },
        )
        return updated

    def set_active(self, rule_id: UUID, active: bool) -> RecurringRule:
        """Pause (``active=False``) or resume a rule; ``last_processed`` is kept."""
        current = self._store.get(rule_id)
        if current.active == active:
            return current
        updated = self._store.save(replace(current, active=active))
        logger.info(
            "recurring_rule_resumed" if active else "recurring_rule_paused",
            extra={"rule_id": str(rule_id), "last_processed": current.last_processed},
        )
        return updated

    def pause(self, rule_id: UUID) -> RecurringRule:
        return self.set_active(rule_id, False)

    def resume(self, rule_id: UUID) -> RecurringRule:
        return self.set_active(rule_id, True)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(self, rule_id: UUID) -> None:
        """Remove a rule.  Transactions it produced are left untouched.

        Raises:
            RecurringRuleNotFoundError: If the id is unknown.
        """
        self._store.get(rule_id)
        try:
            model = self._session.get(RecurringRuleModel, rule_id)
            self._session.delete(model)
            self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("delete_rule", str(exc)) from exc
        logger.info("recurring_rule_deleted", extra={"rule_id": str(rule_id)})
