"""
BudgetService -- per-category spending limits.

Contract:
    ``set_budget`` is an upsert keyed on category: setting a budget for a
    category that already has one replaces its amount and period (period
    falls back to monthly when not given), otherwise a new budget is
    created.  Listings are ordered by category.

Invariants enforced:
    - At most one budget per category (also a unique constraint).
    - Amounts are positive and quantized to cents.

Non-goals:
    - Does NOT call ``session.commit()`` -- caller controls boundaries.
    - Does NOT compare spending against limits.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.types import Budget, BudgetPeriod
from budget_kernel.domain.validation import validate_budget_fields
from budget_kernel.exceptions import (
    BudgetNotFoundError,
    BudgetValidationError,
    StorageError,
)
from budget_kernel.logging_config import get_logger
from budget_kernel.models.budget import BudgetModel

logger = get_logger("services.budgets")

UPDATABLE_FIELDS = frozenset({"category", "amount", "period"})


class BudgetService:
    """Manage category budgets within the caller's session."""

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _get_model(self, budget_id: UUID) -> BudgetModel:
        try:
            model = self._session.get(BudgetModel, budget_id)
        except SQLAlchemyError as exc:
            raise StorageError("get_budget", str(exc)) from exc
        if model is None:
            raise BudgetNotFoundError(str(budget_id))
        return model

    def _find_by_category(self, category: str) -> BudgetModel | None:
        try:
            return self._session.execute(
                select(BudgetModel).where(BudgetModel.category == category)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError("find_budget", str(exc)) from exc

    def _flush(self, operation: str) -> None:
        try:
            self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(operation, str(exc)) from exc

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def set_budget(
        self,
        category: str,
        amount: Decimal | int | str,
        period: BudgetPeriod | str | None = None,
    ) -> Budget:
        """Create or replace the budget for ``category``.

        Raises:
            BudgetValidationError: If any field is missing or invalid.
        """
        tag, value, parsed = validate_budget_fields(
            category, amount, period if period is not None else BudgetPeriod.MONTHLY,
        )

        model = self._find_by_category(tag)
        created = model is None
        if created:
            model = BudgetModel(category=tag, amount=value, period=parsed.value)
            model.created_at = self._clock.now()
            self._session.add(model)
        else:
            model.amount = value
            model.period = parsed.value
        self._flush("set_budget")

        logger.info(
            "budget_created" if created else "budget_replaced",
            extra={
                "budget_id": str(model.id),
                "category": tag,
                "amount": value,
                "period": parsed.value,
            },
        )
        return model.to_dto()

    def update(self, budget_id: UUID, **changes: Any) -> Budget:
        """Apply ``changes`` (category, amount, period).

        Raises:
            BudgetValidationError: On unknown fields, invalid values, or a
                category that already has another budget.
            BudgetNotFoundError: If the id is unknown.
        """
        forbidden = sorted(set(changes) - UPDATABLE_FIELDS)
        if forbidden:
            raise BudgetValidationError(
                [f"Field '{name}' cannot be updated" for name in forbidden]
            )

        model = self._get_model(budget_id)
        tag, value, parsed = validate_budget_fields(
            changes.get("category", model.category),
            changes.get("amount", model.amount),
            changes.get("period", model.period),
        )
        other = self._find_by_category(tag)
        if other is not None and other.id != model.id:
            raise BudgetValidationError([f"A budget for category '{tag}' already exists"])

        model.category = tag
        model.amount = value
        model.period = parsed.value
        self._flush("update_budget")

        logger.info(
            "budget_updated",
            extra={"budget_id": str(budget_id), "fields": sorted(changes)},
        )
        return model.to_dto()

    def delete(self, budget_id: UUID) -> None:
        """Raises BudgetNotFoundError if the id is unknown."""
        model = self._get_model(budget_id)
        self._session.delete(model)
        self._flush("delete_budget")
        logger.info("budget_deleted", extra={"budget_id": str(budget_id)})

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, budget_id: UUID) -> Budget:
        return self._get_model(budget_id).to_dto()

    def list_budgets(self) -> list[Budget]:
        try:
            models = self._session.execute(
                select(BudgetModel).order_by(BudgetModel.category)
            ).scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError("list_budgets", str(exc)) from exc
        return [m.to_dto() for m in models]
