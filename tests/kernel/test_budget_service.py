"""Tests for budget_kernel.services.budget_service."""

from decimal import Decimal
from uuid import uuid4

import pytest

from budget_kernel.domain.types import BudgetPeriod
from budget_kernel.exceptions import BudgetNotFoundError, BudgetValidationError
from budget_kernel.services import BudgetService


@pytest.fixture
def service(db_session, clock):
    return BudgetService(db_session, clock=clock)


class TestSetBudget:
    def test_creates_with_monthly_default(self, service):
        budget = service.set_budget("Food", "400")

        assert budget.category == "Food"
        assert str(budget.amount) == "400.00"
        assert budget.period is BudgetPeriod.MONTHLY

    def test_same_category_replaces(self, service):
        first = service.set_budget("Food", "400", "weekly")

        second = service.set_budget(" Food ", "450")

        assert second.id == first.id
        assert second.amount == Decimal("450.00")
        assert second.period is BudgetPeriod.MONTHLY
        assert len(service.list_budgets()) == 1

    def test_rejects_non_positive_amount(self, service):
        with pytest.raises(BudgetValidationError, match="greater than zero"):
            service.set_budget("Food", "0")

    def test_rejects_unknown_period(self, service):
        with pytest.raises(BudgetValidationError, match="Period must be one of"):
            service.set_budget("Food", "400", "daily")

    def test_logs_create_then_replace(self, service, captured_logs):
        service.set_budget("Food", "400")
        service.set_budget("Food", "500")

        messages = [r["message"] for r in captured_logs() if r["message"].startswith("budget_")]
        assert messages == ["budget_created", "budget_replaced"]


class TestQueries:
    def test_list_ordered_by_category(self, service):
        service.set_budget("Travel", "100")
        service.set_budget("Food", "400")
        service.set_budget("Housing", "1200", "monthly")

        assert [b.category for b in service.list_budgets()] == ["Food", "Housing", "Travel"]

    def test_get_unknown(self, service):
        with pytest.raises(BudgetNotFoundError):
            service.get(uuid4())


class TestUpdate:
    def test_update_fields(self, service):
        budget = service.set_budget("Food", "400")

        updated = service.update(budget.id, amount="350", period="yearly")

        assert updated.amount == Decimal("350.00")
        assert updated.period is BudgetPeriod.YEARLY
        assert service.get(budget.id).period is BudgetPeriod.YEARLY

    def test_rename_onto_existing_category_rejected(self, service):
        service.set_budget("Food", "400")
        travel = service.set_budget("Travel", "100")

        with pytest.raises(BudgetValidationError, match="A budget for category 'Food' already exists"):
            service.update(travel.id, category="Food")

    def test_rename_to_own_category_allowed(self, service):
        budget = service.set_budget("Food", "400")
        assert service.update(budget.id, category=" Food ").category == "Food"

    def test_unknown_field_rejected(self, service):
        budget = service.set_budget("Food", "400")
        with pytest.raises(BudgetValidationError, match="Field 'spent' cannot be updated"):
            service.update(budget.id, spent="10")


class TestDelete:
    def test_delete(self, service):
        budget = service.set_budget("Food", "400")

        service.delete(budget.id)

        assert service.list_budgets() == []

    def test_delete_unknown(self, service):
        with pytest.raises(BudgetNotFoundError):
            service.delete(uuid4())
