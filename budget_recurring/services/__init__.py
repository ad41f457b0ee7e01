"""Scheduler services: materializer, batch runner and rule management."""

from budget_recurring.services.materializer import Materializer
from budget_recurring.services.rule_service import RecurringRuleService
from budget_recurring.services.runner import RecurringBatchRunner

__all__ = [
    "Materializer",
    "RecurringBatchRunner",
    "RecurringRuleService",
]
