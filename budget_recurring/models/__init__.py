"""
budget_recurring.models -- ORM models for the recurring scheduler.

Architecture: budget_recurring/models. Imports from budget_kernel.db.base only.
"""

from budget_recurring.models.recurring_rule import RecurringRuleModel

__all__ = [
    "RecurringRuleModel",
]
