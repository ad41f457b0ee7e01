"""Store protocols and their SQLAlchemy implementations."""

from budget_recurring.stores.base import RecurringRuleStore, TransactionStore
from budget_recurring.stores.sql import SqlRecurringRuleStore, SqlTransactionStore

__all__ = [
    "RecurringRuleStore",
    "SqlRecurringRuleStore",
    "SqlTransactionStore",
    "TransactionStore",
]
