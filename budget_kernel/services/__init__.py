"""Kernel services: one-off ledger transactions and category budgets."""

from budget_kernel.services.budget_service import BudgetService
from budget_kernel.services.transaction_service import TransactionService

__all__ = [
    "BudgetService",
    "TransactionService",
]
