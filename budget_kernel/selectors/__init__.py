"""Read-only query selectors returning frozen DTOs."""

from budget_kernel.selectors.transaction_selector import TransactionSelector

__all__ = ["TransactionSelector"]
