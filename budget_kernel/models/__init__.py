"""
budget_kernel.models -- ORM models owned by the kernel.

``import_all_orm_models()`` imports every ORM module in the application so
that ``Base.metadata`` knows all tables before ``create_all``.
"""

from budget_kernel.models.budget import BudgetModel
from budget_kernel.models.transaction import TransactionModel

__all__ = [
    "BudgetModel",
    "TransactionModel",
    "import_all_orm_models",
]


def import_all_orm_models() -> None:
    """Import all ORM model modules (kernel and recurring scheduler)."""
    import budget_kernel.models.budget  # noqa: F401
    import budget_kernel.models.transaction  # noqa: F401
    import budget_recurring.models.recurring_rule  # noqa: F401
