"""
Typed exception hierarchy for the budget kernel.

Every error is a typed class with a ``code`` class attribute (machine-readable,
API-safe) and carries its context as attributes rather than only inside the
message string, so callers catch by type and log structured data:

    try:
        service.create(...)
    except RuleValidationError as e:
        respond(code=e.code, errors=e.messages)

Hierarchy:

    BudgetKernelError (base)
    |
    +-- ValidationError
    |   +-- FieldValidationError
    |   |   +-- RuleValidationError
    |   |   +-- TransactionValidationError
    |   |   +-- BudgetValidationError
    |   +-- RuleNotDueError
    |
    +-- StorageError
    |
    +-- RecurringRuleNotFoundError
    +-- TransactionNotFoundError
    +-- BudgetNotFoundError
    |
    +-- ConcurrencyError
        +-- OptimisticLockError
        +-- RecurringRunInProgressError

Error codes:

Category     | Code                          | When Raised
-------------|-------------------------------|---------------------------------------
Validation   | FIELD_VALIDATION_FAILED       | Base of the per-record field errors
             | RULE_VALIDATION_FAILED        | Rule create/update with bad fields
             | TRANSACTION_VALIDATION_FAILED | Transaction create/update with bad fields
             | BUDGET_VALIDATION_FAILED      | Budget create/update with bad fields
             | RULE_NOT_DUE                  | Materializing a rule that is not due
Storage      | STORAGE_ERROR                 | Store read/write failed
Lookup       | RECURRING_RULE_NOT_FOUND      | Rule ID doesn't exist
             | TRANSACTION_NOT_FOUND         | Transaction ID doesn't exist
             | BUDGET_NOT_FOUND              | Budget ID doesn't exist
Concurrency  | OPTIMISTIC_LOCK_CONFLICT      | Rule changed since it was read
             | RECURRING_RUN_IN_PROGRESS     | A processing pass is already running
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date


class BudgetKernelError(Exception):
    """
    Base exception for all budget kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "BUDGET_KERNEL_ERROR"


# Validation


class ValidationError(BudgetKernelError):
    """Base exception for rejected input."""

    code: str = "VALIDATION_ERROR"


class FieldValidationError(ValidationError):
    """One or more fields of a user-supplied record are missing or invalid.

    ``messages`` holds one human-readable message per failing field.
    """

    code: str = "FIELD_VALIDATION_FAILED"
    subject: str = "record"

    def __init__(self, messages: Sequence[str]):
        self.messages = tuple(messages)
        super().__init__(f"Invalid {self.subject}: " + "; ".join(self.messages))


class RuleValidationError(FieldValidationError):
    """A recurring rule is malformed (missing or invalid fields)."""

    code: str = "RULE_VALIDATION_FAILED"
    subject: str = "recurring rule"


class TransactionValidationError(FieldValidationError):
    """A ledger transaction is malformed."""

    code: str = "TRANSACTION_VALIDATION_FAILED"
    subject: str = "transaction"


class BudgetValidationError(FieldValidationError):
    """A category budget is malformed or clashes with another budget."""

    code: str = "BUDGET_VALIDATION_FAILED"
    subject: str = "budget"


class RuleNotDueError(ValidationError):
    """Materialization was requested for a rule that is not due."""

    code: str = "RULE_NOT_DUE"

    def __init__(self, rule_id: str, reference_date: date):
        self.rule_id = rule_id
        self.reference_date = reference_date
        super().__init__(
            f"Recurring rule {rule_id} is not due as of {reference_date.isoformat()}"
        )


# Storage


class StorageError(BudgetKernelError):
    """A rule or transaction store failed a read or write."""

    code: str = "STORAGE_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage failure during {operation}: {detail}")


class RecurringRuleNotFoundError(BudgetKernelError):
    """Recurring rule with given ID was not found."""

    code: str = "RECURRING_RULE_NOT_FOUND"

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Recurring rule not found: {rule_id}")


class TransactionNotFoundError(BudgetKernelError):
    """Ledger transaction with given ID was not found."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class BudgetNotFoundError(BudgetKernelError):
    """Budget with given ID was not found."""

    code: str = "BUDGET_NOT_FOUND"

    def __init__(self, budget_id: str):
        self.budget_id = budget_id
        super().__init__(f"Budget not found: {budget_id}")


# Concurrency


class ConcurrencyError(BudgetKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Optimistic locking conflict detected."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )


class RecurringRunInProgressError(ConcurrencyError):
    """A recurring processing pass is already running."""

    code: str = "RECURRING_RUN_IN_PROGRESS"

    def __init__(self) -> None:
        super().__init__("A recurring processing pass is already running")
