"""
Store protocols the recurring scheduler depends on.

Contract:
    ``RecurringRuleStore`` loads the active rule set and saves an updated rule
    snapshot by id.  ``TransactionStore`` creates ledger transactions.  The
    scheduler only ever sees these protocols; SQLAlchemy implementations live
    in ``budget_recurring.stores.sql``.

Non-goals:
    - Stores do NOT commit -- the caller owns transaction boundaries.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from budget_kernel.domain.types import LedgerTransaction, TransactionDraft

from budget_recurring.domain.types import RecurringRule


@runtime_checkable
class RecurringRuleStore(Protocol):
    """Persistence boundary for recurring rules."""

    def find_active(self) -> list[RecurringRule]:
        """Return every rule whose ``active`` flag is true.

        Raises:
            StorageError: If the rule set cannot be loaded.
        """
        ...

    def save(self, rule: RecurringRule) -> RecurringRule:
        """Persist ``rule`` over the stored row with the same id.

        The write only applies if the stored version still equals
        ``rule.version``; the returned snapshot carries the new version.

        Raises:
            OptimisticLockError: If the stored rule changed since it was read.
            RecurringRuleNotFoundError: If the rule no longer exists.
            StorageError: If the write fails.
        """
        ...


@runtime_checkable
class TransactionStore(Protocol):
    """Persistence boundary for ledger transactions."""

    def create(self, draft: TransactionDraft) -> LedgerTransaction:
        """Insert a new transaction and return its stored snapshot.

        Raises:
            StorageError: If the write fails.
        """
        ...
