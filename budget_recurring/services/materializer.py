"""
Materializer -- turns one due recurring rule into one ledger transaction.

Contract:
    ``materialize(rule, reference_date)`` creates exactly one transaction dated
    ``reference_date`` with description/amount/category copied from the rule,
    then saves the rule with ``last_processed = reference_date``.

Invariants enforced:
    - Never writes for a rule that is not due (``RuleNotDueError``).
    - ``last_processed`` only moves forward and never precedes ``start_date``
      (both follow from the due check).

Failure modes:
    - If the transaction insert succeeds and the rule save fails, the error
      propagates.  Whether the insert is undone depends on the caller's
      isolation (the SQL wiring runs each rule in a SAVEPOINT); without it the
      rule stays due and the next pass creates a duplicate (at-least-once).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from budget_kernel.domain.types import LedgerTransaction, TransactionDraft
from budget_kernel.exceptions import RuleNotDueError
from budget_kernel.logging_config import get_logger

from budget_recurring.domain.schedule import is_due
from budget_recurring.domain.types import RecurringRule
from budget_recurring.stores.base import RecurringRuleStore, TransactionStore

logger = get_logger("recurring.materializer")


class Materializer:
    """Creates the ledger transaction for a due rule and advances its marker."""

    def __init__(
        self,
        rule_store: RecurringRuleStore,
        transaction_store: TransactionStore,
    ):
        self._rule_store = rule_store
        self._transaction_store = transaction_store

    def materialize(
        self, rule: RecurringRule, reference_date: date,
    ) -> LedgerTransaction:
        """Materialize ``rule`` as of ``reference_date``.

        Raises:
            RuleNotDueError: If ``is_due(rule, reference_date)`` is false.
            StorageError / OptimisticLockError: From the stores.
        """
        if not is_due(rule, reference_date):
            raise RuleNotDueError(str(rule.id), reference_date)

        transaction = self._transaction_store.create(
            TransactionDraft(
                description=rule.description,
                amount=rule.amount,
                category=rule.category,
                date=reference_date,
            )
        )

        self._rule_store.save(replace(rule, last_processed=reference_date))

        logger.info(
            "recurring_rule_materialized",
            extra={
                "transaction_id": str(transaction.id),
                "amount": str(rule.amount),
                "category": rule.category,
                "previous_last_processed": rule.last_processed,
                "reference_date": reference_date,
            },
        )

        return transaction
