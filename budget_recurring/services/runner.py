"""
RecurringBatchRunner -- one processing pass over all active rules.

Contract:
    ``process_all(reference_date)`` loads the active rule set, evaluates each
    rule with ``is_due()`` (pure) and materializes the due ones.  Returns a
    ``ProcessingSummary`` with processed / errors / skipped counts.

Invariants enforced:
    - Per-rule failure isolation: an exception while handling one rule is
      logged and counted, and the pass continues with the next rule.
    - Optional isolation context per rule (the SQL wiring passes
      ``session.begin_nested``) so a failed rule leaves no partial writes.
    - Inactive rules are never evaluated: only ``find_active()`` is consulted.

Failure modes:
    - Failure to load the rule set propagates; no partial result is returned.

Non-goals:
    - Does NOT catch up missed periods: at most one transaction per rule per
      pass.
    - Does NOT serialize concurrent passes -- the orchestrator does.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from datetime import date
from uuid import uuid4

from budget_kernel.logging_config import LogContext, get_logger

from budget_recurring.domain.schedule import is_due
from budget_recurring.domain.types import ProcessingSummary
from budget_recurring.services.materializer import Materializer
from budget_recurring.stores.base import RecurringRuleStore, TransactionStore

logger = get_logger("recurring.runner")


class RecurringBatchRunner:
    """Sequential batch pass with per-rule failure isolation."""

    def __init__(
        self,
        rule_store: RecurringRuleStore,
        transaction_store: TransactionStore,
        isolation: Callable[[], AbstractContextManager] | None = None,
    ):
        self._rule_store = rule_store
        self._materializer = Materializer(rule_store, transaction_store)
        self._isolation = isolation or nullcontext

    def process_all(self, reference_date: date) -> ProcessingSummary:
        """Run one pass as of ``reference_date``.

        Raises:
            StorageError: If the active rule set cannot be loaded.
        """
        run_id = str(uuid4())
        with LogContext.bind(run_id=run_id):
            rules = self._rule_store.find_active()

            logger.info(
                "recurring_run_started",
                extra={"reference_date": reference_date, "active_rules": len(rules)},
            )

            processed = 0
            errors = 0
            skipped = 0

            for rule in rules:
                with LogContext.bind(rule_id=str(rule.id)):
                    try:
                        with self._isolation():
                            if not is_due(rule, reference_date):
                                skipped += 1
                                continue
                            self._materializer.materialize(rule, reference_date)
                        processed += 1
                    except Exception:
                        errors += 1
                        logger.exception(
                            "recurring_rule_failed",
                            extra={"reference_date": reference_date},
                        )

            summary = ProcessingSummary(
                processed=processed,
                errors=errors,
                skipped=skipped,
                reference_date=reference_date,
            )

            logger.info(
                "recurring_run_completed",
                extra={
                    "reference_date": reference_date,
                    "processed": processed,
                    "errors": errors,
                    "skipped": skipped,
                },
            )

        return summary
