"""
In-memory store doubles for scheduler tests.

The doubles honour the store protocols, including the optimistic version
check, and can be told to fail on specific rules.
"""

from dataclasses import replace
from uuid import uuid4

import pytest

from budget_kernel.domain.types import LedgerTransaction, TransactionDraft
from budget_kernel.exceptions import (
    OptimisticLockError,
    RecurringRuleNotFoundError,
    StorageError,
)


class InMemoryRuleStore:
    """RecurringRuleStore keeping rules in a dict."""

    def __init__(self):
        self.rules = {}
        self.fail_on_save = set()
        self.fail_on_load = False
        self.load_calls = 0

    def add(self, *rules):
        for rule in rules:
            self.rules[rule.id] = rule

    def find_active(self):
        self.load_calls += 1
        if self.fail_on_load:
            raise StorageError("find_active", "rule store unreachable")
        return [r for r in self.rules.values() if r.active]

    def save(self, rule):
        if rule.id in self.fail_on_save:
            raise StorageError("save", "write rejected")
        stored = self.rules.get(rule.id)
        if stored is None:
            raise RecurringRuleNotFoundError(str(rule.id))
        if stored.version != rule.version:
            raise OptimisticLockError("RecurringRule", str(rule.id))
        saved = replace(rule, version=rule.version + 1)
        self.rules[rule.id] = saved
        return saved


class InMemoryTransactionStore:
    """TransactionStore appending to a list."""

    def __init__(self):
        self.created = []
        self.fail_for_descriptions = set()

    def create(self, draft: TransactionDraft) -> LedgerTransaction:
        if draft.description in self.fail_for_descriptions:
            raise StorageError("create_transaction", "insert rejected")
        txn = LedgerTransaction(
            id=uuid4(),
            description=draft.description,
            amount=draft.amount,
            category=draft.category,
            date=draft.date,
        )
        self.created.append(txn)
        return txn


@pytest.fixture
def rule_store():
    return InMemoryRuleStore()


@pytest.fixture
def transaction_store():
    return InMemoryTransactionStore()
