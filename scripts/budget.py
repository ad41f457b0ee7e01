#!/usr/bin/env python3
"""
Manage one-off ledger transactions and category budgets.

Usage:
    python3 scripts/budget.py [--config FILE] txn <command> [options]
    python3 scripts/budget.py [--config FILE] budget <command> [options]

Examples:
    # Record an expense (negative) or income (positive), dated today
    python3 scripts/budget.py txn add --description Groceries --amount -82.40 \\
        --category Food

    # Correct or remove a transaction
    python3 scripts/budget.py txn update 6f1c... --amount -80.00
    python3 scripts/budget.py txn delete 6f1c...

    # Transactions for one category in January
    python3 scripts/budget.py txn list --category Food --from 2024-01-01 --to 2024-01-31

    # Set (or replace) the monthly food budget
    python3 scripts/budget.py budget set --category Food --amount 400

    # List budgets
    python3 scripts/budget.py budget list
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from uuid import UUID

from budget_config import get_settings
from budget_kernel.db.engine import session_scope
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.types import Budget, BudgetPeriod, LedgerTransaction
from budget_kernel.exceptions import BudgetKernelError
from budget_kernel.services import BudgetService, TransactionService

from budget_recurring.orchestrator import run_startup_processing


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a date (YYYY-MM-DD): {value!r}") from None


def _add_txn_commands(sub: argparse._SubParsersAction) -> None:
    txn = sub.add_parser("txn", help="One-off ledger transactions.")
    cmds = txn.add_subparsers(dest="action", required=True)

    add = cmds.add_parser("add", help="Record a transaction.")
    add.add_argument("--description", required=True)
    add.add_argument("--amount", required=True, help="Negative for expenses.")
    add.add_argument("--category", required=True)
    add.add_argument("--date", dest="on", type=_iso_date, default=None)

    show = cmds.add_parser("show", help="Show one transaction.")
    show.add_argument("transaction_id", type=UUID)

    update = cmds.add_parser("update", help="Change fields of a transaction.")
    update.add_argument("transaction_id", type=UUID)
    update.add_argument("--description")
    update.add_argument("--amount")
    update.add_argument("--category")
    update.add_argument("--date", dest="on", type=_iso_date)

    delete = cmds.add_parser("delete", help="Delete a transaction.")
    delete.add_argument("transaction_id", type=UUID)

    listing = cmds.add_parser("list", help="List transactions by date.")
    listing.add_argument("--from", dest="start", type=_iso_date, default=None)
    listing.add_argument("--to", dest="end", type=_iso_date, default=None)
    listing.add_argument("--category", default=None)


def _add_budget_commands(sub: argparse._SubParsersAction) -> None:
    budget = sub.add_parser("budget", help="Per-category budgets.")
    cmds = budget.add_subparsers(dest="action", required=True)
    periods = [p.value for p in BudgetPeriod]

    set_cmd = cmds.add_parser("set", help="Create or replace a category budget.")
    set_cmd.add_argument("--category", required=True)
    set_cmd.add_argument("--amount", required=True)
    set_cmd.add_argument("--period", choices=periods, default=None)

    cmds.add_parser("list", help="List budgets by category.")

    show = cmds.add_parser("show", help="Show one budget.")
    show.add_argument("budget_id", type=UUID)

    update = cmds.add_parser("update", help="Change fields of a budget.")
    update.add_argument("budget_id", type=UUID)
    update.add_argument("--category")
    update.add_argument("--amount")
    update.add_argument("--period", choices=periods)

    delete = cmds.add_parser("delete", help="Delete a budget.")
    delete.add_argument("budget_id", type=UUID)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ledger transactions and category budgets.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML file (default: $BUDGET_CONFIG_FILE or the bundled default).",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    _add_txn_commands(sub)
    _add_budget_commands(sub)
    return parser


def _format_txn(txn: LedgerTransaction) -> str:
    return (
        f"{txn.id}  {txn.date.isoformat()}  {txn.description:<24} "
        f"{txn.amount:>12}  {txn.category}"
    )


def _format_budget(budget: Budget) -> str:
    return f"{budget.id}  {budget.category:<16} {budget.amount:>12}  {budget.period.value}"


def _changes(args: argparse.Namespace, names: dict[str, str]) -> dict:
    """Collect options the user actually gave, keyed by service field name."""
    return {
        field: getattr(args, attr)
        for attr, field in names.items()
        if getattr(args, attr) is not None
    }


def _run_txn(args: argparse.Namespace, service: TransactionService) -> None:
    if args.action == "add":
        txn = service.create(args.description, args.amount, args.category, args.on)
        print(f"Created {_format_txn(txn)}")

    elif args.action == "show":
        print(_format_txn(service.get(args.transaction_id)))

    elif args.action == "update":
        changes = _changes(args, {
            "description": "description",
            "amount": "amount",
            "category": "category",
            "on": "date",
        })
        print(f"Updated {_format_txn(service.update(args.transaction_id, **changes))}")

    elif args.action == "delete":
        service.delete(args.transaction_id)
        print(f"Deleted {args.transaction_id}")

    elif args.action == "list":
        transactions = service.list_transactions(
            start=args.start, end=args.end, category=args.category,
        )
        if not transactions:
            print("No transactions.")
        for txn in transactions:
            print(_format_txn(txn))


def _run_budget(args: argparse.Namespace, service: BudgetService) -> None:
    if args.action == "set":
        budget = service.set_budget(args.category, args.amount, args.period)
        print(f"Saved {_format_budget(budget)}")

    elif args.action == "list":
        budgets = service.list_budgets()
        if not budgets:
            print("No budgets.")
        for budget in budgets:
            print(_format_budget(budget))

    elif args.action == "show":
        print(_format_budget(service.get(args.budget_id)))

    elif args.action == "update":
        changes = _changes(args, {
            "category": "category",
            "amount": "amount",
            "period": "period",
        })
        print(f"Updated {_format_budget(service.update(args.budget_id, **changes))}")

    elif args.action == "delete":
        service.delete(args.budget_id)
        print(f"Deleted {args.budget_id}")


def run(args: argparse.Namespace, clock: Clock) -> int:
    """Execute a parsed command after the application start hook."""
    run_startup_processing(get_settings(args.config), clock=clock)

    with session_scope() as session:
        if args.command == "txn":
            _run_txn(args, TransactionService(session, clock=clock))
        else:
            _run_budget(args, BudgetService(session, clock=clock))

    return 0


def main(argv: list[str] | None = None, clock: Clock | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        return run(args, clock or SystemClock())
    except BudgetKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
