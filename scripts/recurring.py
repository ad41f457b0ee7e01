#!/usr/bin/env python3
"""
Manage recurring rules and run recurring processing from the command line.

Usage:
    python3 scripts/recurring.py [--config FILE] <command> [options]

Examples:
    # Materialize every due rule as of today
    python3 scripts/recurring.py process

    # Re-run as of a specific date
    python3 scripts/recurring.py process --as-of 2024-02-01

    # Add a monthly rent expense starting on the 1st
    python3 scripts/recurring.py add --description Rent --amount -1200 \\
        --category Housing --frequency monthly --start-date 2024-01-01

    # Pause / resume / delete a rule
    python3 scripts/recurring.py pause 6f1c...
    python3 scripts/recurring.py resume 6f1c...
    python3 scripts/recurring.py delete 6f1c...

    # Show ledger transactions in a date range
    python3 scripts/recurring.py transactions --from 2024-01-01 --to 2024-01-31
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from uuid import UUID

from budget_config import get_settings
from budget_kernel.db.engine import session_scope
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.exceptions import BudgetKernelError
from budget_kernel.selectors.transaction_selector import TransactionSelector

from budget_recurring.domain.types import Frequency, RecurringRule
from budget_recurring.orchestrator import RecurringOrchestrator, run_startup_processing
from budget_recurring.services.rule_service import RecurringRuleService


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a date (YYYY-MM-DD): {value!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recurring transaction rules and processing.",
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

    process = sub.add_parser("process", help="Run recurring processing now.")
    process.add_argument(
        "--as-of",
        type=_iso_date,
        default=None,
        help="Reference date (YYYY-MM-DD). Default: today.",
    )

    sub.add_parser("list", help="List recurring rules, newest first.")

    add = sub.add_parser("add", help="Create a recurring rule.")
    add.add_argument("--description", required=True)
    add.add_argument("--amount", required=True, help="Negative for expenses.")
    add.add_argument("--category", required=True)
    add.add_argument(
        "--frequency",
        default=Frequency.MONTHLY.value,
        choices=[f.value for f in Frequency],
    )
    add.add_argument("--start-date", type=_iso_date, default=None)
    add.add_argument("--inactive", action="store_true", help="Create paused.")

    for name, help_text in (
        ("pause", "Pause a rule."),
        ("resume", "Resume a paused rule."),
        ("delete", "Delete a rule."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("rule_id", type=UUID)

    txns = sub.add_parser("transactions", help="List ledger transactions.")
    txns.add_argument("--from", dest="start", type=_iso_date, default=None)
    txns.add_argument("--to", dest="end", type=_iso_date, default=None)

    return parser


def _format_rule(rule: RecurringRule) -> str:
    frequency = getattr(rule.frequency, "value", rule.frequency)
    last = rule.last_processed.isoformat() if rule.last_processed else "never"
    status = "active" if rule.active else "paused"
    return (
        f"{rule.id}  {rule.description:<24} {rule.amount:>12}  {rule.category:<16} "
        f"{frequency:<10} start={rule.start_date.isoformat()} last={last} [{status}]"
    )


def run(args: argparse.Namespace, clock: Clock) -> int:
    """Execute a parsed command against the configured database.

    Every command starts through ``run_startup_processing``, so due rules are
    materialized first when ``process_on_startup`` is set.  ``process`` skips
    that pass and runs its own, honoring ``--as-of``.
    """
    settings = get_settings(args.config)
    if args.command == "process":
        settings = replace(settings, process_on_startup=False)
    run_startup_processing(settings, clock=clock)

    with session_scope() as session:
        service = RecurringRuleService(session, clock=clock)

        if args.command == "process":
            orchestrator = RecurringOrchestrator.from_session(session, clock=clock)
            summary = orchestrator.run_now(args.as_of)
            print(summary.message)
            if summary.skipped:
                print(f"{summary.skipped} rule(s) not due")

        elif args.command == "list":
            rules = service.list_rules()
            if not rules:
                print("No recurring rules.")
            for rule in rules:
                print(_format_rule(rule))

        elif args.command == "add":
            rule = service.create(
                description=args.description,
                amount=args.amount,
                category=args.category,
                frequency=args.frequency,
                start_date=args.start_date,
                active=not args.inactive,
            )
            print(f"Created {_format_rule(rule)}")

        elif args.command == "pause":
            print(f"Paused {_format_rule(service.pause(args.rule_id))}")

        elif args.command == "resume":
            print(f"Resumed {_format_rule(service.resume(args.rule_id))}")

        elif args.command == "delete":
            service.delete(args.rule_id)
            print(f"Deleted {args.rule_id}")

        elif args.command == "transactions":
            transactions = TransactionSelector(session).list_transactions(
                start=args.start, end=args.end,
            )
            if not transactions:
                print("No transactions.")
            for txn in transactions:
                print(
                    f"{txn.date.isoformat()}  {txn.description:<24} "
                    f"{txn.amount:>12}  {txn.category}"
                )

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
