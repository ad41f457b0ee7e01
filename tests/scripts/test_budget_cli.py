"""
Tests for scripts/budget.py.

Commands run against a SQLite file named in a temporary settings file, the
same way tests/scripts/test_recurring_cli.py drives the recurring CLI.
"""

from datetime import datetime, timezone

import pytest
import yaml

from budget_kernel.db.engine import reset_engine
from budget_kernel.domain.clock import DeterministicClock

from scripts.budget import main
from scripts.recurring import main as recurring_main


def _write_settings(tmp_path, process_on_startup):
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.safe_dump({
            "database_url": f"sqlite:///{tmp_path / 'budget.db'}",
            "process_on_startup": process_on_startup,
        }),
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings_path(tmp_path):
    yield _write_settings(tmp_path, process_on_startup=False)
    reset_engine()


@pytest.fixture
def cli(settings_path, clock, capsys):
    def _run(*argv):
        code = main(["--config", settings_path, *argv], clock=clock)
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return _run


def _add_groceries(cli, *extra):
    code, out, _ = cli(
        "txn", "add", "--description", "Groceries", "--amount", "-82.4",
        "--category", "Food", *extra,
    )
    assert code == 0
    return out.split()[1]


class TestTransactions:
    def test_add_defaults_to_today(self, cli):
        txn_id = _add_groceries(cli)

        code, out, _ = cli("txn", "show", txn_id)

        assert code == 0
        assert "2024-02-01" in out
        assert "-82.40" in out

    def test_list_by_category_and_range(self, cli):
        _add_groceries(cli, "--date", "2024-01-10")
        cli("txn", "add", "--description", "Rent", "--amount", "-1200",
            "--category", "Housing", "--date", "2024-01-01")

        _, food, _ = cli("txn", "list", "--category", "Food")
        _, early, _ = cli("txn", "list", "--to", "2024-01-05")

        assert "Groceries" in food and "Rent" not in food
        assert "Rent" in early and "Groceries" not in early

    def test_update_and_delete(self, cli):
        txn_id = _add_groceries(cli)

        code, out, _ = cli("txn", "update", txn_id, "--amount", "-80")
        assert code == 0
        assert "-80.00" in out

        code, out, _ = cli("txn", "delete", txn_id)
        assert code == 0
        _, out, _ = cli("txn", "list")
        assert "No transactions." in out

    def test_invalid_transaction_reports_error(self, cli):
        code, _, err = cli(
            "txn", "add", "--description", "Nothing", "--amount", "0", "--category", "Food",
        )
        assert code == 1
        assert "ERROR [TRANSACTION_VALIDATION_FAILED]" in err

    def test_unknown_transaction(self, cli):
        code, _, err = cli("txn", "show", "00000000-0000-0000-0000-000000000000")
        assert code == 1
        assert "TRANSACTION_NOT_FOUND" in err


class TestBudgets:
    def test_set_twice_replaces(self, cli):
        cli("budget", "set", "--category", "Food", "--amount", "400", "--period", "weekly")
        cli("budget", "set", "--category", "Food", "--amount", "450")

        code, out, _ = cli("budget", "list")

        assert code == 0
        lines = out.strip().splitlines()
        assert len(lines) == 1
        assert "450.00" in lines[0]
        assert "monthly" in lines[0]

    def test_update_and_delete(self, cli):
        _, out, _ = cli("budget", "set", "--category", "Travel", "--amount", "100")
        budget_id = out.split()[1]

        _, out, _ = cli("budget", "update", budget_id, "--period", "yearly")
        assert "yearly" in out

        cli("budget", "delete", budget_id)
        _, out, _ = cli("budget", "list")
        assert "No budgets." in out

    def test_invalid_budget_reports_error(self, cli):
        code, _, err = cli("budget", "set", "--category", "Food", "--amount", "-5")
        assert code == 1
        assert "ERROR [BUDGET_VALIDATION_FAILED]" in err


class TestStartupHook:
    def test_commands_process_due_rules_first(self, tmp_path, clock, capsys):
        path = _write_settings(tmp_path, process_on_startup=True)
        try:
            recurring_main([
                "--config", path, "add", "--description", "Rent", "--amount", "-1200",
                "--category", "Housing", "--start-date", "2024-01-01",
            ], clock=clock)
            capsys.readouterr()

            code = main(["--config", path, "txn", "list", "--category", "Housing"], clock=clock)
            out = capsys.readouterr().out
        finally:
            reset_engine()

        assert code == 0
        assert "2024-02-01" in out
        assert "Rent" in out
