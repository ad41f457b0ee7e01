"""
Tests for scripts/recurring.py.

Each command runs against a SQLite file named in a temporary settings file,
so state persists across invocations the way it does from a shell.
"""

from datetime import datetime, timezone

import pytest
import yaml

from budget_kernel.db.engine import reset_engine
from budget_kernel.domain.clock import DeterministicClock

from scripts.recurring import main


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.safe_dump({
            "database_url": f"sqlite:///{tmp_path / 'budget.db'}",
            "process_on_startup": False,
        }),
        encoding="utf-8",
    )
    yield str(path)
    reset_engine()


@pytest.fixture
def cli(config_file, capsys):
    clock = DeterministicClock(datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc))

    def _run(*argv):
        code = main(["--config", config_file, *argv], clock=clock)
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    _run.clock = clock
    return _run


def _add_rent(cli, *extra):
    code, out, _ = cli(
        "add", "--description", "Rent", "--amount", "-1200",
        "--category", "Housing", "--start-date", "2024-01-01", *extra,
    )
    assert code == 0
    return out.split()[1]


class TestAddAndList:
    def test_add_then_list(self, cli):
        rule_id = _add_rent(cli)

        code, out, _ = cli("list")

        assert code == 0
        assert rule_id in out
        assert "Rent" in out
        assert "last=never" in out
        assert "[active]" in out
        assert "-1200.00" in out

    def test_list_empty(self, cli):
        code, out, _ = cli("list")
        assert code == 0
        assert "No recurring rules." in out

    def test_invalid_rule_reports_error(self, cli):
        code, _, err = cli(
            "add", "--description", "Rent", "--amount", "0", "--category", "Housing",
        )
        assert code == 1
        assert "ERROR [RULE_VALIDATION_FAILED]" in err
        assert "Amount must be nonzero" in err


class TestProcess:
    def test_process_defaults_to_today(self, cli):
        _add_rent(cli)

        code, out, _ = cli("process")

        assert code == 0
        assert "Processed 1 recurring transactions with 0 errors" in out
        _, txns, _ = cli("transactions")
        assert "2024-02-01" in txns
        assert "Rent" in txns

    def test_second_process_is_noop(self, cli):
        _add_rent(cli)
        cli("process")

        code, out, _ = cli("process")

        assert code == 0
        assert "Processed 0 recurring transactions with 0 errors" in out
        assert "1 rule(s) not due" in out

    def test_process_as_of(self, cli):
        _add_rent(cli)

        cli("process", "--as-of", "2024-01-05")

        _, txns, _ = cli("transactions", "--from", "2024-01-01", "--to", "2024-01-31")
        assert "2024-01-05" in txns

    def test_bad_date_is_usage_error(self, cli):
        with pytest.raises(SystemExit):
            cli("process", "--as-of", "yesterday")


class TestPauseResumeDelete:
    def test_paused_rule_not_processed(self, cli):
        rule_id = _add_rent(cli)

        code, out, _ = cli("pause", rule_id)
        assert code == 0
        assert "[paused]" in out

        _, out, _ = cli("process")
        assert "Processed 0 recurring transactions" in out

        _, out, _ = cli("resume", rule_id)
        assert "[active]" in out
        _, out, _ = cli("process")
        assert "Processed 1 recurring transactions" in out

    def test_delete(self, cli):
        rule_id = _add_rent(cli)

        code, out, _ = cli("delete", rule_id)

        assert code == 0
        assert f"Deleted {rule_id}" in out
        _, out, _ = cli("list")
        assert "No recurring rules." in out

    def test_unknown_rule(self, cli):
        code, _, err = cli("pause", "00000000-0000-0000-0000-000000000000")
        assert code == 1
        assert "RECURRING_RULE_NOT_FOUND" in err


@pytest.fixture
def startup_cli(tmp_path, capsys):
    """CLI whose settings enable processing on every start."""
    path = tmp_path / "startup.yaml"
    path.write_text(
        yaml.safe_dump({
            "database_url": f"sqlite:///{tmp_path / 'startup.db'}",
            "process_on_startup": True,
        }),
        encoding="utf-8",
    )
    clock = DeterministicClock(datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc))

    def _run(*argv):
        code = main(["--config", str(path), *argv], clock=clock)
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    yield _run
    reset_engine()


class TestStartupProcessing:
    def test_any_command_materializes_due_rules(self, startup_cli):
        _add_rent(startup_cli)

        code, out, _ = startup_cli("list")

        assert code == 0
        assert "last=2024-02-01" in out
        _, txns, _ = startup_cli("transactions")
        assert "2024-02-01" in txns
        assert "Rent" in txns

    def test_startup_pass_runs_once_per_period(self, startup_cli):
        _add_rent(startup_cli)
        startup_cli("list")
        startup_cli("list")

        _, txns, _ = startup_cli("transactions")

        assert txns.count("Rent") == 1

    def test_process_runs_only_the_explicit_pass(self, startup_cli):
        _add_rent(startup_cli)

        code, out, _ = startup_cli("process", "--as-of", "2024-01-05")

        assert code == 0
        assert "Processed 1 recurring transactions with 0 errors" in out
        _, txns, _ = startup_cli("transactions", "--to", "2024-01-31")
        assert "2024-01-05" in txns

    def test_disabled_startup_leaves_rules_unprocessed(self, cli):
        _add_rent(cli)

        _, out, _ = cli("list")

        assert "last=never" in out
        _, txns, _ = cli("transactions")
        assert "No transactions." in txns
