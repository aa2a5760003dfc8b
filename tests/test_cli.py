"""End-to-end tests for the tally CLI."""

from decimal import Decimal

import pytest
from typer.testing import CliRunner

from tally.cli import app
from tally.config import get_config_path, load_settings
from tally.store.queries import get_all_transactions
from tally.store.schema import get_db_path

runner = CliRunner()


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point config and data directories at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


@pytest.fixture
def initialized(home):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    return home


class TestInit:
    """Tests for 'tally init'."""

    def test_creates_database_and_config(self, home) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Initialization complete" in result.output
        assert get_db_path().exists()
        assert get_config_path().exists()

    def test_refuses_to_overwrite(self, initialized) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_force_resets_database(self, initialized) -> None:
        runner.invoke(app, ["add", "10"])

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert get_all_transactions() == []

    def test_commands_require_init(self, home) -> None:
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "tally init" in result.output


class TestTransactions:
    """Tests for add, edit, delete and list."""

    def test_add_and_list(self, initialized) -> None:
        result = runner.invoke(app, ["add", "150", "--category", "Food", "--date", "2025-03-04", "--notes", "groceries"])

        assert result.exit_code == 0, result.output
        assert "Transaction added" in result.output

        (txn,) = get_all_transactions()
        assert txn.amount == Decimal("150")
        assert txn.category == "Food"

        result = runner.invoke(app, ["list", "--category", "foo"])
        assert "groceries" in result.output

    def test_add_invalid_amount_warns(self, initialized) -> None:
        result = runner.invoke(app, ["add", "lots"])

        assert result.exit_code == 0
        assert "stored as 0" in result.output
        assert get_all_transactions()[0].amount == Decimal("0")

    def test_add_invalid_type(self, initialized) -> None:
        result = runner.invoke(app, ["add", "10", "--type", "refund"])

        assert result.exit_code == 1
        assert get_all_transactions() == []

    def test_list_no_match(self, initialized) -> None:
        runner.invoke(app, ["add", "10", "--category", "Transport"])

        result = runner.invoke(app, ["list", "--category", "zzz"])

        assert result.exit_code == 0
        assert "No transactions found" in result.output

    def test_list_invalid_date(self, initialized) -> None:
        result = runner.invoke(app, ["list", "--since", "not a date"])
        assert result.exit_code == 1

    def test_edit_by_short_id(self, initialized) -> None:
        runner.invoke(app, ["add", "20", "--category", "Food"])
        (txn,) = get_all_transactions()

        result = runner.invoke(app, ["edit", txn.id[:8], "--amount", "25", "--notes", "lunch"])

        assert result.exit_code == 0, result.output
        (edited,) = get_all_transactions()
        assert edited.id == txn.id
        assert edited.amount == Decimal("25")
        assert edited.notes == "lunch"
        assert edited.category == "Food"

    def test_edit_unknown(self, initialized) -> None:
        result = runner.invoke(app, ["edit", "nope", "--amount", "5"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete(self, initialized) -> None:
        runner.invoke(app, ["add", "20"])
        (txn,) = get_all_transactions()

        result = runner.invoke(app, ["delete", txn.id])

        assert result.exit_code == 0
        assert get_all_transactions() == []

    def test_delete_unknown_is_not_an_error(self, initialized) -> None:
        runner.invoke(app, ["add", "20"])

        result = runner.invoke(app, ["delete", "nope"])

        assert result.exit_code == 0
        assert len(get_all_transactions()) == 1


class TestBudget:
    """Tests for 'tally budget'."""

    def test_shows_spend(self, initialized) -> None:
        runner.invoke(app, ["add", "150", "--category", "Food"])

        result = runner.invoke(app, ["budget"])

        assert result.exit_code == 0
        assert "Food" in result.output
        assert "$150.00" in result.output

    def test_set_limit_saved(self, initialized) -> None:
        result = runner.invoke(app, ["budget", "--set-limit", "Food", "250"])

        assert result.exit_code == 0, result.output
        food = next(b for b in load_settings().budgets if b.name == "Food")
        assert food.limit == Decimal("250")

    def test_set_limit_unknown_category(self, initialized) -> None:
        result = runner.invoke(app, ["budget", "--set-limit", "Pets", "10"])
        assert result.exit_code == 1

    def test_toggle_notifications(self, initialized) -> None:
        result = runner.invoke(app, ["budget", "--toggle-notifications", "Transport"])

        assert result.exit_code == 0
        transport = next(b for b in load_settings().budgets if b.name == "Transport")
        assert transport.notifications_enabled is False

    def test_lists_unbudgeted_categories(self, initialized) -> None:
        runner.invoke(app, ["add", "5", "--category", "Pets"])

        result = runner.invoke(app, ["budget"])

        assert "Not budgeted" in result.output
        assert "Pets" in result.output


class TestReport:
    """Tests for 'tally report'."""

    def test_summary_and_loss_alert(self, initialized) -> None:
        runner.invoke(app, ["add", "500", "--type", "income"])
        runner.invoke(app, ["add", "700", "--category", "Food"])

        result = runner.invoke(app, ["report"])

        assert result.exit_code == 0, result.output
        assert "$500.00" in result.output
        assert "Financial Loss Alert" in result.output
        assert "loss of $200.00" in result.output

    def test_no_alert_when_saving(self, initialized) -> None:
        runner.invoke(app, ["add", "500", "--type", "income"])

        result = runner.invoke(app, ["report", "--months", "12"])

        assert result.exit_code == 0
        assert "Loss Alert" not in result.output


class TestSavings:
    """Tests for 'tally savings'."""

    def test_calculates_without_init(self, home) -> None:
        result = runner.invoke(app, ["savings", "2,500", "1800.50"])

        assert result.exit_code == 0
        assert "$699.50" in result.output

    def test_invalid_input_counts_as_zero(self, home) -> None:
        result = runner.invoke(app, ["savings", "abc", "40"])

        assert result.exit_code == 0
        assert "-$40.00" in result.output


class TestInvalidConfig:
    """Tests for commands run against a broken config file."""

    @pytest.mark.parametrize(
        "bad_line",
        ['window_start = "July 2024"', 'window_months = "six"', 'loss_alert_ttl_seconds = "soon"'],
    )
    def test_bad_value_reported(self, initialized, bad_line) -> None:
        """Should print a config error and exit 1 instead of a traceback."""
        config_path = get_config_path()
        config_path.write_text(bad_line + "\n")

        for args in (["report"], ["list"], ["add", "10"], ["budget"]):
            result = runner.invoke(app, args)

            assert result.exit_code == 1
            assert "Invalid config file" in result.output
            assert not isinstance(result.exception, ValueError)

    def test_unparsable_toml_reported(self, initialized) -> None:
        get_config_path().write_text("budgets = [\n")

        result = runner.invoke(app, ["report"])

        assert result.exit_code == 1
        assert "Invalid config file" in result.output
