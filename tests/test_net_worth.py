"""Tests for net worth summation and commands."""

from datetime import date
from decimal import Decimal

import pytest

from finboard.cli.main import cli
from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import AssetLiability, EntryType
from finboard.domain.errors import NotFoundError, ValidationError
from finboard.domain.net_worth import net_worth_history, net_worth_summary


def _entry(id, type, value, day, currency="USD"):
    return AssetLiability(
        id=id,
        owner="alice",
        type=type,
        name=f"entry {id}",
        value=Decimal(value),
        currency=currency,
        category="Misc",
        date=day,
    )


def test_summary_subtracts_liabilities():
    summary = net_worth_summary(
        [
            _entry(1, EntryType.ASSET, "350000", date(2024, 1, 1)),
            _entry(2, EntryType.ASSET, "15000", date(2024, 1, 1)),
            _entry(3, EntryType.LIABILITY, "210000", date(2024, 1, 1)),
        ]
    )

    assert summary.assets == Decimal("365000")
    assert summary.liabilities == Decimal("210000")
    assert summary.net_worth == Decimal("155000")


def test_summary_can_be_negative():
    summary = net_worth_summary([_entry(1, EntryType.LIABILITY, "500", date(2024, 1, 1))])

    assert summary.net_worth == Decimal("-500")


def test_summary_converts_currencies():
    summary = net_worth_summary(
        [_entry(1, EntryType.ASSET, "920", date(2024, 1, 1), currency="EUR")],
        converter=CurrencyConverter("USD"),
    )

    assert summary.assets == Decimal("1000")


def test_history_groups_by_date_oldest_first():
    history = net_worth_history(
        [
            _entry(1, EntryType.ASSET, "100", date(2024, 3, 1)),
            _entry(2, EntryType.ASSET, "50", date(2024, 1, 1)),
            _entry(3, EntryType.LIABILITY, "80", date(2024, 3, 1)),
        ]
    )

    assert [point.date for point in history] == [date(2024, 1, 1), date(2024, 3, 1)]
    assert history[0].net_worth == Decimal("50")
    assert history[1].net_worth == Decimal("20")


def test_empty_history():
    assert net_worth_history([]) == []


class TestNetWorthService:
    def test_add_list_and_summary(self, net_worth_service):
        net_worth_service.add_entry("asset", "House", Decimal("350000"), "Property", date(2024, 1, 1))
        net_worth_service.add_entry("liability", "Mortgage", Decimal("210000"), "Mortgage", date(2024, 2, 1))

        entries = net_worth_service.list_entries()
        assert [entry.name for entry in entries] == ["Mortgage", "House"]
        assert entries[0].type == EntryType.LIABILITY
        assert net_worth_service.get_summary().net_worth == Decimal("140000")

    def test_rejects_negative_value(self, net_worth_service):
        with pytest.raises(ValidationError, match="value"):
            net_worth_service.add_entry("asset", "House", Decimal("-1"), "Property", date(2024, 1, 1))

    def test_rejects_unknown_type(self, net_worth_service):
        with pytest.raises(ValidationError, match="type"):
            net_worth_service.add_entry("debt", "Card", Decimal("10"), "Cards", date(2024, 1, 1))

    def test_delete(self, net_worth_service):
        entry_id = net_worth_service.add_entry("asset", "Car", Decimal("9000"), "Vehicle", date(2024, 1, 1))

        net_worth_service.delete_entry(entry_id)

        assert net_worth_service.list_entries() == []
        with pytest.raises(NotFoundError):
            net_worth_service.delete_entry(entry_id)

    def test_update_revalues_entry(self, net_worth_service):
        entry_id = net_worth_service.add_entry("asset", "Car", Decimal("9000"), "Vehicle", date(2024, 1, 1))

        net_worth_service.update_entry(entry_id, value=Decimal("8000"), entry_date=date(2024, 6, 1))

        entry = net_worth_service.require_entry(entry_id)
        assert entry.value == Decimal("8000")
        assert entry.date == date(2024, 6, 1)
        assert entry.name == "Car"
        assert entry.type == EntryType.ASSET

    def test_update_validates(self, net_worth_service):
        entry_id = net_worth_service.add_entry("asset", "Car", Decimal("9000"), "Vehicle", date(2024, 1, 1))

        with pytest.raises(ValidationError, match="name"):
            net_worth_service.update_entry(entry_id, name="")

    def test_update_missing_entry(self, net_worth_service):
        with pytest.raises(NotFoundError):
            net_worth_service.update_entry(404, value=Decimal("1"))


def test_networth_show(cli_runner, temp_db):
    """Test showing net worth from the command line."""
    base = ["--db-path", temp_db.database_path]
    cli_runner.invoke(
        cli, base + ["networth", "add", "asset", "House", "--value", "350000", "--category", "Property"]
    )
    cli_runner.invoke(
        cli, base + ["networth", "add", "liability", "Mortgage", "--value", "400000", "--category", "Mortgage"]
    )

    result = cli_runner.invoke(cli, base + ["networth", "show", "--history"])

    assert result.exit_code == 0
    assert "$350,000.00" in result.output
    assert "$400,000.00" in result.output
    assert "-$50,000.00" in result.output
    assert "History:" in result.output


def test_networth_update(cli_runner, temp_db):
    base = ["--db-path", temp_db.database_path]
    cli_runner.invoke(cli, base + ["networth", "add", "asset", "Car", "--value", "9000", "--category", "Vehicle"])
    entry_id = str(temp_db.list_assets_liabilities("default")[0].id)

    result = cli_runner.invoke(cli, base + ["networth", "update", entry_id, "--value", "7,500"])
    assert result.exit_code == 0
    assert f"Updated entry {entry_id}" in result.output

    result = cli_runner.invoke(cli, base + ["networth", "show"])
    assert "$7,500.00" in result.output

    result = cli_runner.invoke(cli, base + ["networth", "update", "404", "--value", "1"])
    assert result.exit_code == 1
    assert "Error:" in result.output
