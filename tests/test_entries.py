"""Tests for per-account entry aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerview.domain.entities import (
    Account,
    AccountingEntry,
    AccountType,
    GroupStatus,
    TransactionGroup,
)
from ledgerview.domain.entries import (
    aggregate_account_entries,
    calculate_statistics,
    group_entries_by_month,
    running_balances,
)


def make_group(group_id, transaction_date, *entries, status=GroupStatus.CONFIRMED):
    return TransactionGroup(
        id=group_id,
        group_number=f"TG-{group_id}",
        transaction_date=transaction_date,
        description=f"Group {group_id}",
        status=status,
        entries=tuple(entries),
    )


def entry(account_id, debit="0", credit="0", sequence=1, entry_id=None):
    return AccountingEntry(
        account_id=account_id,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        sequence=sequence,
        id=entry_id,
    )


@pytest.fixture
def asset_history():
    """Account 1101 debited 100, then credited 30, in two balanced groups."""
    return [
        make_group("g1", date(2024, 1, 5), entry("1101", debit="100", sequence=1), entry("3101", credit="100", sequence=2)),
        make_group("g2", date(2024, 2, 9), entry("6101", debit="30", sequence=1), entry("1101", credit="30", sequence=2)),
    ]


class TestAggregateAccountEntries:
    def test_raw_totals(self, asset_history):
        result = aggregate_account_entries("1101", asset_history)

        stats = result.statistics
        assert len(result.entries) == 2
        assert stats.entry_count == 2
        assert stats.total_debit == Decimal("100")
        assert stats.total_credit == Decimal("30")
        assert stats.raw_delta == Decimal("70")
        assert stats.signed_balance is None

    def test_asset_raw_delta_matches_typed_balance(self, asset_history):
        account = Account(id="1101", code="1101", name="Cash", account_type=AccountType.ASSET)

        stats = aggregate_account_entries("1101", asset_history, account=account).statistics

        assert stats.signed_balance == stats.raw_delta == Decimal("70")

    def test_liability_raw_delta_has_opposite_sign(self, asset_history):
        account = Account(id="1101", code="1101", name="Loan", account_type=AccountType.LIABILITY)

        stats = aggregate_account_entries("1101", asset_history, account=account).statistics

        assert stats.raw_delta == Decimal("70")
        assert stats.signed_balance == Decimal("-70")

    def test_keeps_group_order_then_sequence(self):
        groups = [
            make_group("late", date(2024, 3, 1), entry("1101", debit="1", sequence=2), entry("1101", debit="2", sequence=1), entry("4101", credit="3", sequence=3)),
            make_group("early", date(2024, 1, 1), entry("1101", debit="4", sequence=1), entry("4101", credit="4", sequence=2)),
        ]

        result = aggregate_account_entries("1101", groups)

        assert [(e.group_id, e.sequence) for e in result.entries] == [
            ("late", 1),
            ("late", 2),
            ("early", 1),
        ]

    def test_denormalizes_group_context(self, asset_history):
        first = aggregate_account_entries("1101", asset_history).entries[0]

        assert first.group_id == "g1"
        assert first.group_number == "TG-g1"
        assert first.group_description == "Group g1"
        assert first.transaction_date == date(2024, 1, 5)
        assert first.status == GroupStatus.CONFIRMED
        assert first.counterpart_account_ids == ("3101",)

    def test_entry_id_fallback(self, asset_history):
        groups = asset_history + [
            make_group("g3", date(2024, 2, 10), entry("1101", debit="5", sequence=1, entry_id="e-1"), entry("4101", credit="5", sequence=2)),
        ]

        result = aggregate_account_entries("1101", groups)

        assert [e.entry_id for e in result.entries] == ["g1-1", "g2-2", "e-1"]

    def test_no_entries(self, asset_history):
        result = aggregate_account_entries("9999", asset_history)

        assert result.entries == ()
        assert result.statistics.entry_count == 0
        assert result.statistics.total_debit == Decimal("0")
        assert result.statistics.first_transaction_date is None
        assert result.statistics.monthly_activity == ()


def test_statistics_dates_and_status_counts():
    groups = [
        make_group("g1", date(2024, 1, 5), entry("1101", debit="10"), status=GroupStatus.DRAFT),
        make_group("g2", date(2023, 12, 30), entry("1101", debit="10"), status=GroupStatus.CONFIRMED),
        make_group("g3", date(2024, 2, 1), entry("1101", credit="5"), status=GroupStatus.CONFIRMED),
    ]
    entries = aggregate_account_entries("1101", groups).entries

    stats = calculate_statistics(entries)

    assert stats.first_transaction_date == date(2023, 12, 30)
    assert stats.last_transaction_date == date(2024, 2, 1)
    assert stats.status_counts == {
        GroupStatus.DRAFT: 1,
        GroupStatus.CONFIRMED: 2,
        GroupStatus.CANCELLED: 0,
    }


def test_group_entries_by_month():
    groups = [
        make_group("g1", date(2024, 2, 3), entry("1101", debit="10")),
        make_group("g2", date(2024, 1, 31), entry("1101", debit="7")),
        make_group("g3", date(2024, 2, 20), entry("1101", credit="4")),
    ]
    entries = aggregate_account_entries("1101", groups).entries

    months = group_entries_by_month(entries)

    assert [m.month for m in months] == ["2024-01", "2024-02"]
    assert months[1].debit_amount == Decimal("10")
    assert months[1].credit_amount == Decimal("4")
    assert months[1].raw_delta == Decimal("6")
    assert months[1].entry_count == 2


class TestRunningBalances:
    def test_accumulates_oldest_first(self, asset_history):
        entries = aggregate_account_entries("1101", list(reversed(asset_history))).entries

        running = running_balances(entries, AccountType.ASSET)

        assert running == {"g1-1": Decimal("100"), "g2-2": Decimal("70")}

    def test_credit_normal_account(self, asset_history):
        entries = aggregate_account_entries("1101", asset_history).entries

        running = running_balances(entries, AccountType.REVENUE)

        assert running["g2-2"] == Decimal("-70")

    def test_same_day_groups_order_by_group_id(self):
        groups = [
            make_group("b", date(2024, 1, 1), entry("1101", debit="5")),
            make_group("a", date(2024, 1, 1), entry("1101", credit="2")),
        ]
        entries = aggregate_account_entries("1101", groups).entries

        running = running_balances(entries, AccountType.ASSET)

        assert running == {"a-1": Decimal("-2"), "b-1": Decimal("3")}
