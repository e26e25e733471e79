"""Tests for the ledger view controller."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerview.domain.entities import (
    Account,
    AccountingEntry,
    AccountType,
    Organization,
    TransactionGroup,
)
from ledgerview.domain.ledger_view import (
    LedgerSnapshot,
    LedgerViewController,
    RefreshRequest,
    build_ledger_view,
)


def make_group(group_id, organization_id, *postings):
    return TransactionGroup(
        id=group_id,
        group_number=group_id,
        transaction_date=date(2024, 1, 1),
        organization_id=organization_id,
        entries=tuple(
            AccountingEntry(
                account_id=account_id,
                debit_amount=Decimal(debit),
                credit_amount=Decimal(credit),
                sequence=sequence,
            )
            for sequence, (account_id, debit, credit) in enumerate(postings, start=1)
        ),
    )


@pytest.fixture
def backend(fake_backend):
    fake_backend.organizations = [Organization("org-a", "Acme"), Organization("org-b", "Beta")]
    fake_backend.accounts = [
        Account("a-cash", "1101", "Cash", AccountType.ASSET, organization_id="org-a", initial_balance=Decimal("100")),
        Account("a-sales", "4101", "Sales", AccountType.REVENUE, organization_id="org-a"),
        Account("b-cash", "1101", "Cash", AccountType.ASSET, organization_id="org-b"),
        Account("b-loan", "2101", "Loan", AccountType.LIABILITY, organization_id="org-b"),
    ]
    fake_backend.groups = [
        make_group("ga", "org-a", ("a-cash", "500", "0"), ("a-sales", "0", "500")),
        make_group("gb", "org-b", ("b-cash", "80", "0"), ("b-loan", "0", "80")),
    ]
    return fake_backend


class TestRefresh:
    def test_builds_view(self, backend):
        controller = LedgerViewController(backend)

        view = controller.refresh()

        assert view.generation == 1
        assert view.balances == {
            "a-cash": Decimal("500"),
            "a-sales": Decimal("500"),
            "b-cash": Decimal("80"),
            "b-loan": Decimal("80"),
        }
        assert [node.id for node in view.tree] == ["org-a", "org-b"]
        assert view.total_balances()["a-cash"] == Decimal("600")
        assert controller.loading is False
        assert controller.pop_notifications() == []

    def test_organization_filter_rebuilds_everything(self, backend):
        controller = LedgerViewController(backend)
        controller.refresh()

        view = controller.set_organization("org-b")

        assert set(view.balances) == {"b-cash", "b-loan"}
        assert [node.id for node in view.tree] == ["org-b"]
        assert view.organization_id == "org-b"

    def test_group_fetch_failure_zeroes_balances(self, backend):
        controller = LedgerViewController(backend)
        controller.refresh()
        backend.fail.add("groups")

        view = controller.refresh()

        assert set(view.balances) == {"a-cash", "a-sales", "b-cash", "b-loan"}
        assert all(value == Decimal("0") for value in view.balances.values())
        notifications = controller.pop_notifications()
        assert [n.severity for n in notifications] == ["error"]
        assert "transaction groups" in notifications[0].message

    def test_account_fetch_failure(self, backend):
        backend.fail.add("accounts")
        controller = LedgerViewController(backend)

        view = controller.refresh()

        assert view.accounts == ()
        assert view.balances == {}
        assert view.tree == ()
        assert controller.pop_notifications()[0].severity == "error"

    def test_unbalanced_group_warning(self, backend):
        backend.groups.append(make_group("bad", "org-a", ("a-cash", "10", "0"), ("a-sales", "0", "9")))
        controller = LedgerViewController(backend)

        view = controller.refresh()

        assert view.unbalanced_group_ids == ("bad",)
        assert view.balances["a-cash"] == Decimal("510")
        notifications = controller.pop_notifications()
        assert notifications[0].severity == "warning"
        assert "bad" in notifications[0].message

    def test_strict_references_reject_batch(self, backend):
        backend.groups.append(make_group("stray", None, ("a-cash", "10", "0"), ("gone", "0", "10")))
        controller = LedgerViewController(backend, strict_references=True)

        view = controller.refresh()

        assert all(value == Decimal("0") for value in view.balances.values())
        assert "unknown account gone" in view.errors[0]

    def test_tolerant_references_skip_entry(self, backend):
        backend.groups.append(make_group("stray", None, ("a-cash", "10", "0"), ("gone", "0", "10")))
        controller = LedgerViewController(backend)

        view = controller.refresh()

        assert view.balances["a-cash"] == Decimal("510")
        assert view.errors == ()


class TestStaleSnapshots:
    def test_stale_snapshot_is_discarded(self, backend):
        controller = LedgerViewController(backend)
        controller.organization_id = "org-a"
        old_request = controller.start_refresh()
        old_snapshot = controller.fetch_snapshot(old_request)

        controller.organization_id = "org-b"
        new_request = controller.start_refresh()
        new_snapshot = controller.fetch_snapshot(new_request)

        assert controller.apply_snapshot(new_snapshot) is True
        assert controller.apply_snapshot(old_snapshot) is False
        assert controller.view.organization_id == "org-b"
        assert set(controller.view.balances) == {"b-cash", "b-loan"}

    def test_balance_unavailable_while_loading(self, backend):
        controller = LedgerViewController(backend)
        controller.refresh()
        request = controller.start_refresh()

        assert controller.balance_of("a-cash") is None

        controller.apply_snapshot(controller.fetch_snapshot(request))
        assert controller.balance_of("a-cash") == Decimal("500")


class TestSelection:
    def test_select_account(self, backend):
        controller = LedgerViewController(backend)
        controller.refresh()

        selection = controller.select_account("a-cash")

        assert selection.statistics.entry_count == 1
        assert selection.statistics.signed_balance == Decimal("500")
        assert controller.selected_account_id == "a-cash"

    def test_selection_recomputed_on_refresh(self, backend):
        controller = LedgerViewController(backend)
        controller.refresh()
        controller.select_account("a-cash")
        backend.groups.append(make_group("ga2", "org-a", ("a-sales", "20", "0"), ("a-cash", "0", "20")))

        controller.refresh()

        assert controller.selection.statistics.entry_count == 2
        assert controller.selection.statistics.signed_balance == Decimal("480")

    def test_selection_cleared_when_account_leaves_view(self, backend):
        controller = LedgerViewController(backend)
        controller.refresh()
        controller.select_account("a-cash")

        controller.set_organization("org-b")

        assert controller.selected_account_id is None
        assert controller.selection is None


def test_build_ledger_view_is_pure():
    accounts = (Account("x", "1101", "Cash", AccountType.ASSET),)
    snapshot = LedgerSnapshot(
        request=RefreshRequest(generation=3),
        accounts=accounts,
        groups=(make_group("g", None, ("x", "5", "0"), ("x", "0", "5")),),
    )

    first = build_ledger_view(snapshot)
    second = build_ledger_view(snapshot)

    assert first == second
    assert first.generation == 3
    assert first.balances == {"x": Decimal("0")}
