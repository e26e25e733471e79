"""Ledger view state: refetch and recompute on filter or selection changes.

Every refresh rebuilds the whole view from a fresh fetch. Derived state is
never patched in place, so a filter change or a failed fetch can never leave
balances from an earlier load behind.

Refreshes carry a generation number. A snapshot is only applied when its
generation is the newest one started, which keeps a slow response for an old
organization filter from replacing the view of the current one.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ledgerview.backend.base import LedgerBackend
from ledgerview.domain.balance import (
    compute_movement_balances,
    find_unbalanced_groups,
    total_balances,
    zero_balances,
)
from ledgerview.domain.chart import build_account_tree
from ledgerview.domain.entities import (
    Account,
    AccountEntries,
    AccountTreeNode,
    MovementBalance,
    Organization,
    TotalBalance,
    TransactionGroup,
)
from ledgerview.domain.entries import aggregate_account_entries
from ledgerview.domain.errors import (
    FetchError,
    UnknownAccountReferenceError,
    unbalanced_groups,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """Transient message for the presentation layer."""

    message: str
    severity: str = "info"


@dataclass(frozen=True)
class RefreshRequest:
    """One refresh attempt, identified by its generation."""

    generation: int
    organization_id: Optional[str] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Raw data fetched for one refresh request.

    A collection whose fetch failed is empty and its failure message is listed
    in ``errors``.
    """

    request: RefreshRequest
    accounts: tuple[Account, ...] = ()
    organizations: tuple[Organization, ...] = ()
    groups: tuple[TransactionGroup, ...] = ()
    errors: tuple[str, ...] = ()
    groups_failed: bool = False


@dataclass(frozen=True)
class LedgerView:
    """Derived, read-only view of the ledger for one organization filter."""

    generation: int = 0
    organization_id: Optional[str] = None
    accounts: tuple[Account, ...] = ()
    organizations: tuple[Organization, ...] = ()
    groups: tuple[TransactionGroup, ...] = ()
    tree: tuple[AccountTreeNode, ...] = ()
    balances: dict[str, MovementBalance] = field(default_factory=dict)
    unbalanced_group_ids: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    def get_account(self, account_id: str) -> Optional[Account]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def total_balances(self) -> dict[str, TotalBalance]:
        return total_balances(self.accounts, self.balances)


def build_ledger_view(
    snapshot: LedgerSnapshot,
    include_empty_types: bool = False,
    strict_references: bool = False,
) -> LedgerView:
    """Derive a ledger view from fetched data. Pure apart from logging.

    Balances are zero-filled when the group fetch failed, or when strict
    reference checking rejects the batch.
    """
    accounts = snapshot.accounts
    groups = snapshot.groups
    errors = list(snapshot.errors)

    if snapshot.groups_failed:
        balances = zero_balances(accounts)
    else:
        try:
            balances = compute_movement_balances(
                accounts, groups, strict=strict_references
            )
        except UnknownAccountReferenceError as exc:
            logger.error("Rejected ledger batch: %s", exc)
            errors.append(str(exc))
            balances = zero_balances(accounts)

    unbalanced = find_unbalanced_groups(groups)
    if unbalanced:
        logger.warning(unbalanced_groups(unbalanced))

    tree = build_account_tree(
        accounts, snapshot.organizations, include_empty_types=include_empty_types
    )

    return LedgerView(
        generation=snapshot.request.generation,
        organization_id=snapshot.request.organization_id,
        accounts=accounts,
        organizations=snapshot.organizations,
        groups=groups,
        tree=tuple(tree),
        balances=balances,
        unbalanced_group_ids=tuple(unbalanced),
        errors=tuple(errors),
    )


class LedgerViewController:
    """Owns the session-scoped ledger view and the selected account."""

    def __init__(
        self,
        backend: LedgerBackend,
        include_empty_types: bool = False,
        strict_references: bool = False,
    ):
        """Initialize ledger view controller.

        Args:
            backend: Ledger backend instance
            include_empty_types: Show account type nodes with no accounts
            strict_references: Reject a whole batch when an entry references
                an unknown account, instead of skipping that entry
        """
        self.backend = backend
        self.include_empty_types = include_empty_types
        self.strict_references = strict_references

        self.view = LedgerView()
        self.organization_id: Optional[str] = None
        self.selected_account_id: Optional[str] = None
        self.selection: Optional[AccountEntries] = None
        self.notifications: list[Notification] = []
        self.loading = False
        self._generation = 0

    def start_refresh(self) -> RefreshRequest:
        """Begin a refresh for the current organization filter."""
        self._generation += 1
        self.loading = True
        return RefreshRequest(
            generation=self._generation, organization_id=self.organization_id
        )

    def fetch_snapshot(self, request: RefreshRequest) -> LedgerSnapshot:
        """Fetch accounts, organizations and groups for a refresh request.

        Fetch failures are recorded on the snapshot, never raised.
        """
        errors = []

        try:
            organizations = tuple(self.backend.get_organizations())
        except FetchError as exc:
            logger.error("Failed to load organizations: %s", exc)
            errors.append(f"Failed to load organizations: {exc}")
            organizations = ()

        try:
            accounts = tuple(self.backend.get_accounts(request.organization_id))
        except FetchError as exc:
            logger.error("Failed to load accounts: %s", exc)
            errors.append(f"Failed to load accounts: {exc}")
            accounts = ()

        groups_failed = False
        try:
            groups = tuple(self.backend.get_transaction_groups(request.organization_id))
        except FetchError as exc:
            logger.error("Failed to load transaction groups: %s", exc)
            errors.append(f"Failed to load transaction groups: {exc}")
            groups = ()
            groups_failed = True

        return LedgerSnapshot(
            request=request,
            accounts=accounts,
            organizations=organizations,
            groups=groups,
            errors=tuple(errors),
            groups_failed=groups_failed,
        )

    def apply_snapshot(self, snapshot: LedgerSnapshot) -> bool:
        """Replace the view with one built from ``snapshot``.

        Returns:
            False if the snapshot belongs to a superseded refresh and was
            discarded, True otherwise
        """
        if snapshot.request.generation != self._generation:
            logger.debug(
                "Discarding stale snapshot (generation %d, current %d)",
                snapshot.request.generation,
                self._generation,
            )
            return False

        self.view = build_ledger_view(
            snapshot,
            include_empty_types=self.include_empty_types,
            strict_references=self.strict_references,
        )
        self.loading = False

        for message in self.view.errors:
            self.notifications.append(Notification(message, "error"))
        if self.view.unbalanced_group_ids:
            self.notifications.append(
                Notification(unbalanced_groups(self.view.unbalanced_group_ids), "warning")
            )

        if self.selected_account_id is not None:
            if self.view.get_account(self.selected_account_id) is None:
                self.clear_selection()
            else:
                self.select_account(self.selected_account_id)
        return True

    def refresh(self) -> LedgerView:
        """Fetch and rebuild the view for the current organization filter."""
        request = self.start_refresh()
        self.apply_snapshot(self.fetch_snapshot(request))
        return self.view

    def set_organization(self, organization_id: Optional[str]) -> LedgerView:
        """Change the organization filter and rebuild the view."""
        self.organization_id = organization_id or None
        return self.refresh()

    def select_account(self, account_id: str) -> AccountEntries:
        """Select an account and aggregate its entries from the current view."""
        self.selected_account_id = account_id
        self.selection = aggregate_account_entries(
            account_id, self.view.groups, account=self.view.get_account(account_id)
        )
        return self.selection

    def clear_selection(self) -> None:
        self.selected_account_id = None
        self.selection = None

    def balance_of(self, account_id: str) -> Optional[MovementBalance]:
        """Movement balance of an account, or None while a refresh is pending."""
        if self.loading:
            return None
        return self.view.balances.get(account_id)

    def pop_notifications(self) -> list[Notification]:
        """Return pending notifications and clear them."""
        notifications, self.notifications = self.notifications, []
        return notifications
