"""Balance computation over a chart of accounts and its transaction groups."""

import logging
from typing import Iterable, Optional, Sequence, Union

from ledgerview.backend.base import LedgerBackend
from ledgerview.domain.entities import (
    ZERO,
    Account,
    AccountType,
    MovementBalance,
    TotalBalance,
    TransactionGroup,
)
from ledgerview.domain.errors import (
    FetchError,
    UnbalancedGroupError,
    UnknownAccountReferenceError,
)

logger = logging.getLogger(__name__)


def signed_amount(
    account_type: Union[AccountType, str], debit_amount, credit_amount
) -> MovementBalance:
    """Apply the polarity rule for one posting.

    Liability, equity and revenue accounts grow with credits. Asset and
    expense accounts, and any type outside the known five, grow with debits.
    """
    if account_type in (AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE):
        return MovementBalance(credit_amount - debit_amount)
    return MovementBalance(debit_amount - credit_amount)


def zero_balances(accounts: Iterable[Account]) -> dict[str, MovementBalance]:
    """Return a balance map with every account at exactly zero."""
    return {account.id: MovementBalance(ZERO) for account in accounts}


def compute_movement_balances(
    accounts: Sequence[Account],
    groups: Iterable[TransactionGroup],
    strict: bool = False,
) -> dict[str, MovementBalance]:
    """Compute each account's net movement from the given transaction groups.

    The result excludes ``initial_balance``; use ``total_balances`` for the
    all-in figure. Every account appears in the result, at zero when nothing
    touches it.

    Args:
        accounts: Accounts in scope, used for type lookup and initialization
        groups: Transaction groups in scope
        strict: If True, raise on entries referencing an account outside
            ``accounts`` instead of skipping them

    Returns:
        Mapping of account ID to movement balance

    Raises:
        UnknownAccountReferenceError: If strict and an entry's account is unknown
    """
    balances = zero_balances(accounts)
    account_types = {account.id: account.account_type for account in accounts}

    skipped = 0
    entry_count = 0
    for group in groups:
        for entry in group.entries:
            entry_count += 1
            account_type = account_types.get(entry.account_id)
            if account_type is None:
                if strict:
                    raise UnknownAccountReferenceError(entry.account_id, group.id)
                skipped += 1
                continue
            balances[entry.account_id] = MovementBalance(
                balances[entry.account_id]
                + signed_amount(account_type, entry.debit_amount, entry.credit_amount)
            )

    if skipped:
        logger.warning(
            "Skipped %d of %d entries referencing accounts outside the loaded set",
            skipped,
            entry_count,
        )
    logger.debug(
        "Computed balances for %d accounts from %d entries", len(balances), entry_count
    )
    return balances


def total_balances(
    accounts: Iterable[Account], movement: dict[str, MovementBalance]
) -> dict[str, TotalBalance]:
    """Add each account's initial balance to its movement balance."""
    return {
        account.id: TotalBalance(account.initial_balance + movement.get(account.id, ZERO))
        for account in accounts
    }


def find_unbalanced_groups(groups: Iterable[TransactionGroup]) -> list[str]:
    """Return IDs of groups whose debit and credit totals differ."""
    return [group.id for group in groups if not group.is_balanced]


def ensure_balanced(groups: Iterable[TransactionGroup]) -> None:
    """Raise if any group fails double-entry closure.

    Raises:
        UnbalancedGroupError: Listing every offending group
    """
    unbalanced = find_unbalanced_groups(groups)
    if unbalanced:
        raise UnbalancedGroupError(unbalanced)


class BalanceService:
    """Service for computing balances straight from a ledger backend."""

    def __init__(self, backend: LedgerBackend):
        """Initialize balance service.

        Args:
            backend: Ledger backend instance
        """
        self.backend = backend

    def get_movement_balances(
        self, organization_id: Optional[str] = None, strict: bool = False
    ) -> dict[str, MovementBalance]:
        """Fetch accounts and groups and compute movement balances.

        A failed group fetch yields an all-zero map rather than a partial one.

        Raises:
            FetchError: If the accounts themselves cannot be fetched
        """
        accounts = self.backend.get_accounts(organization_id)
        return self._movement_for(accounts, organization_id, strict)

    def get_total_balances(
        self, organization_id: Optional[str] = None
    ) -> dict[str, TotalBalance]:
        """Fetch and compute balances including each account's initial balance."""
        accounts = self.backend.get_accounts(organization_id)
        movement = self._movement_for(accounts, organization_id, strict=False)
        return total_balances(accounts, movement)

    def _movement_for(
        self, accounts: list[Account], organization_id: Optional[str], strict: bool
    ) -> dict[str, MovementBalance]:
        try:
            groups = self.backend.get_transaction_groups(organization_id)
        except FetchError:
            logger.exception("Failed to fetch transaction groups")
            return zero_balances(accounts)
        return compute_movement_balances(accounts, groups, strict=strict)
