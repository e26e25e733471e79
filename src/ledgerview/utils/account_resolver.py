"""Utility for resolving account codes to IDs."""

from typing import Iterable

from ledgerview.domain.entities import Account


def resolve_account(accounts: Iterable[Account], account: str) -> Account:
    """Resolve an account ID or code to an account.

    IDs take precedence over codes. Codes are only unique per organization,
    so a code shared by several loaded accounts is rejected as ambiguous.

    Args:
        accounts: Accounts to search
        account: Account ID or code

    Returns:
        Matching account

    Raises:
        ValueError: If no account matches, or the code is ambiguous
    """
    accounts = list(accounts)
    for acc in accounts:
        if acc.id == account:
            return acc

    matches = [acc for acc in accounts if acc.code == account]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValueError(
            f"Account code '{account}' is used by {len(matches)} accounts; "
            "pass the account ID or narrow with --org"
        )
    raise ValueError(f"Account '{account}' not found")
