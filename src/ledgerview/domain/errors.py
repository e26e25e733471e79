"""Shared domain error messages and error types."""

from typing import Iterable, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    ``errors`` maps form field names to messages when the failure comes from
    account validation.
    """

    def __init__(self, message: str, errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class FetchError(DomainError):
    """The ledger service could not be reached or returned an unusable reply."""


class UnknownAccountReferenceError(DomainError):
    """An entry references an account absent from the loaded account set."""

    def __init__(self, account_id: str, group_id: str):
        super().__init__(unknown_account_reference(account_id, group_id))
        self.account_id = account_id
        self.group_id = group_id


class UnbalancedGroupError(DomainError):
    """One or more transaction groups fail double-entry closure."""

    def __init__(self, group_ids: Iterable[str]):
        self.group_ids = tuple(group_ids)
        super().__init__(unbalanced_groups(self.group_ids))


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def organization_not_found(organization_id: str) -> str:
    """Return message for missing organization."""
    return f"Organization {organization_id} not found"


def parent_account_not_found(parent_id: str) -> str:
    """Return message for a missing parent account."""
    return f"Parent account {parent_id} not found"


def duplicate_account_code(code: str, organization_id: Optional[str]) -> str:
    """Return message for an account code already used in an organization."""
    scope = f"organization {organization_id}" if organization_id else "personal accounts"
    return f"Account code '{code}' already exists in {scope}"


def unknown_account_reference(account_id: str, group_id: str) -> str:
    """Return message for an entry pointing at an unloaded account."""
    return f"Transaction group {group_id} references unknown account {account_id}"


def unbalanced_groups(group_ids: Iterable[str]) -> str:
    """Return message for groups whose debits and credits differ."""
    ids = list(group_ids)
    noun = "group" if len(ids) == 1 else "groups"
    return f"Unbalanced transaction {noun}: {', '.join(ids)}"


def account_validation_failed(errors: dict[str, str]) -> str:
    """Return summary message for a failed account validation."""
    details = "; ".join(f"{field}: {message}" for field, message in errors.items())
    return f"Invalid account: {details}"
