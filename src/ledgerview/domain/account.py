"""Account domain service."""

import logging
from typing import Optional

from ledgerview.backend.base import LedgerBackend
from ledgerview.domain.entities import Account, AccountFormData, Organization
from ledgerview.domain.errors import ValidationError, account_validation_failed
from ledgerview.domain.validation import apply_defaults, validate_account

logger = logging.getLogger(__name__)


class AccountService:
    """Service for reading and saving chart-of-accounts entries."""

    def __init__(self, backend: LedgerBackend):
        """Initialize account service.

        Args:
            backend: Ledger backend instance
        """
        self.backend = backend

    def save_account(self, form: AccountFormData) -> Account:
        """Validate and submit an account.

        Creates the account when ``form.id`` is empty, updates it otherwise.
        Nothing is sent to the backend when validation fails.

        Args:
            form: Account form data

        Returns:
            The saved account as returned by the backend

        Raises:
            ValidationError: If the form is invalid; ``errors`` holds the
                field-level messages
        """
        errors = validate_account(form)
        if errors:
            raise ValidationError(account_validation_failed(errors), errors)

        saved = self.backend.save_account(apply_defaults(form))
        logger.info(
            "%s account %s (%s)",
            "Updated" if form.is_update else "Created",
            saved.code,
            saved.id,
        )
        return saved

    def get_account(
        self, account_id: str, organization_id: Optional[str] = None
    ) -> Optional[Account]:
        """Get account by ID.

        Args:
            account_id: Account ID
            organization_id: Optional organization scope

        Returns:
            Account entity or None if not found
        """
        for account in self.backend.get_accounts(organization_id):
            if account.id == account_id:
                return account
        return None

    def list_accounts(self, organization_id: Optional[str] = None) -> list[Account]:
        """List accounts, optionally limited to one organization."""
        return self.backend.get_accounts(organization_id)

    def list_organizations(self) -> list[Organization]:
        """List organizations."""
        return self.backend.get_organizations()
