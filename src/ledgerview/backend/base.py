"""Abstract ledger backend interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain services
from ledgerview.domain.entities import (
    Account,
    AccountFormData,
    Organization,
    TransactionGroup,
)


class LedgerBackend(ABC):
    """Read and write contract of the external ledger service.

    Read methods raise ``FetchError`` when the service cannot be reached.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the ledger service."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the ledger service."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Prepare backend storage, if the backend owns any."""
        pass

    @abstractmethod
    def get_accounts(self, organization_id: Optional[str] = None) -> list[Account]:
        """List accounts, optionally limited to one organization."""
        pass

    @abstractmethod
    def get_organizations(self) -> list[Organization]:
        """List organizations."""
        pass

    @abstractmethod
    def get_transaction_groups(
        self, organization_id: Optional[str] = None
    ) -> list[TransactionGroup]:
        """List transaction groups with their entries embedded.

        Groups come back in the service's order, which is the order the
        entry aggregator reports them in.
        """
        pass

    @abstractmethod
    def save_account(self, form: AccountFormData) -> Account:
        """Create an account, or update it when ``form.id`` is set.

        Expects a validated form with defaults applied.
        """
        pass
