"""
Ledger API Client Module

REST client for the remote ledger service. Fetches organizations, accounts
and transaction groups (with embedded entries) and submits account changes.
"""

import logging
from typing import Any, Optional

import httpx

from ledgerview.backend.base import LedgerBackend
from ledgerview.backend.payloads import (
    account_form_to_payload,
    account_from_payload,
    organization_from_payload,
    transaction_group_from_payload,
)
from ledgerview.domain.entities import (
    Account,
    AccountFormData,
    Organization,
    TransactionGroup,
)
from ledgerview.domain.errors import ConflictError, FetchError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ACCOUNTS_PATH = "/api/accounting2/accounts"
ORGANIZATIONS_PATH = "/api/organizations"
TRANSACTION_GROUPS_PATH = "/api/accounting2/transaction-groups-with-entries"


class LedgerApiClient(LedgerBackend):
    """REST client for the ledger service"""

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        timeout: float = 10.0,
        api_token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_token = api_token
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    def connect(self) -> None:
        self._get_client()

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def initialize_schema(self) -> None:
        # The remote service owns its storage
        pass

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        """Send a request and unwrap the service's ``{success, data}`` envelope."""
        try:
            response = self._get_client().request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error("Ledger service request %s %s failed: %s", method, path, exc)
            raise FetchError(f"Ledger service unreachable: {exc}") from exc

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.warning(
                "Ledger service returned %s for %s %s: %s", response.status_code, method, path, message
            )
            if method == "GET":
                raise FetchError(f"Ledger service error {response.status_code}: {message}")
            if response.status_code == 404:
                raise NotFoundError(message)
            if response.status_code == 409:
                raise ConflictError(message)
            if response.status_code in (400, 422):
                raise ValidationError(message)
            raise FetchError(f"Ledger service error {response.status_code}: {message}")

        try:
            body = response.json()
        except ValueError as exc:
            raise FetchError(f"Ledger service returned invalid JSON for {path}") from exc

        if isinstance(body, dict) and "success" in body:
            if not body.get("success"):
                raise FetchError(body.get("message") or f"Ledger service rejected {path}")
            return body.get("data")
        return body

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("message") or response.text
        return response.text

    def _items(self, data: Any, path: str) -> list:
        """Require a JSON list (or nothing) where the service returns a collection."""
        if data is None:
            return []
        if not isinstance(data, list):
            raise FetchError(f"Ledger service returned a non-list payload for {path}")
        return data

    def _organization_params(self, organization_id: Optional[str]) -> dict:
        return {"organizationId": organization_id} if organization_id else {}

    def get_accounts(self, organization_id: Optional[str] = None) -> list[Account]:
        data = self._request("GET", ACCOUNTS_PATH, params=self._organization_params(organization_id))
        return [account_from_payload(item) for item in self._items(data, ACCOUNTS_PATH)]

    def get_organizations(self) -> list[Organization]:
        data = self._request("GET", ORGANIZATIONS_PATH)
        return [organization_from_payload(item) for item in self._items(data, ORGANIZATIONS_PATH)]

    def get_transaction_groups(
        self, organization_id: Optional[str] = None
    ) -> list[TransactionGroup]:
        data = self._request(
            "GET", TRANSACTION_GROUPS_PATH, params=self._organization_params(organization_id)
        )
        if isinstance(data, dict):
            data = data.get("groups")
        return [
            transaction_group_from_payload(item)
            for item in self._items(data, TRANSACTION_GROUPS_PATH)
        ]

    def save_account(self, form: AccountFormData) -> Account:
        payload = account_form_to_payload(form)
        if form.id:
            data = self._request("PUT", f"{ACCOUNTS_PATH}/{form.id}", json=payload)
        else:
            data = self._request("POST", ACCOUNTS_PATH, json=payload)
        return account_from_payload(data)
