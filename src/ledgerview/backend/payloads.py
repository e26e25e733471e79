"""Conversion between ledger service JSON payloads and domain entities.

The service uses camelCase keys and ``_id`` identifiers. Entry references
(``accountId``, ``categoryId``) arrive either as bare ids or as populated
objects; they are resolved here, once, so the engine only sees canonical ids.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil import parser as date_parser

from ledgerview.backend.mappers import parse_account_type, parse_status, parse_sub_type
from ledgerview.domain.entities import (
    DEFAULT_CURRENCY,
    ZERO,
    Account,
    AccountFormData,
    AccountingEntry,
    AccountRef,
    Organization,
    TransactionGroup,
)
from ledgerview.domain.errors import FetchError


def resolve_reference(value: Any) -> Optional[AccountRef]:
    """Resolve a bare id or a populated object into an AccountRef."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return AccountRef(id=value)
    if isinstance(value, dict):
        ref_id = value.get("_id") or value.get("id")
        if not ref_id:
            raise FetchError(f"Reference object without an id: {value!r}")
        return AccountRef(
            id=str(ref_id),
            code=value.get("code"),
            name=value.get("name"),
            account_type=value.get("accountType"),
        )
    raise FetchError(f"Unsupported reference value: {value!r}")


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number or numeric string to Decimal; missing means zero."""
    if value is None or value == "":
        return ZERO
    try:
        # str() keeps floats like 0.1 from turning into binary expansions
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise FetchError(f"Invalid amount: {value!r}") from exc


def to_date(value: Any) -> date:
    """Convert an ISO date or datetime string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, OverflowError) as exc:
        raise FetchError(f"Invalid date: {value!r}") from exc


def to_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def to_int(value: Any, field: str) -> int:
    """Convert a JSON integer field; missing or null means zero."""
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise FetchError(f"Invalid {field}: {value!r}") from exc


def payload_id(payload: Any, kind: str) -> str:
    """Read the ``_id`` (or ``id``) of a payload object.

    Raises:
        FetchError: If the payload is not an object or carries no id
    """
    if not isinstance(payload, dict):
        raise FetchError(f"{kind} payload is not an object: {payload!r}")
    value = payload.get("_id") or payload.get("id")
    if value is None or str(value) == "":
        raise FetchError(f"{kind} payload without an id: {payload!r}")
    return str(value)


def organization_from_payload(payload: dict) -> Organization:
    """Build an Organization from a service payload."""
    return Organization(
        id=payload_id(payload, "Organization"), name=payload.get("name") or ""
    )


def account_from_payload(payload: dict) -> Account:
    """Build an Account from a service payload.

    ``type`` is the service's name for the sub type. ``accountType`` values
    outside the known set are kept as raw strings.
    """
    account_id = payload_id(payload, "Account")
    parent = resolve_reference(payload.get("parentId"))
    organization = resolve_reference(payload.get("organizationId"))
    return Account(
        id=account_id,
        code=payload.get("code", ""),
        name=payload.get("name", ""),
        account_type=parse_account_type(payload.get("accountType") or ""),
        sub_type=parse_sub_type(payload.get("type", "other")),
        parent_id=parent.id if parent else None,
        level=to_int(payload.get("level"), "level"),
        initial_balance=to_decimal(payload.get("initialBalance")),
        currency=payload.get("currency") or DEFAULT_CURRENCY,
        is_active=bool(payload.get("isActive", True)),
        organization_id=organization.id if organization else None,
        description=payload.get("description"),
        created_at=to_datetime(payload.get("createdAt")),
        updated_at=to_datetime(payload.get("updatedAt")),
    )


def entry_from_payload(payload: dict) -> AccountingEntry:
    """Build an AccountingEntry, resolving its account and category references."""
    if not isinstance(payload, dict):
        raise FetchError(f"Entry payload is not an object: {payload!r}")
    account = resolve_reference(payload.get("accountId"))
    if account is None:
        raise FetchError(f"Entry without an account: {payload!r}")
    category = resolve_reference(payload.get("categoryId"))
    return AccountingEntry(
        id=payload.get("_id"),
        account_id=account.id,
        debit_amount=to_decimal(payload.get("debitAmount")),
        credit_amount=to_decimal(payload.get("creditAmount")),
        sequence=to_int(payload.get("sequence"), "sequence"),
        description=payload.get("description") or "",
        category_id=category.id if category else None,
    )


def transaction_group_from_payload(payload: dict) -> TransactionGroup:
    """Build a TransactionGroup with its embedded entries."""
    group_id = payload_id(payload, "Transaction group")
    organization = resolve_reference(payload.get("organizationId"))
    return TransactionGroup(
        id=group_id,
        group_number=payload.get("groupNumber", ""),
        transaction_date=to_date(payload.get("transactionDate")),
        description=payload.get("description") or "",
        organization_id=organization.id if organization else None,
        invoice_no=payload.get("invoiceNo"),
        receipt_url=payload.get("receiptUrl"),
        status=parse_status(payload.get("status") or "draft"),
        entries=tuple(entry_from_payload(entry) for entry in payload.get("entries") or []),
    )


def account_form_to_payload(form: AccountFormData) -> dict[str, Any]:
    """Serialize a validated account form for the service's create/update calls."""
    payload: dict[str, Any] = {
        "code": form.code,
        "name": form.name,
        "accountType": form.account_type,
        "type": form.sub_type,
        "initialBalance": float(form.initial_balance or ZERO),
        "currency": form.currency,
        "isActive": form.is_active,
    }
    if form.parent_id:
        payload["parentId"] = form.parent_id
    if form.description:
        payload["description"] = form.description
    if form.organization_id:
        payload["organizationId"] = form.organization_id
    return payload
