"""Account submission validation."""

from dataclasses import replace
from decimal import Decimal

from ledgerview.domain.entities import (
    DEFAULT_CURRENCY,
    ZERO,
    AccountFormData,
    AccountSubType,
    AccountType,
)
from ledgerview.utils.amount_parser import parse_amount

ACCOUNT_TYPE_VALUES = tuple(t.value for t in AccountType)
SUB_TYPE_VALUES = tuple(t.value for t in AccountSubType)


def validate_account(form: AccountFormData) -> dict[str, str]:
    """Validate an account submission.

    Duplicate codes are not checked here; the ledger service owns uniqueness.

    Args:
        form: Account form data

    Returns:
        Mapping of field name to error message; empty when the form is valid
    """
    errors: dict[str, str] = {}

    if not (form.code or "").strip():
        errors["code"] = "Account code is required"
    if not (form.name or "").strip():
        errors["name"] = "Account name is required"

    if not form.account_type:
        errors["account_type"] = "Account type is required"
    elif form.account_type not in ACCOUNT_TYPE_VALUES:
        errors["account_type"] = (
            f"Account type must be one of: {', '.join(ACCOUNT_TYPE_VALUES)}"
        )

    if not form.sub_type:
        errors["sub_type"] = "Account sub type is required"
    elif form.sub_type not in SUB_TYPE_VALUES:
        errors["sub_type"] = f"Sub type must be one of: {', '.join(SUB_TYPE_VALUES)}"

    if isinstance(form.initial_balance, str) and form.initial_balance.strip():
        try:
            parse_amount(form.initial_balance)
        except ValueError:
            errors["initial_balance"] = "Initial balance must be a number"

    if form.parent_id and form.id and form.parent_id == form.id:
        errors["parent_id"] = "An account cannot be its own parent"

    return errors


def apply_defaults(form: AccountFormData) -> AccountFormData:
    """Fill optional fields with their defaults.

    Expects a form that already passed ``validate_account``.
    """
    initial_balance = form.initial_balance
    if initial_balance is None or (
        isinstance(initial_balance, str) and not initial_balance.strip()
    ):
        initial_balance = ZERO
    elif isinstance(initial_balance, str):
        initial_balance = parse_amount(initial_balance)
    else:
        initial_balance = Decimal(initial_balance)

    return replace(
        form,
        code=form.code.strip(),
        name=form.name.strip(),
        initial_balance=initial_balance,
        currency=(form.currency or "").strip() or DEFAULT_CURRENCY,
        parent_id=form.parent_id or None,
        description=form.description or None,
        organization_id=form.organization_id or None,
    )
