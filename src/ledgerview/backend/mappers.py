"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, so the stored schema can change
without touching the balance engine.
"""

from decimal import Decimal

from ledgerview.domain import entities as domain
from ledgerview.backend.models import (
    Account as ORMAccount,
    AccountingEntry as ORMAccountingEntry,
    Organization as ORMOrganization,
    TransactionGroup as ORMTransactionGroup,
)


def parse_account_type(value: str):
    """Return the AccountType for ``value``, or the raw string if unknown."""
    try:
        return domain.AccountType(value)
    except ValueError:
        return value


def parse_sub_type(value: str) -> domain.AccountSubType:
    """Return the AccountSubType for ``value``, falling back to OTHER."""
    try:
        return domain.AccountSubType(value)
    except ValueError:
        return domain.AccountSubType.OTHER


def parse_status(value: str) -> domain.GroupStatus:
    """Return the GroupStatus for ``value``, falling back to DRAFT."""
    try:
        return domain.GroupStatus(value)
    except ValueError:
        return domain.GroupStatus.DRAFT


def organization_to_domain(orm_organization: ORMOrganization) -> domain.Organization:
    """Convert SQLAlchemy Organization model to domain Organization entity."""
    return domain.Organization(id=orm_organization.id, name=orm_organization.name)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=parse_account_type(orm_account.account_type),
        sub_type=parse_sub_type(orm_account.sub_type),
        parent_id=orm_account.parent_id,
        level=orm_account.level,
        initial_balance=Decimal(orm_account.initial_balance),
        currency=orm_account.currency,
        is_active=orm_account.is_active,
        organization_id=orm_account.organization_id,
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def entry_to_domain(orm_entry: ORMAccountingEntry) -> domain.AccountingEntry:
    """Convert SQLAlchemy AccountingEntry model to domain AccountingEntry entity."""
    return domain.AccountingEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        debit_amount=Decimal(orm_entry.debit_amount),
        credit_amount=Decimal(orm_entry.credit_amount),
        sequence=orm_entry.sequence,
        description=orm_entry.description,
        category_id=orm_entry.category_id,
    )


def transaction_group_to_domain(orm_group: ORMTransactionGroup) -> domain.TransactionGroup:
    """Convert SQLAlchemy TransactionGroup model to domain TransactionGroup entity."""
    return domain.TransactionGroup(
        id=orm_group.id,
        group_number=orm_group.group_number,
        transaction_date=orm_group.transaction_date,
        description=orm_group.description,
        organization_id=orm_group.organization_id,
        invoice_no=orm_group.invoice_no,
        receipt_url=orm_group.receipt_url,
        status=parse_status(orm_group.status),
        entries=tuple(entry_to_domain(entry) for entry in orm_group.entries),
    )
