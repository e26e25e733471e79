"""CLI helpers for account and organization resolution."""

from __future__ import annotations

import click
from ledgerview.backend.base import LedgerBackend
from ledgerview.domain.entities import Account
from ledgerview.domain.errors import FetchError
from ledgerview.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, accounts: list[Account], account: str
) -> Account:
    """Resolve account ID or code, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(accounts, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_organization_or_exit(
    ctx: click.Context, backend: LedgerBackend, organization: str | None
) -> str | None:
    """Resolve an organization ID or name to its ID, or exit with a CLI error.

    ``None`` (no filter) passes through unchanged.
    """
    if organization is None:
        return None
    try:
        organizations = backend.get_organizations()
    except FetchError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)

    for org in organizations:
        if org.id == organization:
            return org.id
    for org in organizations:
        if org.name == organization:
            return org.id
    click.echo(f"Error: Organization '{organization}' not found", err=True)
    ctx.exit(1)
