"""Organization commands."""

import click
from ledgerview.cli.error_handling import handle_domain_error, require_local_ledger
from ledgerview.domain.account import AccountService
from ledgerview.domain.errors import DomainError


@click.group()
def org_group():
    """Manage organizations."""
    pass


@org_group.command("create")
@click.argument("name", metavar="NAME")
@click.pass_context
def create_organization(ctx, name: str):
    """Create a new organization.

    Examples:
        ledgerview org create "Acme Ltd"
    """
    backend = require_local_ledger(ctx, "org create")
    try:
        organization = backend.create_organization(name)
        click.echo(f"Created organization '{organization.name}' (ID: {organization.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@org_group.command("list")
@click.pass_context
def list_organizations(ctx):
    """List all organizations."""
    service = AccountService(ctx.obj["backend"])

    try:
        organizations = service.list_organizations()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not organizations:
        click.echo("No organizations found.")
        return

    click.echo("\nOrganizations:")
    click.echo("-" * 60)
    for org in organizations:
        click.echo(f"ID: {org.id} | {org.name}")


def register_commands(cli):
    """Register organization commands with main CLI."""
    cli.add_command(org_group, name="org")
