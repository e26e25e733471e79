"""CLI error handling helpers."""

import click

from ledgerview.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ValidationError):
        for field_name, message in error.errors.items():
            click.echo(f"  {field_name}: {message}", err=True)
    ctx.exit(1)


def require_local_ledger(ctx: click.Context, command: str):
    """Return the local SQLAlchemy ledger, or exit if a remote service is configured."""
    from ledgerview.backend.sqlalchemy_backend import SQLAlchemyLedger

    backend = ctx.obj["backend"]
    if not isinstance(backend, SQLAlchemyLedger):
        click.echo(f"Error: '{command}' is only available with the local ledger database", err=True)
        ctx.exit(1)
    return backend
