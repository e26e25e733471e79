"""Main CLI entry point."""

import click
from ledgerview.backend.factories import create_backend
from ledgerview.logging_config import setup_logging

# Import and register all commands at module level
from ledgerview.cli.commands import (
    account,
    group,
    ledger,
    organization,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to the local ledger database (overrides LEDGERVIEW_DB_PATH environment variable)",
    envvar="LEDGERVIEW_DB_PATH",
)
@click.option(
    "--api-url",
    help="Base URL of a remote ledger service; when set, the local database is not used",
    envvar="LEDGERVIEW_API_URL",
)
@click.option(
    "--api-token",
    help="Bearer token for the remote ledger service",
    envvar="LEDGERVIEW_API_TOKEN",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERVIEW_LOG_LEVEL",
    help="Log level for diagnostics written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, api_url: str | None, api_token: str | None, log_level: str):
    """Ledgerview - Double-entry ledger balances.

    Browse a chart of accounts, compute account balances from journal
    entries and drill into the entries behind each balance.
    """
    ctx.ensure_object(dict)

    # Initialize the backend only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(log_level)
        backend = create_backend(database_path=db_path, api_url=api_url, api_token=api_token)
        backend.connect()
        backend.initialize_schema()
        ctx.obj["backend"] = backend
        ctx.call_on_close(backend.disconnect)


# Register all commands
organization.register_commands(cli)
account.register_commands(cli)
group.register_commands(cli)
ledger.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
