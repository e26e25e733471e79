"""Transaction group commands."""

from datetime import date

import click
from ledgerview.cli.error_handling import handle_domain_error, require_local_ledger
from ledgerview.cli.resolution import resolve_account_or_exit, resolve_organization_or_exit
from ledgerview.domain.entities import GroupStatus
from ledgerview.domain.errors import DomainError
from ledgerview.utils.amount_parser import parse_amount
from ledgerview.utils.date_parser import parse_date


def parse_entry_argument(argument: str) -> tuple[str, str, str]:
    """Split an ``ACCOUNT:DEBIT:CREDIT`` entry argument.

    Empty amounts mean zero, so ``1101:500:`` is a 500 debit.

    Raises:
        ValueError: If the argument does not have three parts
    """
    parts = argument.rsplit(":", 2)
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"Invalid entry '{argument}'. Use ACCOUNT:DEBIT:CREDIT")
    return parts[0], parts[1] or "0", parts[2] or "0"


@click.group()
def group_group():
    """Manage transaction groups."""
    pass


@group_group.command("add")
@click.argument("group_number", metavar="GROUP_NUMBER")
@click.argument("entries", metavar="ENTRY...", nargs=-1, required=True)
@click.option("--date", "date_str", default="today", show_default=True,
              help="Transaction date (e.g. 2024-01-15, yesterday)")
@click.option("--description", default="", help="Group description")
@click.option("--org", "organization", help="Organization ID or name")
@click.option("--invoice", "invoice_no", help="Invoice number")
@click.option("--receipt-url", help="Link to a receipt")
@click.option(
    "--status",
    type=click.Choice([status.value for status in GroupStatus]),
    default=GroupStatus.CONFIRMED.value,
    show_default=True,
)
@click.pass_context
def add_group(
    ctx,
    group_number: str,
    entries: tuple[str, ...],
    date_str: str,
    description: str,
    organization: str | None,
    invoice_no: str | None,
    receipt_url: str | None,
    status: str,
):
    """Record a balanced transaction group.

    Each ENTRY is ACCOUNT:DEBIT:CREDIT, where ACCOUNT is an account ID or
    code. Total debits must equal total credits.

    Examples:
        ledgerview group add TG-001 1101:1000: 4101::1000 --description "Cash sale"
        ledgerview group add TG-002 6101:250:0 1101:0:250 --date 2024-01-15
    """
    backend = require_local_ledger(ctx, "group add")
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    try:
        transaction_date: date = parse_date(date_str)
    except ValueError as e:
        handle_domain_error(ctx, e)

    try:
        accounts = backend.get_accounts(organization_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    parsed = []
    for argument in entries:
        try:
            account_ref, debit, credit = parse_entry_argument(argument)
            debit_amount = parse_amount(debit)
            credit_amount = parse_amount(credit)
        except ValueError as e:
            handle_domain_error(ctx, e)
        account = resolve_account_or_exit(ctx, accounts, account_ref)
        parsed.append((account.id, debit_amount, credit_amount))

    try:
        group = backend.create_transaction_group(
            group_number=group_number,
            transaction_date=transaction_date,
            entries=parsed,
            description=description,
            organization_id=organization_id,
            invoice_no=invoice_no,
            receipt_url=receipt_url,
            status=GroupStatus(status),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded group {group.group_number} on {group.transaction_date.isoformat()} "
        f"with {len(group.entries)} entries (total {group.total_amount:,.2f})"
    )


def register_commands(cli):
    """Register transaction group commands with main CLI."""
    cli.add_command(group_group, name="group")
