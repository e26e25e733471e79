"""Balance, entry and integrity commands."""

import click
from ledgerview.cli.display import echo_notifications, echo_tree, format_amount
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.resolution import resolve_account_or_exit, resolve_organization_or_exit
from ledgerview.domain.balance import ensure_balanced
from ledgerview.domain.chart import attach_balances
from ledgerview.domain.entries import running_balances
from ledgerview.domain.errors import DomainError, UnbalancedGroupError
from ledgerview.domain.ledger_view import LedgerViewController


@click.command("balances")
@click.option("--org", "organization", help="Only show this organization (ID or name)")
@click.option("--total", is_flag=True, help="Include each account's initial balance")
@click.option("--strict", is_flag=True,
              help="Reject the whole ledger if an entry references an unknown account")
@click.pass_context
def show_balances(ctx, organization: str | None, total: bool, strict: bool):
    """Show account balances on the chart-of-accounts tree.

    Balances are the net movement from transaction groups, signed by account
    type: debits increase asset and expense accounts, credits increase
    liability, equity and revenue accounts. Type and organization rows show
    the sum of the accounts below them.

    Examples:
        ledgerview balances
        ledgerview balances --org "Acme Ltd" --total
    """
    backend = ctx.obj["backend"]
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    controller = LedgerViewController(backend, strict_references=strict)
    view = controller.set_organization(organization_id)
    echo_notifications(controller)

    if not view.tree:
        click.echo("No accounts found.")
        return

    balances = view.total_balances() if total else view.balances
    heading = "Total balance" if total else "Balance"
    click.echo(f"\n{'Account':<50s} {heading:>18s}")
    click.echo("-" * 69)
    echo_tree(view.tree, attach_balances(view.tree, balances))


@click.command("entries")
@click.argument("account", metavar="ACCOUNT")
@click.option("--org", "organization", help="Organization scope (ID or name)")
@click.option("--running", is_flag=True, help="Show the running balance after each entry")
@click.pass_context
def show_entries(ctx, account: str, organization: str | None, running: bool):
    """Show the entries posted to an account, with summary statistics.

    ACCOUNT can be an account ID or code. Entries are listed oldest first.

    Examples:
        ledgerview entries 1101
        ledgerview entries 1101 --running
    """
    backend = ctx.obj["backend"]
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    controller = LedgerViewController(backend)
    view = controller.set_organization(organization_id)
    echo_notifications(controller)

    acc = resolve_account_or_exit(ctx, list(view.accounts), account)
    selection = controller.select_account(acc.id)
    stats = selection.statistics

    click.echo(f"\n{acc.label}")
    click.echo("-" * 80)
    if not selection.entries:
        click.echo("No entries found.")
        return

    ordered = sorted(
        selection.entries, key=lambda e: (e.transaction_date, e.group_id, e.sequence)
    )
    running_map = running_balances(ordered, acc.account_type) if running else {}
    for entry in ordered:
        line = (
            f"{entry.transaction_date.isoformat()} | {entry.group_number:12s} | "
            f"{entry.status.value:9s} | Dr {format_amount(entry.debit_amount):>14s} | "
            f"Cr {format_amount(entry.credit_amount):>14s}"
        )
        if running:
            line += f" | {format_amount(running_map[entry.entry_id]):>14s}"
        description = entry.description or entry.group_description
        if description:
            line += f" | {description}"
        click.echo(line)

    click.echo("-" * 80)
    click.echo(f"Entries: {stats.entry_count}")
    click.echo(f"Total debit: {format_amount(stats.total_debit)}")
    click.echo(f"Total credit: {format_amount(stats.total_credit)}")
    if stats.signed_balance is not None:
        click.echo(f"Balance: {format_amount(stats.signed_balance)}")
    click.echo(
        f"Period: {stats.first_transaction_date.isoformat()} to "
        f"{stats.last_transaction_date.isoformat()}"
    )
    counts = ", ".join(f"{status.value} {count}" for status, count in stats.status_counts.items())
    click.echo(f"Status: {counts}")
    if len(stats.monthly_activity) > 1:
        click.echo("\nMonthly activity:")
        for month in stats.monthly_activity:
            click.echo(
                f"  {month.month} | Dr {format_amount(month.debit_amount):>14s} | "
                f"Cr {format_amount(month.credit_amount):>14s} | {month.entry_count} entries"
            )


@click.command("check")
@click.option("--org", "organization", help="Only check this organization (ID or name)")
@click.pass_context
def check_ledger(ctx, organization: str | None):
    """Check that every transaction group is balanced.

    Exits with status 1 and lists the offending groups when any group's
    debits differ from its credits.
    """
    backend = ctx.obj["backend"]
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    try:
        groups = backend.get_transaction_groups(organization_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    try:
        ensure_balanced(groups)
    except UnbalancedGroupError as e:
        by_id = {group.id: group for group in groups}
        for group_id in e.group_ids:
            group = by_id[group_id]
            click.echo(
                f"{group.group_number}: debit {format_amount(group.total_debit)}, "
                f"credit {format_amount(group.total_credit)}, "
                f"difference {format_amount(group.balance_difference)}",
                err=True,
            )
        handle_domain_error(ctx, e)

    click.echo(f"All {len(groups)} transaction groups are balanced.")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(show_balances)
    cli.add_command(show_entries)
    cli.add_command(check_ledger)
