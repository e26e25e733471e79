"""Account management commands."""

import click
from ledgerview.cli.display import echo_notifications, echo_tree, format_amount
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.resolution import resolve_account_or_exit, resolve_organization_or_exit
from ledgerview.domain.account import AccountService
from ledgerview.domain.balance import BalanceService
from ledgerview.domain.chart import build_account_tree
from ledgerview.domain.entities import AccountFormData, AccountSubType
from ledgerview.domain.errors import DomainError
from ledgerview.domain.ledger_view import LedgerViewController


def _type_value(account_type) -> str:
    """Plain string value of a known or unknown account type."""
    return getattr(account_type, "value", account_type)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--type", "account_type", required=True,
              help="Account type: asset, liability, equity, revenue or expense")
@click.option("--sub-type", default=AccountSubType.OTHER.value, show_default=True,
              help="Sub type: cash, bank, credit, investment or other")
@click.option("--parent", help="Parent account ID or code")
@click.option("--initial-balance", help="Opening balance (e.g. 1,000.00)")
@click.option("--currency", help="Currency code (defaults to TWD)")
@click.option("--org", "organization", help="Organization ID or name")
@click.option("--description", help="Free-form description")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    sub_type: str,
    parent: str | None,
    initial_balance: str | None,
    currency: str | None,
    organization: str | None,
    description: str | None,
):
    """Create a new account.

    Accounts without --org are personal accounts.

    Examples:
        ledgerview account create 1101 "Cash" --type asset --sub-type cash
        ledgerview account create 1102 "Petty Cash" --type asset --parent 1101
        ledgerview account create 4101 "Sales" --type revenue --org "Acme Ltd"
    """
    backend = ctx.obj["backend"]
    service = AccountService(backend)
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service.list_accounts(organization_id), parent).id

    form = AccountFormData(
        code=code,
        name=name,
        account_type=account_type.lower(),
        sub_type=sub_type.lower(),
        parent_id=parent_id,
        initial_balance=initial_balance,
        currency=currency,
        description=description,
        organization_id=organization_id,
    )
    try:
        account = service.save_account(form)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{account.label}' (ID: {account.id})")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--code", help="New account code")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", help="New account type")
@click.option("--sub-type", help="New sub type")
@click.option("--parent", help="New parent account ID or code")
@click.option("--no-parent", is_flag=True, help="Move the account to the top level")
@click.option("--initial-balance", help="New opening balance")
@click.option("--currency", help="New currency code")
@click.option("--description", help="New description")
@click.option("--active/--inactive", default=None, help="Activate or deactivate the account")
@click.pass_context
def update_account(
    ctx,
    account: str,
    code: str | None,
    name: str | None,
    account_type: str | None,
    sub_type: str | None,
    parent: str | None,
    no_parent: bool,
    initial_balance: str | None,
    currency: str | None,
    description: str | None,
    active: bool | None,
) -> None:
    """Update an existing account.

    ACCOUNT can be an account ID or code. Options that are not given keep
    their current value.

    Examples:
        ledgerview account update 1101 --name "Cash on Hand"
        ledgerview account update 1102 --no-parent
        ledgerview account update 6101 --inactive
    """
    service = AccountService(ctx.obj["backend"])
    try:
        accounts = service.list_accounts()
    except DomainError as e:
        handle_domain_error(ctx, e)
    existing = resolve_account_or_exit(ctx, accounts, account)

    if parent is not None and no_parent:
        click.echo("Error: --parent and --no-parent cannot be combined", err=True)
        ctx.exit(1)

    parent_id = existing.parent_id
    if no_parent:
        parent_id = None
    elif parent is not None:
        scoped = [acc for acc in accounts if acc.organization_id == existing.organization_id]
        parent_id = resolve_account_or_exit(ctx, scoped, parent).id

    form = AccountFormData(
        id=existing.id,
        code=code if code is not None else existing.code,
        name=name if name is not None else existing.name,
        account_type=(account_type or _type_value(existing.account_type)).lower(),
        sub_type=(sub_type or existing.sub_type.value).lower(),
        parent_id=parent_id,
        initial_balance=initial_balance if initial_balance is not None else existing.initial_balance,
        currency=currency if currency is not None else existing.currency,
        description=description if description is not None else existing.description,
        organization_id=existing.organization_id,
        is_active=active if active is not None else existing.is_active,
    )
    try:
        updated = service.save_account(form)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated account '{updated.label}'")


@account_group.command("list")
@click.option("--org", "organization", help="Only list accounts of this organization (ID or name)")
@click.option("--balances", "show_balances", is_flag=True,
              help="Add a column with each account's total balance")
@click.pass_context
def list_accounts(ctx, organization: str | None, show_balances: bool):
    """List accounts.

    With --balances, each row ends with the initial balance plus the net
    movement from transaction groups.
    """
    backend = ctx.obj["backend"]
    service = AccountService(backend)
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    try:
        accounts = service.list_accounts(organization_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No accounts found.")
        return

    balances = {}
    if show_balances:
        try:
            balances = BalanceService(backend).get_total_balances(organization_id)
        except DomainError as e:
            handle_domain_error(ctx, e)

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        account_type = _type_value(acc.account_type)
        status = "" if acc.is_active else " | inactive"
        click.echo(
            f"{acc.code:10s} | {acc.name:25s} | {account_type:9s} | "
            f"{acc.sub_type.value:10s} | ID: {acc.id}{status}"
            + (f" | {format_amount(balances[acc.id])}" if show_balances else "")
        )


@account_group.command("tree")
@click.option("--org", "organization", help="Only show this organization (ID or name)")
@click.option("--all-types", is_flag=True, help="Show account types that have no accounts")
@click.option("--active-only", is_flag=True, help="Hide inactive accounts")
@click.pass_context
def show_tree(ctx, organization: str | None, all_types: bool, active_only: bool):
    """Show the chart of accounts grouped by organization and account type.

    Examples:
        ledgerview account tree
        ledgerview account tree --org "Acme Ltd" --all-types
    """
    backend = ctx.obj["backend"]
    organization_id = resolve_organization_or_exit(ctx, backend, organization)

    controller = LedgerViewController(backend)
    view = controller.set_organization(organization_id)
    echo_notifications(controller)

    tree = build_account_tree(
        view.accounts,
        view.organizations,
        include_empty_types=all_types,
        active_only=active_only,
    )
    if not tree:
        click.echo("No accounts found.")
        return
    echo_tree(tree)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
