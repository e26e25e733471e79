"""Shared CLI rendering helpers."""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

import click
from ledgerview.domain.entities import AccountTreeNode, NodeKind
from ledgerview.domain.ledger_view import LedgerViewController

INDENT = "    "


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


def echo_tree(
    nodes: Iterable[AccountTreeNode],
    amounts: Optional[Mapping[str, Decimal]] = None,
    indent: int = 0,
) -> None:
    """Print the chart-of-accounts tree, optionally with an amount per node."""
    for node in nodes:
        prefix = INDENT * indent
        name = node.name
        if node.kind == NodeKind.ACCOUNT and node.account is not None and not node.account.is_active:
            name = f"{name} (inactive)"
        if amounts is not None:
            label = f"{prefix}{name}"
            click.echo(f"{label:<50s} {format_amount(amounts.get(node.id, Decimal('0'))):>18s}")
        else:
            click.echo(f"{prefix}{name}")
        echo_tree(node.children, amounts, indent + 1)


def echo_notifications(controller: LedgerViewController) -> None:
    """Print pending controller notifications to stderr."""
    for notification in controller.pop_notifications():
        click.echo(f"{notification.severity.capitalize()}: {notification.message}", err=True)
