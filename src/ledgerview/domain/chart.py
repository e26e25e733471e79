"""Chart-of-accounts tree building."""

from decimal import Decimal
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from ledgerview.domain.entities import (
    ACCOUNT_TYPE_ORDER,
    PERSONAL_BUCKET_ID,
    PERSONAL_BUCKET_NAME,
    ZERO,
    Account,
    AccountTreeNode,
    AccountType,
    NodeKind,
    Organization,
)


def build_account_tree(
    accounts: Sequence[Account],
    organizations: Iterable[Organization],
    include_empty_types: bool = False,
    active_only: bool = False,
) -> list[AccountTreeNode]:
    """Build the organization > account type > account display forest.

    Organization buckets follow the order in which their first account
    appears; accounts without an organization land in the personal bucket.
    Account nodes keep source order and nest under their parent when the
    parent sits in the same bucket. Accounts with an unknown type are left out.

    Args:
        accounts: Flat list of accounts
        organizations: Known organizations, used for bucket names
        include_empty_types: If True, emit a node for every account type even
            when no account has that type
        active_only: If True, leave inactive accounts out

    Returns:
        List of organization nodes
    """
    organization_names = {org.id: org.name for org in organizations}

    buckets: dict[Optional[str], list[Account]] = {}
    for account in accounts:
        if active_only and not account.is_active:
            continue
        if not account.has_known_type:
            continue
        buckets.setdefault(account.organization_id or None, []).append(account)

    tree = []
    for organization_id, bucket_accounts in buckets.items():
        if organization_id is None:
            bucket_id, bucket_name = PERSONAL_BUCKET_ID, PERSONAL_BUCKET_NAME
        else:
            bucket_id = organization_id
            bucket_name = organization_names.get(organization_id, organization_id)

        by_type: dict[AccountType, list[Account]] = {t: [] for t in ACCOUNT_TYPE_ORDER}
        for account in bucket_accounts:
            by_type[AccountType(account.account_type)].append(account)

        type_nodes = []
        for account_type in ACCOUNT_TYPE_ORDER:
            typed_accounts = by_type[account_type]
            if not typed_accounts and not include_empty_types:
                continue
            type_nodes.append(
                AccountTreeNode(
                    id=f"{bucket_id}-{account_type.value}",
                    name=f"{account_type.label} ({len(typed_accounts)})",
                    kind=NodeKind.ACCOUNT_TYPE,
                    account_type=account_type,
                    children=build_account_nodes(typed_accounts),
                )
            )

        tree.append(
            AccountTreeNode(
                id=bucket_id,
                name=bucket_name,
                kind=NodeKind.ORGANIZATION,
                children=tuple(type_nodes),
            )
        )

    return tree


def build_account_nodes(accounts: Sequence[Account]) -> tuple[AccountTreeNode, ...]:
    """Nest accounts by parent ID, keeping source order among siblings.

    Accounts whose parent is not in ``accounts`` become roots.
    """
    present = {account.id for account in accounts}
    children_map: dict[Optional[str], list[Account]] = {}
    for account in accounts:
        parent_id = account.parent_id if account.parent_id in present else None
        children_map.setdefault(parent_id, []).append(account)

    def build(parent_id: Optional[str]) -> tuple[AccountTreeNode, ...]:
        return tuple(
            AccountTreeNode(
                id=account.id,
                name=account.label,
                kind=NodeKind.ACCOUNT,
                account_type=AccountType(account.account_type),
                account=account,
                children=build(account.id),
            )
            for account in children_map.get(parent_id, [])
        )

    roots = build(None)

    # Parent cycles never reach a root; surface them at the top level.
    placed = {node.id for node in iter_account_nodes(roots)}
    stranded = [account for account in accounts if account.id not in placed]
    if stranded:
        roots = roots + tuple(
            AccountTreeNode(
                id=account.id,
                name=account.label,
                kind=NodeKind.ACCOUNT,
                account_type=AccountType(account.account_type),
                account=account,
            )
            for account in stranded
        )
    return roots


def iter_account_nodes(nodes: Iterable[AccountTreeNode]) -> Iterator[AccountTreeNode]:
    """Yield every account node depth-first, in display order."""
    for node in nodes:
        if node.kind == NodeKind.ACCOUNT:
            yield node
        yield from iter_account_nodes(node.children)


def attach_balances(
    tree: Iterable[AccountTreeNode], balances: Mapping[str, Decimal]
) -> dict[str, Decimal]:
    """Map every tree node ID to a balance for display.

    Account nodes get their own balance plus that of their sub-accounts;
    type and organization nodes get the sum over their subtree.
    """
    result: dict[str, Decimal] = {}

    def visit(node: AccountTreeNode) -> Decimal:
        total = ZERO
        if node.kind == NodeKind.ACCOUNT:
            total += balances.get(node.id, ZERO)
        for child in node.children:
            total += visit(child)
        result[node.id] = total
        return total

    for root in tree:
        visit(root)
    return result
