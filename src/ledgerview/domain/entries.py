"""Per-account entry aggregation."""

from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from ledgerview.domain.balance import signed_amount
from ledgerview.domain.entities import (
    ZERO,
    Account,
    AccountEntries,
    AccountType,
    EntryDetail,
    EntryStatistics,
    GroupStatus,
    MonthlyActivity,
    MovementBalance,
    RawDelta,
    TransactionGroup,
)


def aggregate_account_entries(
    account_id: str,
    groups: Iterable[TransactionGroup],
    account: Optional[Account] = None,
) -> AccountEntries:
    """Collect the entries touching one account, with summary statistics.

    Entries come out in group iteration order, then by sequence within each
    group. No date sort happens here; pass groups already sorted when
    chronological order matters.

    Args:
        account_id: Account to collect entries for
        groups: Transaction groups in scope
        account: Optional account entity; when given, the statistics include
            a polarity-aware ``signed_balance``

    Returns:
        AccountEntries with denormalized entries and statistics
    """
    details: list[EntryDetail] = []
    for group in groups:
        matching = [entry for entry in group.entries if entry.account_id == account_id]
        if not matching:
            continue

        counterparts = _counterpart_ids(group, account_id)
        for entry in sorted(matching, key=lambda e: e.sequence):
            details.append(
                EntryDetail(
                    entry_id=entry.id or f"{group.id}-{entry.sequence}",
                    group_id=group.id,
                    group_number=group.group_number,
                    transaction_date=group.transaction_date,
                    group_description=group.description,
                    status=group.status,
                    invoice_no=group.invoice_no,
                    receipt_url=group.receipt_url,
                    sequence=entry.sequence,
                    account_id=entry.account_id,
                    debit_amount=entry.debit_amount,
                    credit_amount=entry.credit_amount,
                    description=entry.description,
                    category_id=entry.category_id,
                    counterpart_account_ids=counterparts,
                )
            )

    account_type = account.account_type if account is not None else None
    return AccountEntries(
        account_id=account_id,
        entries=tuple(details),
        statistics=calculate_statistics(details, account_type),
    )


def _counterpart_ids(group: TransactionGroup, account_id: str) -> tuple[str, ...]:
    seen: list[str] = []
    for entry in sorted(group.entries, key=lambda e: e.sequence):
        if entry.account_id != account_id and entry.account_id not in seen:
            seen.append(entry.account_id)
    return tuple(seen)


def calculate_statistics(
    entries: Sequence[EntryDetail],
    account_type: Union[AccountType, str, None] = None,
) -> EntryStatistics:
    """Summarize debit/credit totals, date range, monthly and status activity.

    ``raw_delta`` is debit minus credit for every account type. The typed
    ``signed_balance`` is only filled in when ``account_type`` is known.
    """
    total_debit = sum((entry.debit_amount for entry in entries), ZERO)
    total_credit = sum((entry.credit_amount for entry in entries), ZERO)

    signed_balance = None
    if account_type is not None:
        signed_balance = signed_amount(account_type, total_debit, total_credit)

    dates = [entry.transaction_date for entry in entries]
    status_counts = Counter(entry.status for entry in entries)

    return EntryStatistics(
        entry_count=len(entries),
        total_debit=total_debit,
        total_credit=total_credit,
        raw_delta=RawDelta(total_debit - total_credit),
        signed_balance=signed_balance,
        first_transaction_date=min(dates) if dates else None,
        last_transaction_date=max(dates) if dates else None,
        monthly_activity=group_entries_by_month(entries),
        status_counts={status: status_counts.get(status, 0) for status in GroupStatus},
    )


def group_entries_by_month(entries: Iterable[EntryDetail]) -> tuple[MonthlyActivity, ...]:
    """Aggregate entries per calendar month (YYYY-MM), oldest month first."""
    months: dict[str, list[Decimal]] = {}
    counts: Counter = Counter()
    for entry in entries:
        key = entry.transaction_date.strftime("%Y-%m")
        totals = months.setdefault(key, [ZERO, ZERO])
        totals[0] += entry.debit_amount
        totals[1] += entry.credit_amount
        counts[key] += 1

    return tuple(
        MonthlyActivity(
            month=key,
            debit_amount=debit,
            credit_amount=credit,
            raw_delta=RawDelta(debit - credit),
            entry_count=counts[key],
        )
        for key, (debit, credit) in sorted(months.items())
    )


def running_balances(
    entries: Sequence[EntryDetail], account_type: Union[AccountType, str]
) -> dict[str, MovementBalance]:
    """Cumulative typed balance after each entry, accumulated oldest first.

    Entries are ordered by transaction date, then group ID, then sequence, so
    same-day groups accumulate in a stable order regardless of display order.

    Returns:
        Mapping of entry ID to the running balance after that entry
    """
    ordered = sorted(
        entries, key=lambda e: (e.transaction_date, e.group_id, e.sequence)
    )
    running = ZERO
    result: dict[str, MovementBalance] = {}
    for entry in ordered:
        running += signed_amount(account_type, entry.debit_amount, entry.credit_amount)
        result[entry.entry_id] = MovementBalance(running)
    return result
