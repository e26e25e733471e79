"""Domain model entities for ledgerview.

These are pure data classes representing ledger concepts, independent of the
backend that serves them. Backends (REST client, SQLAlchemy store) map their
own representations onto these entities at the ingestion boundary.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import NewType, Optional, Union


class AccountType(str, Enum):
    """Accounting type of an account."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def normal_balance(self) -> "NormalBalance":
        if self in DEBIT_NORMAL_TYPES:
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT


class NormalBalance(str, Enum):
    """Side on which an account's balance increases."""

    DEBIT = "debit"
    CREDIT = "credit"


class AccountSubType(str, Enum):
    """Legacy account sub type kept for compatibility with the ledger service."""

    CASH = "cash"
    BANK = "bank"
    CREDIT = "credit"
    INVESTMENT = "investment"
    OTHER = "other"


class GroupStatus(str, Enum):
    """Lifecycle status of a transaction group."""

    DRAFT = "draft"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# Canonical ordering used when grouping accounts by type.
ACCOUNT_TYPE_ORDER: tuple[AccountType, ...] = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.EQUITY,
    AccountType.REVENUE,
    AccountType.EXPENSE,
)

DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})

# Organization ids are never empty, so the personal bucket cannot share one
PERSONAL_BUCKET_ID = ""
PERSONAL_BUCKET_NAME = "Personal"

DEFAULT_CURRENCY = "TWD"

# Typed net movement from the supplied transaction groups, excluding the
# account's initial balance.
MovementBalance = NewType("MovementBalance", Decimal)

# initial_balance + MovementBalance.
TotalBalance = NewType("TotalBalance", Decimal)

# total debit - total credit, regardless of account type.
RawDelta = NewType("RawDelta", Decimal)

ZERO = Decimal("0")


@dataclass(frozen=True)
class Organization:
    """Organization domain entity. Pure grouping key for accounts."""

    id: str
    name: str


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry.

    ``account_type`` holds an ``AccountType`` for every account the ledger
    service describes correctly. Unknown type strings are kept as-is so the
    chart builder can exclude them without the ingestion layer failing.
    """

    id: str
    code: str
    name: str
    account_type: Union[AccountType, str]
    sub_type: AccountSubType = AccountSubType.OTHER
    parent_id: Optional[str] = None
    level: int = 0
    initial_balance: Decimal = ZERO
    currency: str = DEFAULT_CURRENCY
    is_active: bool = True
    organization_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_known_type(self) -> bool:
        return isinstance(self.account_type, AccountType)

    @property
    def normal_balance(self) -> Optional[NormalBalance]:
        if not self.has_known_type:
            return None
        return self.account_type.normal_balance

    @property
    def label(self) -> str:
        return f"{self.code} - {self.name}"


@dataclass(frozen=True)
class AccountRef:
    """Resolved account reference.

    The ledger service sends an entry's account either as a bare id or as a
    populated account object; both resolve to this shape once at ingestion.
    """

    id: str
    code: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None


@dataclass(frozen=True)
class AccountingEntry:
    """One debit or credit posting inside a transaction group."""

    account_id: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    sequence: int = 0
    description: str = ""
    category_id: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class TransactionGroup:
    """Journal batch for a single business event."""

    id: str
    group_number: str
    transaction_date: date
    description: str = ""
    organization_id: Optional[str] = None
    invoice_no: Optional[str] = None
    receipt_url: Optional[str] = None
    status: GroupStatus = GroupStatus.DRAFT
    entries: tuple[AccountingEntry, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((entry.debit_amount for entry in self.entries), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((entry.credit_amount for entry in self.entries), ZERO)

    @property
    def total_amount(self) -> Decimal:
        return self.total_debit

    @property
    def balance_difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def is_balanced(self) -> bool:
        """Double-entry closure, compared exactly (amounts are pre-rounded)."""
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class AccountFormData:
    """Account submission as entered by a user, before validation.

    ``initial_balance`` may be text straight from an input field. An empty
    ``id`` means the submission creates a new account.
    """

    code: str = ""
    name: str = ""
    account_type: str = ""
    sub_type: str = ""
    id: Optional[str] = None
    parent_id: Optional[str] = None
    initial_balance: Union[Decimal, str, int, None] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    organization_id: Optional[str] = None
    is_active: bool = True

    @property
    def is_update(self) -> bool:
        return bool(self.id)


class NodeKind(str, Enum):
    """Kind of a node in the chart-of-accounts display tree."""

    ORGANIZATION = "organization"
    ACCOUNT_TYPE = "accountType"
    ACCOUNT = "account"


@dataclass(frozen=True)
class AccountTreeNode:
    """Node of the chart-of-accounts display hierarchy."""

    id: str
    name: str
    kind: NodeKind
    children: tuple["AccountTreeNode", ...] = ()
    account_type: Optional[AccountType] = None
    account: Optional[Account] = None


@dataclass(frozen=True)
class EntryDetail:
    """An entry touching one account, denormalized with its group context."""

    entry_id: str
    group_id: str
    group_number: str
    transaction_date: date
    group_description: str
    status: GroupStatus
    invoice_no: Optional[str]
    receipt_url: Optional[str]
    sequence: int
    account_id: str
    debit_amount: Decimal
    credit_amount: Decimal
    description: str
    category_id: Optional[str]
    counterpart_account_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class MonthlyActivity:
    """Debit/credit activity of one account within one calendar month."""

    month: str
    debit_amount: Decimal
    credit_amount: Decimal
    raw_delta: RawDelta
    entry_count: int


@dataclass(frozen=True)
class EntryStatistics:
    """Summary statistics over the entries touching one account.

    ``raw_delta`` is always debit-positive. ``signed_balance`` follows the
    account's polarity and is only present when the account is known.
    """

    entry_count: int
    total_debit: Decimal
    total_credit: Decimal
    raw_delta: RawDelta
    signed_balance: Optional[MovementBalance] = None
    first_transaction_date: Optional[date] = None
    last_transaction_date: Optional[date] = None
    monthly_activity: tuple[MonthlyActivity, ...] = ()
    status_counts: dict[GroupStatus, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountEntries:
    """Entry aggregator output for one account."""

    account_id: str
    entries: tuple[EntryDetail, ...]
    statistics: EntryStatistics
