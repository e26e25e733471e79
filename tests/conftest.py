"""Shared pytest fixtures for ledgerview tests."""

import logging
import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerview.backend.base import LedgerBackend
from ledgerview.backend.factories import create_sqlite_ledger
from ledgerview.domain.account import AccountService
from ledgerview.domain.balance import BalanceService
from ledgerview.domain.entities import Account, AccountFormData, GroupStatus
from ledgerview.domain.errors import FetchError


@pytest.fixture(autouse=True)
def reset_ledgerview_logger():
    """Undo CLI logging setup so later tests can capture records with caplog."""
    yield
    logger = logging.getLogger("ledgerview")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def temp_ledger():
    """Create a temporary SQLite ledger for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    ledger = create_sqlite_ledger(database_path=db_path)
    # Store the path for tests that need it
    ledger.database_path = db_path
    ledger.connect()
    ledger.initialize_schema()

    yield ledger

    # Cleanup
    ledger.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_ledger):
    """Create an AccountService with a temporary ledger."""
    return AccountService(temp_ledger)


@pytest.fixture
def balance_service(temp_ledger):
    """Create a BalanceService with a temporary ledger."""
    return BalanceService(temp_ledger)


@pytest.fixture
def sample_org(temp_ledger):
    """Create a sample organization."""
    return temp_ledger.create_organization("Acme Ltd")


@pytest.fixture
def sample_chart(account_service, sample_org):
    """Create a small chart of accounts for the sample organization.

    Returns a dict of account code to account.
    """
    rows = [
        ("1101", "Cash", "asset", "cash", None),
        ("1102", "Bank", "asset", "bank", None),
        ("2101", "Accounts Payable", "liability", "other", None),
        ("4101", "Sales", "revenue", "other", None),
        ("6101", "Rent", "expense", "other", None),
    ]
    chart = {}
    for code, name, account_type, sub_type, initial_balance in rows:
        chart[code] = account_service.save_account(
            AccountFormData(
                code=code,
                name=name,
                account_type=account_type,
                sub_type=sub_type,
                initial_balance=initial_balance,
                organization_id=sample_org.id,
            )
        )
    return chart


@pytest.fixture
def sample_groups(temp_ledger, sample_chart, sample_org):
    """Record a few balanced transaction groups against the sample chart."""
    cash = sample_chart["1101"].id
    payable = sample_chart["2101"].id
    sales = sample_chart["4101"].id
    rent = sample_chart["6101"].id
    return [
        temp_ledger.create_transaction_group(
            "TG-001",
            date(2024, 1, 10),
            [(cash, Decimal("1000"), Decimal("0")), (sales, Decimal("0"), Decimal("1000"))],
            description="Cash sale",
            organization_id=sample_org.id,
            status=GroupStatus.CONFIRMED,
        ),
        temp_ledger.create_transaction_group(
            "TG-002",
            date(2024, 1, 31),
            [(rent, Decimal("300"), Decimal("0")), (cash, Decimal("0"), Decimal("300"))],
            description="January rent",
            organization_id=sample_org.id,
            status=GroupStatus.CONFIRMED,
        ),
        temp_ledger.create_transaction_group(
            "TG-003",
            date(2024, 2, 5),
            [(rent, Decimal("50"), Decimal("0")), (payable, Decimal("0"), Decimal("50"))],
            description="Repairs on credit",
            organization_id=sample_org.id,
        ),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


class FakeLedgerBackend(LedgerBackend):
    """In-memory backend serving fixed data, with switchable fetch failures."""

    def __init__(self, accounts=(), organizations=(), groups=()):
        self.accounts = list(accounts)
        self.organizations = list(organizations)
        self.groups = list(groups)
        self.fail = set()
        self.calls = []
        self.saved = []

    def _check(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise FetchError(f"{name} unavailable")

    def connect(self):
        pass

    def disconnect(self):
        pass

    def initialize_schema(self):
        pass

    def get_accounts(self, organization_id=None):
        self._check("accounts")
        if organization_id is None:
            return list(self.accounts)
        return [a for a in self.accounts if a.organization_id == organization_id]

    def get_organizations(self):
        self._check("organizations")
        return list(self.organizations)

    def get_transaction_groups(self, organization_id=None):
        self._check("groups")
        if organization_id is None:
            return list(self.groups)
        return [g for g in self.groups if g.organization_id == organization_id]

    def save_account(self, form):
        self.saved.append(form)
        return Account(
            id=form.id or f"new-{len(self.saved)}",
            code=form.code,
            name=form.name,
            account_type=form.account_type,
            initial_balance=form.initial_balance,
            organization_id=form.organization_id,
        )


@pytest.fixture
def fake_backend():
    """Create an empty in-memory backend; tests fill in its data."""
    return FakeLedgerBackend()
