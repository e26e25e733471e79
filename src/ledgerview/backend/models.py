"""SQLAlchemy models for the local ledger store."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class Organization(Base):
    """Organization model."""

    __tablename__ = "organizations"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    accounts = relationship("Account", back_populates="organization")


class Account(Base):
    """Chart-of-accounts model with hierarchical structure."""

    __tablename__ = "accounts"

    id = Column(String(32), primary_key=True, default=_new_id)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    sub_type = Column(String, nullable=False, default="other")
    parent_id = Column(String(32), ForeignKey("accounts.id"), nullable=True)
    level = Column(Integer, nullable=False, default=0)
    initial_balance = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(8), nullable=False, default="TWD")
    is_active = Column(Boolean, nullable=False, default=True)
    organization_id = Column(String(32), ForeignKey("organizations.id"), nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Personal accounts (NULL organization) are checked in the backend, since
    # SQL treats NULLs as distinct in unique constraints.
    __table_args__ = (UniqueConstraint("organization_id", "code", name="uq_org_account_code"),)

    organization = relationship("Organization", back_populates="accounts")
    parent = relationship("Account", remote_side=[id], backref="children")


class TransactionGroup(Base):
    """Journal batch model."""

    __tablename__ = "transaction_groups"

    id = Column(String(32), primary_key=True, default=_new_id)
    group_number = Column(String, unique=True, nullable=False)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=False, default="")
    organization_id = Column(String(32), ForeignKey("organizations.id"), nullable=True)
    invoice_no = Column(String, nullable=True)
    receipt_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default="draft")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    entries = relationship(
        "AccountingEntry",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="AccountingEntry.sequence",
    )


class AccountingEntry(Base):
    """Entry model embedded in a transaction group."""

    __tablename__ = "accounting_entries"

    id = Column(String(32), primary_key=True, default=_new_id)
    group_id = Column(String(32), ForeignKey("transaction_groups.id"), nullable=False)
    sequence = Column(Integer, nullable=False)
    account_id = Column(String(32), ForeignKey("accounts.id"), nullable=False)
    debit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    credit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    description = Column(String, nullable=False, default="")
    category_id = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("group_id", "sequence", name="uq_group_sequence"),)

    group = relationship("TransactionGroup", back_populates="entries")
    account = relationship("Account")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
