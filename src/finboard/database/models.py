"""SQLAlchemy models for finboard database."""

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


def _now() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("owner", "name", name="uq_account_owner_name"),)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    bill_id = Column(Integer, ForeignKey("bills.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions")


class Budget(Base):
    """Budget model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)
    limit_amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    period = Column(String, nullable=False, default="monthly")
    created_at = Column(DateTime, default=_now, nullable=False)


class Bill(Base):
    """Recurring bill model."""

    __tablename__ = "bills"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    category = Column(String, nullable=False)
    due_date = Column(Date, nullable=False)
    frequency = Column(String, nullable=False, default="monthly")
    reminder_days = Column(Integer, nullable=False, default=3)
    is_active = Column(Boolean, default=True, nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class Loan(Base):
    """Loan model."""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    principal_amount = Column(Numeric(16, 2), nullable=False)
    interest_rate = Column(Numeric(6, 3), nullable=False)
    tenure_months = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    due_day = Column(Integer, nullable=False, default=1)
    emi_amount = Column(Numeric(16, 2), nullable=False)
    outstanding_balance = Column(Numeric(16, 2), nullable=False)
    status = Column(String, nullable=False, default="active")
    currency = Column(String(3), nullable=False, default="USD")
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    payments = relationship("LoanPayment", back_populates="loan")


class LoanPayment(Base):
    """Loan payment model. Rows are only ever inserted."""

    __tablename__ = "loan_payments"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False)
    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(16, 2), nullable=False)
    principal_paid = Column(Numeric(16, 2), nullable=False)
    interest_paid = Column(Numeric(16, 2), nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    loan = relationship("Loan", back_populates="payments")


class AssetLiability(Base):
    """Asset or liability entry model."""

    __tablename__ = "assets_liabilities"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    value = Column(Numeric(16, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    category = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
