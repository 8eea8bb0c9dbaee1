"""SQLAlchemy ORM models for synced accounts, transactions, and user goals"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class AccountRecord(Base):
    """Bank account balance snapshot, written by the sync job"""

    __tablename__ = "account"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    external_account_id = Column(Text, nullable=True)
    name = Column(Text, nullable=False)
    official_name = Column(Text, nullable=True)
    type = Column(String(32), nullable=False)
    subtype = Column(String(32), nullable=False)
    mask = Column(String(8), nullable=True)
    current_balance = Column(Float, nullable=False, default=0.0)
    available_balance = Column(Float, nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    last_synced = Column(DateTime(timezone=True), nullable=True, server_default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship("TransactionRecord", back_populates="account", cascade="all, delete-orphan")


class TransactionRecord(Base):
    """Synced bank transaction (negative amount = outflow)"""

    __tablename__ = "bank_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True)
    external_transaction_id = Column(Text, nullable=True, unique=True)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    name = Column(Text, nullable=False)
    merchant_name = Column(Text, nullable=True)
    category = Column(JSON, nullable=False, default=list)
    pending = Column(Boolean, nullable=False, default=False)
    iso_currency_code = Column(String(3), nullable=False, default="USD")
    is_anomaly = Column(Boolean, nullable=False, default=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("AccountRecord", back_populates="transactions")


class GoalRecord(Base):
    """User savings goal"""

    __tablename__ = "goal"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    category = Column(String(16), nullable=False, default="savings")
    deadline = Column(Date, nullable=True)
    priority = Column(String(8), nullable=False, default="medium")
    status = Column(String(16), nullable=False, default="active", index=True)
    currency = Column(String(3), nullable=False, default="USD")
    monthly_contribution = Column(Float, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
