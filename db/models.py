"""
Database Models Module

This module defines SQLAlchemy ORM models for:
- Dashboard users
- Encrypted PayPal API credentials
- The append-only transaction audit log
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Text,
    Numeric,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from datetime import datetime, UTC
from enum import Enum as PyEnum
from typing import Any
import json

Base = declarative_base()


class Environment(str, PyEnum):
    sandbox = "sandbox"
    live = "live"


class TransactionType(str, PyEnum):
    payment = "payment"
    balance_check = "balance_check"


class User(Base):
    """Model representing a dashboard account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class PayPalCredential(Base):
    """Encrypted PayPal client id/secret pair, shared by all users."""

    __tablename__ = "paypal_credentials"
    __table_args__ = (
        UniqueConstraint(
            "environment", "remark", name="uq_paypal_credentials_environment_remark"
        ),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    environment = Column(String(10), nullable=False, index=True)
    client_id_encrypted = Column(Text, nullable=False)
    client_secret_encrypted = Column(Text, nullable=False)
    remark = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self):
        # Never include the encrypted fields
        return f"<PayPalCredential(id={self.id}, environment={self.environment}, remark={self.remark})>"


class Transaction(Base):
    """Audit row for a PayPal operation. Rows are never updated or deleted."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_environment", "user_id", "environment"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    transaction_id = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    amount = Column(Numeric(12, 2), nullable=True)
    currency = Column(String(3), nullable=True)
    status = Column(String(50), nullable=False)
    environment = Column(String(10), nullable=False)
    _response_data = Column("response_data", Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))

    @property
    def response_data(self) -> dict[str, Any] | None:
        """The raw PayPal response as a dictionary."""
        if not self._response_data:
            return None
        try:
            return json.loads(self._response_data)
        except (json.JSONDecodeError, TypeError):
            return None

    @response_data.setter
    def response_data(self, value: dict[str, Any] | None) -> None:
        self._response_data = None if value is None else json.dumps(value, default=str)

    def __repr__(self):
        return f"<Transaction(id={self.id}, type={self.type}, status={self.status})>"
