"""
API Schemas Module

This module defines Pydantic models for request/response validation.
Fields are snake_case in Python and camelCase on the wire; requests accept
either spelling.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EnvironmentName = Literal["sandbox", "live"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Accounts


class RegisterRequest(CamelModel):
    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    invitation_code: str


class RegisterResponse(CamelModel):
    user_id: str
    email: str
    first_name: str
    last_name: str


class LoginRequest(CamelModel):
    email: str
    password: str


class UserSummary(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str


class LoginResponse(CamelModel):
    token: str
    user: UserSummary


class UserProfile(UserSummary):
    created_at: datetime


# Credentials


class SaveCredentialsRequest(CamelModel):
    environment: EnvironmentName
    client_id: str
    client_secret: str
    remark: str


class CredentialOut(CamelModel):
    """A stored credential. The client secret itself is never returned."""

    id: str
    environment: EnvironmentName
    client_id: str
    remark: str
    has_client_secret: bool = True
    created_at: datetime


class GetCredentialsResponse(CamelModel):
    credentials: list[CredentialOut]


# PayPal operations


class BalanceRequest(CamelModel):
    environment: EnvironmentName
    lookback_days: Optional[int] = None
    credential_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class BalanceOut(CamelModel):
    currency: str
    value: str


class RecentTransaction(CamelModel):
    transaction_id: str
    date: str
    amount: str
    currency: str
    type: Literal["credit", "debit"]
    status: str
    event_code: str
    note: str
    fee: str


class BalanceResponse(CamelModel):
    balances: list[BalanceOut]
    lookback_days: int
    transaction_count: int
    recent_transactions: list[RecentTransaction]


class CreatePaymentRequest(CamelModel):
    amount: float
    currency: str = Field(min_length=3, max_length=3)
    environment: EnvironmentName
    description: Optional[str] = None
    credential_id: Optional[str] = None


class PaymentResponse(CamelModel):
    payment_id: Optional[str] = None
    status: str
    approval_url: Optional[str] = None
    amount: float
    currency: str


# Transaction history


class TransactionOut(CamelModel):
    id: str
    transaction_id: str
    type: Literal["payment", "balance_check"]
    amount: Optional[float] = None
    currency: Optional[str] = None
    status: str
    environment: EnvironmentName
    created_at: datetime


class TransactionHistoryResponse(CamelModel):
    transactions: list[TransactionOut]
    total: int
    has_more: bool
