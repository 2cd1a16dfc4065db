"""
PayPal Dashboard Service

Orchestrates the PayPal operations behind the dashboard:
- Balance checks with recent transactions (31-day search window)
- Payment creation with approval links
Each operation decrypts stored credentials, exchanges them for a fresh
access token and appends one row to the transaction audit log.
"""

import time
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import structlog
from sqlalchemy.orm import Session

from core.audit import record_transaction
from core.errors import InvalidArgument, UpstreamError
from core.logging import BusinessEvents
from core.metrics import balance_checks, payments_created
from core.settings import Settings
from core.vault import CredentialVault
from db.models import TransactionType
from payments.credentials import CredentialStore
from payments.date_range import DateWindow
from payments.fixtures import OnUpstreamFailure, policy_for
from payments.paypal_client import PayPalClient

log = structlog.get_logger(__name__)

DEFAULT_DESCRIPTION = "Payment via PayPal Integration"
CENTS = Decimal("0.01")


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def map_balance(entry: dict[str, Any]) -> dict[str, str]:
    total = entry.get("total_balance") or {}
    available = entry.get("available_balance") or {}
    return {
        "currency": entry.get("currency") or total.get("currency_code") or "USD",
        "value": total.get("value")
        or available.get("value")
        or entry.get("value")
        or "0.00",
    }


def map_transaction(detail: dict[str, Any]) -> dict[str, str]:
    info = detail.get("transaction_info") or {}
    amount_info = info.get("transaction_amount") or {}
    amount = amount_info.get("value") or "0.00"
    try:
        credit = float(amount) >= 0
    except ValueError:
        credit = True
    return {
        "transaction_id": info.get("transaction_id") or f"T{_epoch_ms()}",
        "date": info.get("transaction_updated_date")
        or datetime.now(UTC).isoformat(),
        "amount": amount,
        "currency": amount_info.get("currency_code") or "USD",
        "type": "credit" if credit else "debit",
        "status": info.get("transaction_status") or "S",
        "event_code": info.get("transaction_event_code") or "",
        "note": info.get("transaction_note") or "",
        "fee": (info.get("fee_amount") or {}).get("value") or "0.00",
    }


class PayPalService:
    def __init__(
        self,
        db: Session,
        vault: CredentialVault,
        settings: Settings,
        on_upstream_failure: OnUpstreamFailure | None = None,
    ):
        self.db = db
        self.settings = settings
        self.credentials = CredentialStore(db, vault)
        self.on_upstream_failure = on_upstream_failure or policy_for(
            settings.PAYPAL_UPSTREAM_FAILURE
        )

    def client(self, environment: str) -> PayPalClient:
        return PayPalClient(
            self.settings.paypal_base_url(environment),
            environment,
            timeout=self.settings.PAYPAL_TIMEOUT_SECONDS,
        )

    def _authenticate(
        self, environment: str, credential_id: int | None
    ) -> tuple[PayPalClient, str]:
        creds = self.credentials.resolve(environment, credential_id=credential_id)
        client = self.client(environment)
        token = client.fetch_access_token(creds.client_id, creds.client_secret)
        return client, token

    def get_balance(
        self,
        user_id: int,
        environment: str,
        window: DateWindow,
        lookback_days: int,
        credential_id: int | None = None,
    ) -> dict[str, Any]:
        """Balances and recent transactions for the environment's account."""
        client, token = self._authenticate(environment, credential_id)

        source = "paypal"
        try:
            balance_data = client.get_balances(token)
        except UpstreamError as e:
            balance_data = self.on_upstream_failure.recover_balance(e)
            source = "fixture"

        try:
            details = client.search_transactions(token, window.start, window.end)
        except UpstreamError as e:
            details = self.on_upstream_failure.recover_transactions(e)
            source = "fixture"

        record_transaction(
            self.db,
            user_id=user_id,
            transaction_id=f"balance_{_epoch_ms()}",
            type=TransactionType.balance_check,
            status="completed",
            environment=environment,
            response_data=balance_data,
        )
        balance_checks.labels(environment=environment, source=source).inc()

        recent = [map_transaction(d) for d in details]
        log.info(
            BusinessEvents.BALANCE_CHECKED,
            user_id=user_id,
            environment=environment,
            source=source,
            window_start=window.start.isoformat(),
            window_end=window.end.isoformat(),
            transactions=len(recent),
        )
        return {
            "balances": [map_balance(b) for b in balance_data.get("balances") or []],
            "lookback_days": lookback_days,
            "transaction_count": len(recent),
            "recent_transactions": recent,
        }

    def create_payment(
        self,
        user_id: int,
        environment: str,
        amount: Decimal | float,
        currency: str,
        description: str | None = None,
        credential_id: int | None = None,
    ) -> dict[str, Any]:
        """Create a sale payment and return its approval link."""
        amount = Decimal(str(amount))
        if not amount.is_finite() or amount <= 0:
            raise InvalidArgument("Amount must be greater than 0")
        try:
            total = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise InvalidArgument(f"Amount is out of range: {amount}")

        log.info(
            BusinessEvents.PAYMENT_ATTEMPT,
            user_id=user_id,
            environment=environment,
            amount=str(amount),
            currency=currency,
        )
        client, token = self._authenticate(environment, credential_id)

        body = {
            "intent": "sale",
            "payer": {"payment_method": "paypal"},
            "transactions": [
                {
                    "amount": {"total": str(total), "currency": currency},
                    "description": description or DEFAULT_DESCRIPTION,
                }
            ],
            "redirect_urls": {
                "return_url": self.settings.PAYMENT_SUCCESS_URL,
                "cancel_url": self.settings.PAYMENT_CANCEL_URL,
            },
        }
        result = client.create_payment(token, body)

        approval_url = next(
            (
                link.get("href")
                for link in result.get("links") or []
                if link.get("rel") == "approval_url"
            ),
            None,
        )
        status = result.get("state") or "unknown"

        record_transaction(
            self.db,
            user_id=user_id,
            transaction_id=result.get("id") or f"payment_{_epoch_ms()}",
            type=TransactionType.payment,
            amount=total,
            currency=currency,
            status=status,
            environment=environment,
            response_data=result,
        )
        payments_created.labels(environment=environment, status=status).inc()

        log.info(
            BusinessEvents.PAYMENT_SUCCESS,
            user_id=user_id,
            environment=environment,
            payment_id=result.get("id"),
            status=status,
        )
        return {
            "payment_id": result.get("id"),
            "status": status,
            "approval_url": approval_url,
            "amount": amount,
            "currency": currency,
        }
