"""
Demo data and the upstream-failure policy for balance checks.

PayPal restricts the reporting APIs on many sandbox accounts. Under the
default ``fixture`` policy a failed balance or transaction-search call is
answered with the demo payloads below instead of an error; the
``propagate`` policy surfaces the failure.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog

from core.errors import UpstreamError
from core.logging import BusinessEvents

log = structlog.get_logger(__name__)


def demo_balance() -> dict[str, Any]:
    now = datetime.now(UTC).isoformat()
    return {
        "balances": [
            {
                "currency": "USD",
                "primary": True,
                "total_balance": {"currency_code": "USD", "value": "3564.89"},
                "available_balance": {"currency_code": "USD", "value": "3564.89"},
            }
        ],
        "account_id": "demo_account",
        "as_of_time": now,
        "last_refresh_time": now,
    }


def _demo_transaction(tx_id, event_code, value, fee, updated, note):
    return {
        "transaction_info": {
            "transaction_id": tx_id,
            "transaction_event_code": event_code,
            "transaction_status": "S",
            "transaction_amount": {"currency_code": "USD", "value": value},
            "fee_amount": {"currency_code": "USD", "value": fee},
            "transaction_updated_date": updated,
            "transaction_note": note,
        }
    }


def demo_transactions() -> list[dict[str, Any]]:
    return [
        _demo_transaction(
            "T1503202509171045", "T0006", "-40.79", "-1.20",
            "2025-09-17T10:45:03.000Z", "Payment sent",
        ),
        _demo_transaction(
            "T1105202509171045", "T0001", "40.79", "0.00",
            "2025-09-17T10:45:31.000Z", "Payment received",
        ),
        _demo_transaction(
            "T1503202509171243", "T0006", "-40.79", "-1.20",
            "2025-09-17T12:43:14.000Z", "Payment sent",
        ),
    ]


class OnUpstreamFailure(ABC):
    """What a balance check does when a PayPal reporting call fails."""

    name: str

    @abstractmethod
    def recover_balance(self, error: UpstreamError) -> dict[str, Any]:
        """Return a balance payload in place of the failed call, or raise."""

    @abstractmethod
    def recover_transactions(self, error: UpstreamError) -> list[dict[str, Any]]:
        """Return transaction details in place of the failed call, or raise."""


class Propagate(OnUpstreamFailure):
    name = "propagate"

    def recover_balance(self, error):
        raise error

    def recover_transactions(self, error):
        raise error


class SubstituteFixture(OnUpstreamFailure):
    name = "fixture"

    def __init__(
        self,
        balance: Callable[[], dict[str, Any]] = demo_balance,
        transactions: Callable[[], list[dict[str, Any]]] = demo_transactions,
    ):
        self.balance = balance
        self.transactions = transactions

    def recover_balance(self, error):
        log.warning(BusinessEvents.FIXTURE_SUBSTITUTED, kind="balance", error=str(error))
        return self.balance()

    def recover_transactions(self, error):
        log.warning(
            BusinessEvents.FIXTURE_SUBSTITUTED, kind="transactions", error=str(error)
        )
        return self.transactions()


def policy_for(name: str) -> OnUpstreamFailure:
    if name == Propagate.name:
        return Propagate()
    if name == SubstituteFixture.name:
        return SubstituteFixture()
    raise ValueError(f"Unknown upstream failure policy: {name}")
