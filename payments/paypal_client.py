"""
PayPal REST API client.

Covers the OAuth2 client-credentials exchange and the three resource calls
the dashboard needs: account balances, transaction search and payment
creation. Tokens are never cached and nothing is retried; every operation
fetches a fresh token.
"""

import base64
import json
from datetime import UTC, datetime
from typing import Any

import requests
import structlog

from core.errors import UpstreamAuthError, UpstreamError
from core.logging import BusinessEvents
from core.metrics import token_exchanges
from core.tracing import get_tracer

log = structlog.get_logger(__name__)

TRANSACTION_PAGE_SIZE = 10


def basic_credential(client_id: str, client_secret: str) -> str:
    """``base64(clientId:clientSecret)`` for HTTP Basic auth."""
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def paypal_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class PayPalClient:
    def __init__(self, base_url: str, environment: str, timeout: float = 30.0):
        self.base = base_url.rstrip("/")
        self.environment = environment
        self.timeout = timeout

    def fetch_access_token(self, client_id: str, client_secret: str) -> str:
        """Exchange client credentials for a bearer token.

        Raises:
            UpstreamAuthError: If PayPal answers with a non-success status.
        """
        headers = {
            "Accept": "application/json",
            "Accept-Language": "en_US",
            "Authorization": f"Basic {basic_credential(client_id, client_secret)}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        with get_tracer().start_as_current_span("paypal.oauth2.token"):
            response = requests.post(
                f"{self.base}/v1/oauth2/token",
                data="grant_type=client_credentials",
                headers=headers,
                timeout=self.timeout,
            )

        if not response.ok:
            token_exchanges.labels(environment=self.environment, outcome="failure").inc()
            log.error(
                BusinessEvents.TOKEN_EXCHANGE_FAILED,
                environment=self.environment,
                status=response.status_code,
                reason=response.reason,
            )
            raise UpstreamAuthError(f"PayPal authentication failed: {response.reason}")

        token_exchanges.labels(environment=self.environment, outcome="success").inc()
        log.info(BusinessEvents.TOKEN_EXCHANGE, environment=self.environment)
        return response.json()["access_token"]

    def _bearer_headers(self, token: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    def _get(self, path: str, token: str, params: dict[str, Any] | None = None):
        with get_tracer().start_as_current_span(f"paypal.get {path}"):
            response = requests.get(
                f"{self.base}{path}",
                headers=self._bearer_headers(token),
                params=params,
                timeout=self.timeout,
            )
        if not response.ok:
            log.error(
                BusinessEvents.UPSTREAM_FAILURE,
                environment=self.environment,
                path=path,
                status=response.status_code,
                body=response.text[:500],
            )
            raise UpstreamError(
                f"PayPal request to {path} failed: {response.status_code} {response.reason}"
            )
        return response.json()

    def get_balances(self, token: str) -> dict[str, Any]:
        return self._get("/v1/reporting/balances", token)

    def search_transactions(
        self, token: str, start: datetime, end: datetime
    ) -> list[dict[str, Any]]:
        data = self._get(
            "/v1/reporting/transactions",
            token,
            params={
                "start_date": paypal_timestamp(start),
                "end_date": paypal_timestamp(end),
                "fields": "all",
                "page_size": TRANSACTION_PAGE_SIZE,
                "balance_affecting_records_only": "Y",
            },
        )
        return data.get("transaction_details") or []

    def create_payment(self, token: str, body: dict[str, Any]) -> dict[str, Any]:
        """Create a v1 payment.

        Raises:
            UpstreamError: With the PayPal error body, on a non-success status.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        with get_tracer().start_as_current_span("paypal.payments.create"):
            response = requests.post(
                f"{self.base}/v1/payments/payment",
                json=body,
                headers=headers,
                timeout=self.timeout,
            )

        if not response.ok:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            log.error(
                BusinessEvents.PAYMENT_FAILURE,
                environment=self.environment,
                status=response.status_code,
            )
            if not isinstance(detail, str):
                detail = json.dumps(detail)
            raise UpstreamError(f"PayPal payment creation failed: {detail}")
        return response.json()
