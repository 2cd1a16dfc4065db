"""
Prometheus metrics instrumentation for the PayPal dashboard API.

This module sets up FastAPI instrumentation to expose metrics in Prometheus format
at the /metrics endpoint with optional authentication.
"""

from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_client import Counter
from fastapi import Request
from fastapi.responses import JSONResponse
import ipaddress
import os

token_exchanges = Counter(
    "paypal_token_exchanges_total",
    "OAuth2 client-credentials exchanges against PayPal",
    ["environment", "outcome"],  # outcome: success, failure
)

balance_checks = Counter(
    "paypal_balance_checks_total",
    "Balance checks served, by where the data came from",
    ["environment", "source"],  # source: paypal, fixture
)

payments_created = Counter(
    "paypal_payments_total",
    "Payments created through the PayPal payments API",
    ["environment", "status"],
)


def init_metrics(app):
    """
    Initialize Prometheus metrics instrumentation for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics"],
    )
    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst


def is_private_client(host: str | None) -> bool:
    """True for RFC 1918, loopback and other non-public addresses."""
    if not host:
        return False
    try:
        return ipaddress.ip_address(host).is_private
    except ValueError:
        return False


def add_metrics_auth_middleware(app):
    """
    Protect the /metrics endpoint outside development.
    Set METRICS_AUTH_TOKEN to allow scrapers sending X-Metrics-Auth.
    """

    @app.middleware("http")
    async def metrics_auth_middleware(request: Request, call_next):
        if request.url.path != "/metrics":
            return await call_next(request)

        if os.getenv("ENVIRONMENT", "development") == "development":
            return await call_next(request)

        auth_header = request.headers.get("X-Metrics-Auth")
        expected_token = os.getenv("METRICS_AUTH_TOKEN")
        if expected_token and auth_header == expected_token:
            return await call_next(request)

        # Private networks (VPN, cluster-internal scrapers)
        if is_private_client(request.client.host if request.client else None):
            return await call_next(request)

        return JSONResponse(
            status_code=401, content={"detail": "Metrics endpoint access denied"}
        )
