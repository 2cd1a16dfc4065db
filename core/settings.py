import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from core.secrets import SecretSource, resolve_secret

# Load .env file automatically
load_dotenv()

DEV_JWT_SECRET = "development-jwt-secret-change-in-production-1234567890abcdef"
DEV_ENCRYPTION_KEY = "development-encryption-key-change-in-production-32char"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600

    # Secrets (development defaults are used when unset)
    JWT_SECRET: str | None = None
    ENCRYPTION_KEY: str | None = None

    # Accounts
    INVITATION_CODE: str = "MYX223#$1"
    TOKEN_TTL_DAYS: int = 7

    # PayPal
    PAYPAL_SANDBOX_BASE: str = "https://api-m.sandbox.paypal.com"
    PAYPAL_LIVE_BASE: str = "https://api-m.paypal.com"
    PAYPAL_TIMEOUT_SECONDS: float = 30.0
    PAYPAL_UPSTREAM_FAILURE: Literal["fixture", "propagate"] = "fixture"
    PAYMENT_SUCCESS_URL: str = "https://example.com/success"
    PAYMENT_CANCEL_URL: str = "https://example.com/cancel"

    # App settings
    APP_NAME: str = "PayPal Dashboard API"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "production"] = "development"

    # Observability (Optional)
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_SERVICE_NAME: str = "paypal-dashboard"

    # Metrics (Optional)
    METRICS_ENABLED: bool = True

    model_config = ConfigDict(env_file=".env", case_sensitive=True)

    def __init__(self, **kwargs):
        # Check for DATABASE_URL before calling parent constructor
        if not kwargs.get("DATABASE_URL") and not os.getenv("DATABASE_URL"):
            raise RuntimeError(
                "DATABASE_URL not set; create .env or export the variable"
            )
        super().__init__(**kwargs)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def jwt_secret(self) -> SecretSource:
        return resolve_secret(
            "JWT_SECRET", self.JWT_SECRET, DEV_JWT_SECRET, self.is_production
        )

    def encryption_key(self) -> SecretSource:
        return resolve_secret(
            "ENCRYPTION_KEY",
            self.ENCRYPTION_KEY,
            DEV_ENCRYPTION_KEY,
            self.is_production,
        )

    def paypal_base_url(self, environment: str) -> str:
        """Base URL of the PayPal REST API for ``sandbox`` or ``live``."""
        if environment == "sandbox":
            return self.PAYPAL_SANDBOX_BASE
        if environment == "live":
            return self.PAYPAL_LIVE_BASE
        raise ValueError(f"Unknown PayPal environment: {environment}")
