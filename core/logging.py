import logging
import os
import sys

import structlog
from opentelemetry.instrumentation.logging import LoggingInstrumentor

# Event dicts captured while ENVIRONMENT=test
test_output = []

# Loggers that are too chatty at INFO
QUIET_LOGGERS = ("sqlalchemy", "urllib3", "uvicorn.error", "uvicorn.access")

# Event keys whose values must never reach a log sink
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "client_secret",
        "client_id",
        "access_token",
        "token",
        "authorization",
        "encryption_key",
        "jwt_secret",
    }
)
REDACTED = "[redacted]"


def get_log_level():
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_renderer():
    """JSON for tests and production, colored console output otherwise."""
    if os.getenv("ENVIRONMENT", "development") in ("test", "production"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)


def _redact(values: dict) -> dict:
    redacted = {}
    for key, value in values.items():
        if str(key).lower() in SENSITIVE_KEYS and value is not None:
            value = REDACTED
        elif isinstance(value, dict):
            value = _redact(value)
        redacted[key] = value
    return redacted


def redact_credentials(logger, method_name, event_dict):
    """Mask PayPal credentials, passwords and tokens bound to an event,
    including inside nested dicts such as query parameters."""
    return _redact(event_dict)


def test_output_processor(logger, method_name, event_dict):
    if os.getenv("ENVIRONMENT", "development") == "test":
        test_output.append(event_dict.copy())
    return event_dict


def configure_logging():
    """structlog on top of the stdlib root logger, with OTEL trace ids."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_credentials,
            structlog.processors.ExceptionPrettyPrinter(),
            test_output_processor,
            get_log_renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdout under test so output can be captured
    stream = sys.stdout if os.getenv("ENVIRONMENT") == "test" else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(get_log_level())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").handlers.clear()
    logging.getLogger("uvicorn.access").handlers.clear()

    # Must run after the handlers above are in place
    LoggingInstrumentor().instrument(set_logging_format=False)


class BusinessEvents:
    """Event names for the dashboard's business logs."""

    API_ENTRY = "api.request"
    USER_REGISTERED = "user.registered"
    USER_LOGIN = "user.login"
    USER_LOGIN_FAILED = "user.login_failed"
    CREDENTIALS_SAVED = "credentials.saved"
    CREDENTIALS_DELETED = "credentials.deleted"
    TOKEN_EXCHANGE = "paypal.token_exchange"
    TOKEN_EXCHANGE_FAILED = "paypal.token_exchange_failed"
    UPSTREAM_FAILURE = "paypal.upstream_failure"
    FIXTURE_SUBSTITUTED = "paypal.fixture_substituted"
    BALANCE_CHECKED = "balance.checked"
    PAYMENT_ATTEMPT = "payment.attempt"
    PAYMENT_SUCCESS = "payment.success"
    PAYMENT_FAILURE = "payment.failure"


configure_logging()
