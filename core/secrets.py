"""
Process-wide secret resolution.

A secret is either configured (read from the environment / .env) or falls
back to a hardcoded development default. The fallback is refused outright
when the application runs in production.
"""

from dataclasses import dataclass

import structlog

log = structlog.get_logger(__name__)

CONFIGURED = "configured"
DEVELOPMENT_DEFAULT = "development_default"


@dataclass(frozen=True)
class SecretSource:
    """Where a secret value came from."""

    name: str
    value: str
    kind: str

    @classmethod
    def configured(cls, name: str, value: str) -> "SecretSource":
        return cls(name=name, value=value, kind=CONFIGURED)

    @classmethod
    def development_default(cls, name: str, value: str) -> "SecretSource":
        return cls(name=name, value=value, kind=DEVELOPMENT_DEFAULT)

    @property
    def is_default(self) -> bool:
        return self.kind == DEVELOPMENT_DEFAULT

    def __repr__(self) -> str:
        return f"<SecretSource(name={self.name}, kind={self.kind})>"


def resolve_secret(
    name: str, configured: str | None, default: str, production: bool
) -> SecretSource:
    """Pick the configured value, or the development default outside production.

    Raises:
        RuntimeError: If the secret is missing while running in production.
    """
    if configured:
        return SecretSource.configured(name, configured)

    if production:
        raise RuntimeError(
            f"{name} is not configured; refusing to start in production "
            "with the development default"
        )

    log.warning(
        "secret.development_default",
        secret=name,
        message=f"{name} not configured, using INSECURE development default",
    )
    return SecretSource.development_default(name, default)
