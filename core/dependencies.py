from fastapi import Depends

from core.settings import Settings
from core.vault import CredentialVault

# Settings singleton
_settings = None
_vault = None
_jwt_secret = None


def get_settings() -> Settings:
    """Dependency that provides application settings."""
    assert (
        _settings is not None
    ), "Settings not initialized. Make sure startup() was called."
    return _settings


def get_vault(settings: Settings = Depends(get_settings)) -> CredentialVault:
    """Dependency that provides the credential vault."""
    global _vault
    if _vault is None:
        _vault = CredentialVault(settings.encryption_key().value)
    return _vault


def get_jwt_secret(settings: Settings = Depends(get_settings)) -> str:
    """Dependency that provides the token signing secret."""
    global _jwt_secret
    if _jwt_secret is None:
        _jwt_secret = settings.jwt_secret().value
    return _jwt_secret


def init_settings():
    """Initialize settings singleton and resolve secrets.

    Secret resolution runs here so a production deployment without secrets
    fails at startup instead of on the first request.
    """
    global _settings
    clear_settings()
    _settings = Settings()
    get_vault(_settings)
    get_jwt_secret(_settings)


def clear_settings():
    """Clear settings singleton."""
    global _settings, _vault, _jwt_secret
    _settings = None
    _vault = None
    _jwt_secret = None
