"""
PayPal credential storage.

Client ids and secrets are encrypted with the credential vault before they
reach the database. Credentials are shared by every dashboard user and are
unique per (environment, remark).
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from sqlalchemy import asc, desc, select
from sqlalchemy.orm import Session

from core.errors import InvalidArgument, NotFound
from core.logging import BusinessEvents
from core.vault import CredentialVault
from db.models import Environment, PayPalCredential

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DecryptedCredentials:
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return "<DecryptedCredentials(client_id=***, client_secret=***)>"


class CredentialStore:
    def __init__(self, db: Session, vault: CredentialVault):
        self.db = db
        self.vault = vault

    def save(
        self,
        user_id: int,
        environment: str,
        client_id: str,
        client_secret: str,
        remark: str,
    ) -> PayPalCredential:
        """Insert, or replace the secrets of, the credential for (environment, remark)."""
        if not client_id.strip() or not client_secret.strip():
            raise InvalidArgument("Client ID and Client Secret are required")
        if not remark.strip():
            raise InvalidArgument("Remark is required")
        if environment not in (Environment.sandbox.value, Environment.live.value):
            raise InvalidArgument(f"Unknown environment: {environment}")

        credential = self.db.execute(
            select(PayPalCredential).filter(
                PayPalCredential.environment == environment,
                PayPalCredential.remark == remark,
            )
        ).scalars().first()

        if credential is None:
            credential = PayPalCredential(
                user_id=user_id, environment=environment, remark=remark
            )
            self.db.add(credential)
        credential.client_id_encrypted = self.vault.encrypt(client_id)
        credential.client_secret_encrypted = self.vault.encrypt(client_secret)
        credential.updated_at = datetime.now(UTC)
        self.db.commit()

        log.info(
            BusinessEvents.CREDENTIALS_SAVED,
            credential_id=credential.id,
            environment=environment,
            remark=remark,
            user_id=user_id,
        )
        return credential

    def list_credentials(self, environment: str | None = None) -> list[PayPalCredential]:
        stmt = select(PayPalCredential)
        if environment in (Environment.sandbox.value, Environment.live.value):
            stmt = stmt.filter(PayPalCredential.environment == environment).order_by(
                desc(PayPalCredential.created_at), desc(PayPalCredential.id)
            )
        else:
            stmt = stmt.order_by(
                PayPalCredential.environment,
                desc(PayPalCredential.created_at),
                desc(PayPalCredential.id),
            )
        return list(self.db.execute(stmt).scalars().all())

    def delete(self, credential_id: int, user_id: int | None = None) -> None:
        credential = self.db.get(PayPalCredential, credential_id)
        if credential is None:
            raise NotFound("Credentials not found")
        self.db.delete(credential)
        self.db.commit()
        log.info(
            BusinessEvents.CREDENTIALS_DELETED,
            credential_id=credential_id,
            user_id=user_id,
        )

    def reveal_client_id(self, credential: PayPalCredential) -> str:
        return self.vault.decrypt(credential.client_id_encrypted)

    def decrypt(self, credential: PayPalCredential) -> DecryptedCredentials:
        return DecryptedCredentials(
            client_id=self.vault.decrypt(credential.client_id_encrypted),
            client_secret=self.vault.decrypt(credential.client_secret_encrypted),
        )

    def resolve(
        self,
        environment: str,
        credential_id: int | None = None,
        remark: str | None = None,
    ) -> DecryptedCredentials:
        """Pick the credential for an operation and decrypt it.

        An explicit id must belong to *environment*. Without an id or remark
        the oldest credential of the environment is used.
        """
        if credential_id is not None:
            credential = self.db.execute(
                select(PayPalCredential).filter(
                    PayPalCredential.id == credential_id,
                    PayPalCredential.environment == environment,
                )
            ).scalars().first()
            if credential is None:
                raise NotFound("Specified PayPal credentials not found")
            return self.decrypt(credential)

        stmt = select(PayPalCredential).filter(
            PayPalCredential.environment == environment
        )
        if remark:
            stmt = stmt.filter(PayPalCredential.remark == remark)
        else:
            stmt = stmt.order_by(asc(PayPalCredential.created_at), asc(PayPalCredential.id))
        credential = self.db.execute(stmt.limit(1)).scalars().first()
        if credential is None:
            raise NotFound("PayPal credentials not configured for this environment")
        return self.decrypt(credential)
