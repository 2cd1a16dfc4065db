"""
PayPal credential management routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from api.schemas import CredentialOut, GetCredentialsResponse, SaveCredentialsRequest
from core.dependencies import get_vault
from core.security import AuthData, get_current_user
from core.vault import CredentialVault
from db.session import get_db
from payments.credentials import CredentialStore

router = APIRouter()


def get_credential_store(
    db: Session = Depends(get_db), vault: CredentialVault = Depends(get_vault)
) -> CredentialStore:
    """FastAPI dependency for CredentialStore."""
    return CredentialStore(db, vault)


@router.post("/credentials", status_code=204)
def save_credentials(
    req: SaveCredentialsRequest,
    user: AuthData = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
):
    """Store encrypted PayPal API credentials, replacing any with the same remark."""
    store.save(
        user_id=user.user_id,
        environment=req.environment,
        client_id=req.client_id,
        client_secret=req.client_secret,
        remark=req.remark,
    )
    return Response(status_code=204)


@router.get("/credentials", response_model=GetCredentialsResponse)
def get_credentials(
    environment: Optional[str] = Query(None),
    user: AuthData = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
):
    """List stored credentials. Secrets are reported only as present."""
    return GetCredentialsResponse(
        credentials=[
            CredentialOut(
                id=str(cred.id),
                environment=cred.environment,
                client_id=store.reveal_client_id(cred),
                remark=cred.remark,
                has_client_secret=True,
                created_at=cred.created_at,
            )
            for cred in store.list_credentials(environment)
        ]
    )


@router.delete("/credentials/{credential_id}", status_code=204)
def delete_credentials(
    credential_id: int,
    user: AuthData = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
):
    store.delete(credential_id, user_id=user.user_id)
    return Response(status_code=204)
