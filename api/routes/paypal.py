"""
PayPal operation routes: balance checks and payment creation.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.schemas import (
    BalanceRequest,
    BalanceResponse,
    CreatePaymentRequest,
    PaymentResponse,
)
from core.dependencies import get_settings, get_vault
from core.errors import InvalidArgument
from core.security import AuthData, get_current_user
from core.settings import Settings
from core.vault import CredentialVault
from db.session import get_db
from payments.date_range import DEFAULT_LOOKBACK_DAYS, clamp_window, parse_timestamp
from payments.paypal_service import PayPalService

router = APIRouter()


def get_paypal_service(
    db: Session = Depends(get_db),
    vault: CredentialVault = Depends(get_vault),
    settings: Settings = Depends(get_settings),
) -> PayPalService:
    """FastAPI dependency for PayPalService."""
    return PayPalService(db, vault, settings)


def _credential_id(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidArgument(f"Invalid credential id: {value!r}")


@router.post("/balance", response_model=BalanceResponse)
def get_balance(
    req: BalanceRequest,
    user: AuthData = Depends(get_current_user),
    service: PayPalService = Depends(get_paypal_service),
):
    """
    Retrieve account balances and recent transactions.

    Either `startDate` + `endDate` or `lookbackDays` (default 30) selects the
    transaction window; PayPal limits it to 31 days.
    """
    lookback_days = req.lookback_days or DEFAULT_LOOKBACK_DAYS
    if req.start_date and req.end_date:
        window = clamp_window(
            start=parse_timestamp(req.start_date), end=parse_timestamp(req.end_date)
        )
    else:
        window = clamp_window(lookback_days=lookback_days)

    return service.get_balance(
        user_id=user.user_id,
        environment=req.environment,
        window=window,
        lookback_days=lookback_days,
        credential_id=_credential_id(req.credential_id),
    )


@router.post("/payment", response_model=PaymentResponse)
def create_payment(
    req: CreatePaymentRequest,
    user: AuthData = Depends(get_current_user),
    service: PayPalService = Depends(get_paypal_service),
):
    """Create a PayPal payment and return the buyer approval URL."""
    result = service.create_payment(
        user_id=user.user_id,
        environment=req.environment,
        amount=req.amount,
        currency=req.currency,
        description=req.description,
        credential_id=_credential_id(req.credential_id),
    )
    result["amount"] = req.amount
    return result
