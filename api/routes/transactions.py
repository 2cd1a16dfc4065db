"""
Transaction history routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.schemas import TransactionHistoryResponse, TransactionOut
from core.audit import list_transactions
from core.security import AuthData, get_current_user
from db.session import get_db

router = APIRouter()


@router.get("/history", response_model=TransactionHistoryResponse)
def get_history(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    environment: Optional[str] = Query(None),
    user: AuthData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's balance checks and payments, newest first."""
    rows, total = list_transactions(
        db, user.user_id, environment=environment, limit=limit, offset=offset
    )
    return TransactionHistoryResponse(
        transactions=[
            TransactionOut(
                id=str(row.id),
                transaction_id=row.transaction_id,
                type=row.type,
                amount=float(row.amount) if row.amount is not None else None,
                currency=row.currency,
                status=row.status,
                environment=row.environment,
                created_at=row.created_at,
            )
            for row in rows
        ],
        total=total,
        has_more=offset + limit < total,
    )
