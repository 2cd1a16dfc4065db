"""
Transaction audit log.

Every balance check and payment appends one row to the ``transactions``
table. Rows are never updated or deleted.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from db.models import Transaction, TransactionType

log = structlog.get_logger(__name__)


def record_transaction(
    db: Session,
    *,
    user_id: int,
    transaction_id: str,
    type: TransactionType,
    status: str,
    environment: str,
    response_data: dict[str, Any] | None = None,
    amount: Decimal | float | None = None,
    currency: str | None = None,
) -> Transaction:
    """Append an audit row and commit it on its own."""
    row = Transaction(
        user_id=user_id,
        transaction_id=transaction_id,
        type=TransactionType(type).value,
        amount=Decimal(str(amount)) if amount is not None else None,
        currency=currency,
        status=status,
        environment=environment,
        response_data=response_data,
        created_at=datetime.now(UTC),
    )
    db.add(row)
    db.commit()
    log.info(
        "audit.recorded",
        audit_id=row.id,
        user_id=user_id,
        type=row.type,
        environment=environment,
    )
    return row


def list_transactions(
    db: Session,
    user_id: int,
    environment: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Transaction], int]:
    """A page of the user's audit rows, newest first, and the total count."""
    filters = [Transaction.user_id == user_id]
    if environment in ("sandbox", "live"):
        filters.append(Transaction.environment == environment)

    total = db.execute(
        select(func.count()).select_from(Transaction).filter(*filters)
    ).scalar_one()
    rows = (
        db.execute(
            select(Transaction)
            .filter(*filters)
            .order_by(desc(Transaction.created_at), desc(Transaction.id))
            .limit(limit)
            .offset(offset)
        )
        .scalars()
        .all()
    )
    return list(rows), total
