# app/services/ledger_service.py

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.models.expense import Expense
from app.models.payout_request import PayoutRequest, RequestStatus

logger = logging.getLogger(__name__)


def materialize(db: Session, request: PayoutRequest, now: datetime | None = None) -> Expense:
    """
    Write the ledger row for a request that was just approved.

    Runs inside the caller's transaction and only flushes: the caller commits
    the status change and the expense together, or rolls both back.
    """
    if request.status != RequestStatus.approved:
        raise ValueError(f"Request {request.id} is not approved")

    expense = Expense(
        user_id=request.user_id,
        request_id=request.id,
        amount=request.amount,
        created_at=now or datetime.utcnow(),
    )
    db.add(expense)
    db.flush()

    logger.debug("Materialized expense %s for request %s", expense.id, request.id)
    return expense
