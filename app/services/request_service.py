# app/services/request_service.py

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InternalError, InvalidState, NotFound
from app.core.constants import MAX_DB_ID
from app.core.permissions import Identity
from app.core.roles import ROLE_TEAM_LEADER, ROLE_USER
from app.models.expense import Expense
from app.models.payout_request import PayoutRequest, RequestStatus
from app.services.ledger_service import materialize
from app.services.visibility import Scope, scope_owned, team_member_ids

logger = logging.getLogger(__name__)


def create_request(
    db: Session,
    identity: Identity,
    amount: Decimal,
    link: str,
    quantity: int,
) -> PayoutRequest:
    if identity.role != ROLE_USER:
        raise Forbidden("Only users can create requests")

    now = datetime.utcnow()
    request = PayoutRequest(
        user_id=identity.user_id,
        amount=amount,
        link=link,
        quantity=quantity,
        status=RequestStatus.pending,
        created_at=now,
        updated_at=now,
    )

    try:
        db.add(request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create request for user %s", identity.user_id)
        raise InternalError()

    db.refresh(request)
    logger.info("User %s created request %s", identity.user_id, request.id)
    return request


def list_requests(db: Session, scope: Scope) -> list[PayoutRequest]:
    query = scope_owned(db.query(PayoutRequest), scope, PayoutRequest.user_id)
    return query.order_by(PayoutRequest.created_at.desc(), PayoutRequest.id.desc()).all()


def list_pending_for_team(db: Session, team_id: int) -> list[PayoutRequest]:
    return (
        db.query(PayoutRequest)
        .filter(
            PayoutRequest.status == RequestStatus.pending,
            PayoutRequest.user_id.in_(team_member_ids(team_id)),
        )
        .order_by(PayoutRequest.created_at.asc(), PayoutRequest.id.asc())
        .all()
    )


# --------------------------------------------------
# TRANSITIONS
# --------------------------------------------------

def _require_team_leader(identity: Identity) -> int:
    if identity.role != ROLE_TEAM_LEADER:
        raise Forbidden("Only team leaders can decide requests")
    if identity.team_id is None:
        raise Forbidden("Team leader has no team")
    return identity.team_id


def _check_request_id(request_id: int) -> None:
    # ids the INTEGER column cannot hold never exist
    if not 1 <= request_id <= MAX_DB_ID:
        raise NotFound("Request not found")


def _transition(
    db: Session,
    request_id: int,
    team_id: int,
    new_status: RequestStatus,
    now: datetime,
) -> int:
    # compare-and-swap: only a pending request of the leader's team matches
    return (
        db.query(PayoutRequest)
        .filter(
            PayoutRequest.id == request_id,
            PayoutRequest.status == RequestStatus.pending,
            PayoutRequest.user_id.in_(team_member_ids(team_id)),
        )
        .update(
            {"status": new_status, "updated_at": now},
            synchronize_session=False,
        )
    )


def _transition_failure(db: Session, request_id: int, team_id: int) -> Exception:
    in_team = (
        db.query(PayoutRequest.id)
        .filter(
            PayoutRequest.id == request_id,
            PayoutRequest.user_id.in_(team_member_ids(team_id)),
        )
        .first()
    )
    # unknown and other-team ids look the same to the caller
    if in_team is None:
        return NotFound("Request not found")
    return InvalidState("Request is not pending")


def approve(db: Session, request_id: int, identity: Identity) -> Expense:
    team_id = _require_team_leader(identity)
    _check_request_id(request_id)
    now = datetime.utcnow()

    try:
        affected = _transition(db, request_id, team_id, RequestStatus.approved, now)
        if affected == 0:
            db.rollback()
            raise _transition_failure(db, request_id, team_id)

        request = (
            db.query(PayoutRequest)
            .populate_existing()
            .filter(PayoutRequest.id == request_id)
            .one()
        )
        expense = materialize(db, request, now)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Approval of request %s rolled back", request_id)
        raise InternalError()

    db.refresh(expense)
    logger.info(
        "Team leader %s approved request %s (expense %s)",
        identity.user_id,
        request_id,
        expense.id,
    )
    return expense


def reject(db: Session, request_id: int, identity: Identity) -> None:
    team_id = _require_team_leader(identity)
    _check_request_id(request_id)

    try:
        affected = _transition(db, request_id, team_id, RequestStatus.rejected, datetime.utcnow())
        if affected == 0:
            db.rollback()
            raise _transition_failure(db, request_id, team_id)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Rejection of request %s rolled back", request_id)
        raise InternalError()

    logger.info("Team leader %s rejected request %s", identity.user_id, request_id)
