# app/api/payout_requests.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.permissions import Identity, get_identity, require_roles
from app.core.roles import ROLE_USER
from app.schemas.payout_request import PayoutRequestCreate, PayoutRequestOut
from app.services import request_service
from app.services.visibility import resolve_scope

router = APIRouter(tags=["Requests"])


# --------------------------------------------------
# CREATE REQUEST
# --------------------------------------------------
@router.post(
    "/requests",
    response_model=PayoutRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def create_request(
    payload: PayoutRequestCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles([ROLE_USER])),
):
    return request_service.create_request(
        db,
        identity,
        amount=payload.amount,
        link=payload.link,
        quantity=payload.quantity,
    )


# --------------------------------------------------
# LIST VISIBLE REQUESTS
# --------------------------------------------------
@router.get("/requests", response_model=list[PayoutRequestOut])
def list_requests(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    return request_service.list_requests(db, resolve_scope(identity))
