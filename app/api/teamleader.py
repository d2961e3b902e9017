# app/api/teamleader.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.permissions import Identity, require_roles
from app.core.roles import ROLE_TEAM_LEADER
from app.schemas.expense import ApprovalOut
from app.schemas.payout_request import DecisionOut, PayoutRequestOut
from app.schemas.team import TeamMemberOut
from app.services import request_service, team_service
from app.services.visibility import resolve_scope

router = APIRouter(prefix="/teamleader", tags=["Team leader"])

team_leader_only = require_roles([ROLE_TEAM_LEADER])


@router.get("/requests", response_model=list[PayoutRequestOut])
def list_pending_requests(
    db: Session = Depends(get_db),
    identity: Identity = Depends(team_leader_only),
):
    scope = resolve_scope(identity)
    return request_service.list_pending_for_team(db, scope.team_id)


# --------------------------------------------------
# DECIDE (APPROVE / REJECT)
# --------------------------------------------------
@router.put("/requests/{request_id}/approve", response_model=ApprovalOut)
def approve_request(
    request_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(team_leader_only),
):
    expense = request_service.approve(db, request_id, identity)
    return {"message": "Request approved", "expense": expense}


@router.put("/requests/{request_id}/reject", response_model=DecisionOut)
def reject_request(
    request_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(team_leader_only),
):
    request_service.reject(db, request_id, identity)
    return {"message": "Request rejected"}


@router.get("/team", response_model=list[TeamMemberOut])
def list_team_members(
    db: Session = Depends(get_db),
    identity: Identity = Depends(team_leader_only),
):
    return team_service.list_members(db, resolve_scope(identity))
