from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.permissions import Identity, get_identity, require_roles
from app.core.roles import ROLE_ADMIN, ROLE_USER
from app.schemas.team import TeamOut
from app.services import team_service
from app.services.visibility import resolve_scope

router = APIRouter(tags=["Teams"])


@router.get("/teams", response_model=list[TeamOut])
def list_teams(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    return team_service.list_teams(db, resolve_scope(identity))


@router.get("/admin/teams", response_model=list[TeamOut])
def admin_list_teams(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles([ROLE_ADMIN])),
):
    return team_service.list_teams(db, resolve_scope(identity))


@router.get("/user/team", response_model=list[TeamOut])
def user_team(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles([ROLE_USER])),
):
    return team_service.list_teams(db, resolve_scope(identity))
