from sqlalchemy.orm import Session

from app.models.team import Team
from app.models.user import User
from app.services.visibility import Scope, scope_teams, scope_users


def list_teams(db: Session, scope: Scope) -> list[Team]:
    return scope_teams(db.query(Team), scope).order_by(Team.id.asc()).all()


def list_members(db: Session, scope: Scope) -> list[User]:
    return scope_users(db.query(User), scope).order_by(User.id.asc()).all()
