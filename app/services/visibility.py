# app/services/visibility.py
"""
Role-scoped visibility.

`resolve_scope` turns an identity into one of three scopes and the
`scope_*` helpers narrow a query to what that scope may see. Rows owned by
a user are matched to a team through the owner's `team_id`.
"""

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import false, select

from app.core.errors import Forbidden, Unauthorized
from app.core.permissions import Identity
from app.core.roles import ROLE_ADMIN, ROLE_TEAM_LEADER, ROLE_USER
from app.models.team import Team
from app.models.user import User


@dataclass(frozen=True)
class AllScope:
    pass


@dataclass(frozen=True)
class TeamScope:
    team_id: int


@dataclass(frozen=True)
class OwnerScope:
    user_id: int
    team_id: Optional[int] = None


Scope = Union[AllScope, TeamScope, OwnerScope]


def resolve_scope(identity: Optional[Identity]) -> Scope:
    if identity is None:
        raise Unauthorized()

    if identity.role == ROLE_ADMIN:
        return AllScope()
    if identity.role == ROLE_TEAM_LEADER:
        if identity.team_id is None:
            raise Forbidden("Team leader has no team")
        return TeamScope(identity.team_id)
    if identity.role == ROLE_USER:
        return OwnerScope(identity.user_id, identity.team_id)

    raise Unauthorized()


def team_member_ids(team_id: int):
    """Sub-select of user ids belonging to a team."""
    return select(User.id).where(User.team_id == team_id).correlate(None)


def owner_clause(scope: Scope, owner_column):
    """
    WHERE clause restricting rows whose owner is `owner_column`,
    or None when the scope sees everything.
    """
    if isinstance(scope, AllScope):
        return None
    if isinstance(scope, TeamScope):
        return owner_column.in_(team_member_ids(scope.team_id))
    return owner_column == scope.user_id


def scope_owned(query, scope: Scope, owner_column):
    clause = owner_clause(scope, owner_column)
    if clause is None:
        return query
    return query.filter(clause)


def scope_users(query, scope: Scope):
    if isinstance(scope, AllScope):
        return query
    if isinstance(scope, TeamScope):
        return query.filter(User.team_id == scope.team_id)
    return query.filter(User.id == scope.user_id)


def scope_teams(query, scope: Scope):
    if isinstance(scope, AllScope):
        return query
    if isinstance(scope, TeamScope):
        return query.filter(Team.id == scope.team_id)
    if scope.team_id is None:
        return query.filter(false())
    return query.filter(Team.id == scope.team_id)
