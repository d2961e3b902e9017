# app/core/permissions.py
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, Unauthorized
from app.core.security import decode_access_token
from app.db.session import get_db
from app.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Who is calling: resolved once per call and passed into every service."""

    user_id: int
    role: str
    team_id: Optional[int]

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(user_id=user.id, role=user.role, team_id=user.team_id)


def load_user_from_token(token: Optional[str], db: Session) -> Optional[User]:
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None

    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    user = load_user_from_token(token, db)
    if user is None:
        logger.info("Unauthorized access attempt")
        raise Unauthorized()
    return user


def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    return load_user_from_token(token, db)


def get_identity(current_user: User = Depends(get_current_user)) -> Identity:
    return Identity.from_user(current_user)


def require_roles(roles: Iterable[str]):
    allowed = frozenset(roles)

    def checker(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in allowed:
            raise Forbidden()
        return identity

    return checker
