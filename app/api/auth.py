import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import CurrentUserOut, LoginRequest, TokenResponse
from app.core.errors import Unauthorized
from app.core.permissions import get_current_user, get_optional_user, require_roles
from app.core.roles import ROLE_ADMIN, ROLE_TEAM_LEADER
from app.core.security import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def issue_token(user: User) -> TokenResponse:
    token = create_access_token({
        "sub": str(user.id),
        "role": user.role,
        "team_id": user.team_id,
    })
    return TokenResponse(access_token=token)


# -------------------------
# LOGIN
# -------------------------
@router.post("/auth/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == payload.username).first()

    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.username)
        raise Unauthorized("Invalid username or password")

    logger.info("Login successful for %s", user.username)
    return issue_token(user)


@router.get("/auth/me", response_model=CurrentUserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/auth/check-session")
def check_session(current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return {"isAuthenticated": False}

    return {
        "isAuthenticated": True,
        "user": CurrentUserOut.model_validate(current_user).model_dump(),
    }


@router.post("/auth/refresh", response_model=TokenResponse)
def refresh(current_user: User = Depends(get_current_user)):
    return issue_token(current_user)


# tokens are stateless; the client drops its copy
@router.post("/auth/logout")
def logout(current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is not None:
        logger.info("Logout for %s", current_user.username)
    return {"message": "Logout successful"}


# -------------------------
# ROLE AREAS
# -------------------------
@router.get("/teamleader", dependencies=[Depends(require_roles([ROLE_TEAM_LEADER]))])
def team_leader_area():
    return {"message": "Welcome, Team Leader!"}


@router.get("/admin", dependencies=[Depends(require_roles([ROLE_ADMIN]))])
def admin_area():
    return {"message": "Welcome, Admin!"}
