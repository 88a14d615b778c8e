"""
Session resolution.

The session token is the raw user id stored in an HttpOnly cookie. It is not
signed and carries no expiry beyond the cookie's own max-age; logging out just
tells the client to drop the cookie.
"""
from dataclasses import dataclass
from typing import Optional, Union
import logging

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from config import Settings
from core.exceptions import Unauthorized
from database import get_db
from models.user import User
from services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anonymous:
    is_authenticated = False


@dataclass(frozen=True)
class Identified:
    user: User
    is_authenticated = True

    @property
    def user_id(self) -> str:
        return self.user.id


SessionState = Union[Anonymous, Identified]

ANONYMOUS = Anonymous()


class SessionResolver:
    """Maps a session token to an identity."""

    def __init__(self, db: Session):
        self.users = UserService(db)

    def resolve(self, token: Optional[str]) -> SessionState:
        """Resolve a token; unknown or missing tokens resolve to ANONYMOUS."""
        if not token:
            return ANONYMOUS
        user = self.users.find_by_id(token)
        if user is None:
            logger.debug("Session token does not match any user")
            return ANONYMOUS
        return Identified(user=user)

    @staticmethod
    def issue_token(user_id: str) -> str:
        return user_id


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
    )


def revoke_token(response: Response, settings: Settings) -> None:
    """Tell the client to drop the session cookie."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_state(
    request: Request,
    db: Session = Depends(get_db),
) -> SessionState:
    """Resolve the caller's identity. Never fails."""
    token = request.cookies.get(request.app.state.settings.SESSION_COOKIE_NAME)
    return SessionResolver(db).resolve(token)


def get_current_user(state: SessionState = Depends(get_session_state)) -> User:
    """
    Get the authenticated user.

    Raises:
        Unauthorized: If the caller is anonymous
    """
    if not isinstance(state, Identified):
        raise Unauthorized()
    return state.user
