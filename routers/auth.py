import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config import Settings
from database import get_db
from models import User
from schemas.user import RegisterRequest, LoginRequest, UserResponse, AuthResponse, MessageResponse
from services.session import (
    SessionResolver, get_current_user, get_settings, revoke_token, set_session_cookie
)
from services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def _user_payload(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account.

    - **name**, **email**, **password**: all required, password at least 6 characters
    - Returns: the created user, without the password
    """
    try:
        user = UserService(db).create_user(payload.name, payload.email, payload.password)
        return {"message": "User created successfully", "user": _user_payload(user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong"
        )


@router.post("/login", response_model=AuthResponse, summary="Log in")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Check credentials and set the session cookie."""
    try:
        user = UserService(db).authenticate(payload.email, payload.password)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong"
        )

    response = JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"message": "Login successful", "user": _user_payload(user)},
    )
    set_session_cookie(response, SessionResolver.issue_token(user.id), settings)
    return response


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(settings: Settings = Depends(get_settings)):
    response = JSONResponse(status_code=status.HTTP_200_OK, content={"message": "Logout successful"})
    revoke_token(response, settings)
    return response


@router.get("/me", response_model=AuthResponse, summary="Current user")
async def me(current_user: User = Depends(get_current_user)):
    return {"message": "Authenticated", "user": _user_payload(current_user)}
