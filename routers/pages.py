import os
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from config import Settings
from database import get_db
from routers.reels import feed_item_payload
from services.reel_service import ReelService
from services.session import Identified, SessionState, get_session_state, get_settings, revoke_token

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

router = APIRouter(include_in_schema=False)


def _stale_session(request: Request, settings: Settings):
    """The guard let a cookie through that matches no user: ask for a new login."""
    response = templates.TemplateResponse(
        request,
        "login.html",
        {"error": "Your session is no longer valid. Please log in again."},
        status_code=status.HTTP_401_UNAUTHORIZED,
    )
    revoke_token(response, settings)
    return response


@router.get("/")
async def home(request: Request, state: SessionState = Depends(get_session_state)):
    if isinstance(state, Identified):
        return RedirectResponse(url="/feed", status_code=status.HTTP_303_SEE_OTHER)
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/login")
async def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@router.get("/register")
async def register_page(request: Request):
    return templates.TemplateResponse(request, "register.html", {})


@router.get("/feed")
async def feed_page(
    request: Request,
    state: SessionState = Depends(get_session_state),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not isinstance(state, Identified):
        return _stale_session(request, settings)
    items = ReelService(db).list_feed(state, limit=settings.FEED_LIMIT)
    return templates.TemplateResponse(
        request,
        "feed.html",
        {"user": state.user, "reels": [feed_item_payload(item) for item in items]},
    )


@router.get("/profile")
async def profile_page(
    request: Request,
    state: SessionState = Depends(get_session_state),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not isinstance(state, Identified):
        return _stale_session(request, settings)
    items = ReelService(db).list_user_reels(state.user)
    return templates.TemplateResponse(
        request,
        "profile.html",
        {
            "user": state.user,
            "reels": [feed_item_payload(item) for item in items],
            "total_likes": sum(item.like_count for item in items),
        },
    )


@router.get("/upload")
async def upload_page(
    request: Request,
    state: SessionState = Depends(get_session_state),
    settings: Settings = Depends(get_settings),
):
    if not isinstance(state, Identified):
        return _stale_session(request, settings)
    return templates.TemplateResponse(request, "upload.html", {"user": state.user})
