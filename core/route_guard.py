"""
Page route guard.

Redirects page requests based only on whether a session cookie is present.
It does not check that the cookie belongs to a real user; handlers that need
an identity resolve it themselves.
"""
from enum import Enum
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

PROTECTED_PREFIXES: Tuple[str, ...] = ("/profile", "/feed", "/upload")
AUTH_ONLY_PATHS: Tuple[str, ...] = ("/login", "/register")

LOGIN_URL = "/login"
HOME_URL = "/feed"


class PathClass(str, Enum):
    PROTECTED = "protected"
    AUTH_ONLY = "auth_only"
    PUBLIC = "public"


def _matches_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def classify_path(path: str) -> PathClass:
    if any(_matches_prefix(path, prefix) for prefix in PROTECTED_PREFIXES):
        return PathClass.PROTECTED
    if path.rstrip("/") in AUTH_ONLY_PATHS:
        return PathClass.AUTH_ONLY
    return PathClass.PUBLIC


def guard_redirect(path: str, token: Optional[str]) -> Optional[str]:
    """Return the redirect target for a request, or None to let it through."""
    path_class = classify_path(path)
    if path_class is PathClass.PROTECTED and not token:
        return LOGIN_URL
    if path_class is PathClass.AUTH_ONLY and token:
        return HOME_URL
    return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, cookie_name: str = "userId"):
        super().__init__(app)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next):
        target = guard_redirect(request.url.path, request.cookies.get(self.cookie_name))
        if target is not None:
            return RedirectResponse(url=target)
        return await call_next(request)
