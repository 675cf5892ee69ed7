"""Session gate in front of the UI pages.

``decide`` is the whole policy and has no side effects; ``SessionGateMiddleware``
only reads the token off the request and acts on the decision.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union
from urllib.parse import quote
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
PUBLIC_PATHS = frozenset({"/", "/signin", "/signup"})
STATIC_PREFIXES = ("/static/",)
UNGATED_PATHS = frozenset({"/favicon.ico", "/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"})
SIGNIN_PATH = "/signin"

TokenVerifier = Callable[[Optional[str]], Optional[str]]


@dataclass(frozen=True)
class Pass:
    user_id: Optional[str] = None


@dataclass(frozen=True)
class Redirect:
    url: str


Decision = Union[Pass, Redirect]


def is_api_path(path: str) -> bool:
    return path == API_PREFIX or path.startswith(API_PREFIX + "/")


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS or path in UNGATED_PATHS or path.startswith(STATIC_PREFIXES)


def signin_url(callback_path: str) -> str:
    return f"{SIGNIN_PATH}?callbackUrl={quote(callback_path, safe='')}"


def decide(path: str, token: Optional[str], verify: TokenVerifier) -> Decision:
    """Pass API and public paths; everything else needs a verifiable token."""
    if is_api_path(path) or is_public_path(path):
        return Pass()

    user_id = verify(token)
    if user_id is None:
        return Redirect(signin_url(path))
    return Pass(user_id=user_id)


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Redirect unauthenticated page requests to the sign-in page."""

    def __init__(self, app, verify_token: TokenVerifier, token_getter: Callable[[Request], Optional[str]]):
        super().__init__(app)
        self.verify_token = verify_token
        self.token_getter = token_getter

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        decision = decide(path, self.token_getter(request), self.verify_token)

        if isinstance(decision, Redirect):
            logger.debug(f"No valid session for {path}, redirecting to sign-in")
            return RedirectResponse(decision.url, status_code=307)

        request.state.user_id = decision.user_id
        return await call_next(request)
