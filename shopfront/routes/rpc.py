"""Single RPC endpoint multiplexed by procedure name.

``GET`` or ``POST /api/rpc/{procedure}``. Input comes from the JSON body (or
the query string on GET) and successful output is wrapped as ``{"result": ...}``.
Failures are ``ShopfrontError`` subclasses rendered by the application's
exception handler.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type
import logging

from fastapi import APIRouter, Body, Depends, Request, Response
from pydantic import BaseModel
from sqlmodel import Session

from ..config import settings
from ..database import get_session
from ..exceptions import AuthenticationError, InternalError, NotFoundError, ShopfrontError
from ..schemas import parse_input
from ..schemas.category import CategoryRead, ListCategoriesInput, SaveUserInterestsInput
from ..schemas.user import LoginInput, SignupInput, UserRead, UserSummary
from ..services import auth, categories
from ..services.sessions import SESSION_MAX_AGE

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class RequestContext:
    db: Session
    user_id: Optional[str]
    response: Response


@dataclass(frozen=True)
class Procedure:
    handler: Callable[[RequestContext, Any], Dict[str, Any]]
    input_model: Optional[Type[BaseModel]] = None
    protected: bool = False


procedures: Dict[str, Procedure] = {}


def procedure(name: str, input_model: Optional[Type[BaseModel]] = None, protected: bool = False):
    def register(handler):
        procedures[name] = Procedure(handler=handler, input_model=input_model, protected=protected)
        return handler
    return register


def _categories_json(items) -> list:
    return [CategoryRead.model_validate(item).model_dump() for item in items]


# Auth

@procedure("auth.signup", input_model=SignupInput)
def signup(ctx: RequestContext, data: SignupInput):
    user = auth.signup_user(ctx.db, data.name, data.email, data.password)
    return {
        "message": "User created successfully",
        "user": UserRead.model_validate(user).model_dump(mode="json", by_alias=True),
    }


@procedure("auth.login", input_model=LoginInput)
def login(ctx: RequestContext, data: LoginInput):
    user, token = auth.login(ctx.db, data.email, data.password)
    ctx.response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=int(SESSION_MAX_AGE.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return {
        "message": "Login successful",
        "user": UserSummary.model_validate(user).model_dump(),
    }


@procedure("auth.logout")
def logout(ctx: RequestContext, data: None):
    ctx.response.delete_cookie(settings.session_cookie_name, httponly=True, samesite="lax")
    return {"message": "Logged out"}


@procedure("auth.me", protected=True)
def me(ctx: RequestContext, data: None):
    user = auth.get_user(ctx.db, ctx.user_id)
    return {"user": UserRead.model_validate(user).model_dump(mode="json", by_alias=True)}


# Categories

@procedure("categories.list", input_model=ListCategoriesInput)
def list_categories(ctx: RequestContext, data: ListCategoriesInput):
    page = categories.list_categories(ctx.db, page=data.page, limit=data.limit)
    return page.model_dump(by_alias=True)


@procedure("categories.getUserInterests", protected=True)
def get_user_interests(ctx: RequestContext, data: None):
    interests = categories.get_user_interests(ctx.db, ctx.user_id)
    return {"interests": _categories_json(interests)}


@procedure("categories.saveUserInterests", input_model=SaveUserInterestsInput, protected=True)
def save_user_interests(ctx: RequestContext, data: SaveUserInterestsInput):
    interests = categories.save_user_interests(ctx.db, ctx.user_id, data.category_ids)
    return {
        "success": True,
        "message": "Interests updated successfully",
        "interests": _categories_json(interests),
    }


@router.api_route("/{name}", methods=["GET", "POST"])
def call_procedure(
    name: str,
    request: Request,
    response: Response,
    payload: Any = Body(default=None),
    user_id: Optional[str] = Depends(auth.get_current_user_id),
    db: Session = Depends(get_session),
):
    proc = procedures.get(name)
    if proc is None:
        raise NotFoundError(f"No procedure named '{name}'")

    if proc.protected and user_id is None:
        raise AuthenticationError("You must be logged in to access this resource")

    if payload is None and request.method == "GET":
        payload = dict(request.query_params)

    data = parse_input(proc.input_model, payload) if proc.input_model else None
    ctx = RequestContext(db=db, user_id=user_id, response=response)

    try:
        result = proc.handler(ctx, data)
    except ShopfrontError:
        raise
    except Exception as e:
        logger.exception(f"Procedure {name} failed")
        raise InternalError() from e

    return {"result": result}
