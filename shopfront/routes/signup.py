from typing import Any
import logging

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from ..database import get_session
from ..exceptions import ConflictError, ShopfrontError, ValidationError
from ..schemas import parse_input
from ..schemas.user import SignupInput, UserSummary
from ..services.auth import signup_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    payload: Any = Body(default=None),
    db: Session = Depends(get_session),
):
    """Form-friendly signup; errors are flattened to ``{"error": message}``."""
    try:
        data = parse_input(SignupInput, payload)
        user = signup_user(db, data.name, data.email, data.password)
    except (ValidationError, ConflictError) as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})
    except ShopfrontError as e:
        logger.error(f"Signup failed: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Something went wrong"},
        )
    except Exception:
        logger.exception("Signup failed unexpectedly")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Something went wrong"},
        )

    return {
        "message": "User created successfully",
        "user": UserSummary.model_validate(user).model_dump(),
    }
