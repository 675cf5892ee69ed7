from fastapi import APIRouter, Depends

from ..models import User
from ..schemas.user import UserRead
from ..services.auth import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserRead, response_model_by_alias=True)
def read_user_me(current_user: User = Depends(get_current_user)):
    return current_user
