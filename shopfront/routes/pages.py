from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/")
async def root():
    return {"message": "Welcome to Shopfront"}


@router.get("/dashboard")
async def dashboard(request: Request):
    # Only reachable through the session gate, which sets user_id
    return {"message": "Welcome to your dashboard", "userId": request.state.user_id}
