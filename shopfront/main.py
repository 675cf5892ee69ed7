from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from .config import settings
from .database import engine, get_session, init_db
from .exceptions import ShopfrontError, ValidationError, NotFoundError, AuthenticationError
from .middleware import SessionGateMiddleware
from .routes import pages, rpc, signup, users
from .services.auth import authenticate_user, create_session_token, extract_token, verify_session_token

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Shopfront API",
    description="Sign-up, sessions and interest picking for the Shopfront web app",
    version="1.0.0"
)


@app.on_event("startup")
async def startup_event():
    logger.debug("Starting up the application")
    try:
        # Test database connection first
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            logger.info("Database connection test successful")

        # Initialize tables if they don't exist
        init_db()
        logger.debug("Database tables initialized successfully")
    except SQLAlchemyError as e:
        logger.error(f"Database error during startup: {str(e)}")
        raise


@app.exception_handler(ShopfrontError)
async def shopfront_error_handler(request: Request, exc: ShopfrontError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Bodies FastAPI cannot parse at all, e.g. malformed JSON
    errors = [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
        for err in exc.errors()
    ]
    if request.url.path == "/api/signup":
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})
    error = ValidationError("Invalid request body", details={"errors": errors})
    return JSONResponse(status_code=error.status_code, content={"error": error.to_dict()})


# Added first so the gate runs inside CORS
app.add_middleware(
    SessionGateMiddleware,
    verify_token=verify_session_token,
    token_getter=extract_token,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/token")
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_session)
):
    try:
        user = authenticate_user(db, form_data.username, form_data.password)
    except (ValidationError, NotFoundError, AuthenticationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_session_token(user.id)
    return {"access_token": access_token, "token_type": "bearer"}


# Include routers
app.include_router(pages.router, tags=["Pages"])
app.include_router(signup.router, prefix="/api", tags=["Signup"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(rpc.router, prefix="/api/rpc", tags=["RPC"])


def run():
    """Entry point for the ``shopfront-serve`` command."""
    import uvicorn

    uvicorn.run("shopfront.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
