from typing import Optional, Tuple
import logging

from email_validator import validate_email, EmailNotValidError
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ..config import settings
from ..database import get_session
from ..exceptions import AuthenticationError, ConflictError, InternalError, NotFoundError, ValidationError
from ..models import User
from . import sessions
from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/token", auto_error=False)


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_signup(name: str, email: str, password: str) -> None:
    """Raise ValidationError listing every problem with a signup request."""
    problems = []
    if not name:
        problems.append("Name is required")
    if not email or not _is_valid_email(email):
        problems.append("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if problems:
        raise ValidationError("; ".join(problems), details={"problems": problems})


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.exec(select(User).where(User.email == email)).first()


def signup_user(db: Session, name: str, email: str, password: str) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Shared by the RPC ``auth.signup`` procedure and ``POST /api/signup``.
    """
    validate_signup(name, email, password)

    try:
        if get_user_by_email(db, email):
            raise ConflictError("User already exists with this email")

        user = User(name=name, email=email, password_hash=hash_password(password))
        db.add(user)
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("User already exists with this email") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Signup failed")
        raise InternalError("Something went wrong during signup") from e

    db.refresh(user)
    logger.info(f"User created successfully: {user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Check credentials and return the matching user."""
    if not email or not _is_valid_email(email):
        raise ValidationError("Invalid email format")
    if not password:
        raise ValidationError("Password is required")

    user = get_user_by_email(db, email)
    if not user:
        logger.info("Login rejected: unknown email")
        raise NotFoundError("User not found")

    if not user.password_hash:
        logger.info(f"Login rejected: no password set for user {user.id}")
        raise AuthenticationError("Password not set for this user")

    if not verify_password(password, user.password_hash):
        logger.info(f"Login rejected: wrong password for user {user.id}")
        raise AuthenticationError("Invalid password")

    return user


def login(db: Session, email: str, password: str) -> Tuple[User, str]:
    """Authenticate and issue a 30-day session token for the user."""
    user = authenticate_user(db, email, password)
    token = create_session_token(user.id)
    return user, token


def create_session_token(user_id: str) -> str:
    return sessions.issue(user_id, settings.session_secret)


def extract_token(request: Request, bearer: Optional[str] = None) -> Optional[str]:
    """Session token from the cookie, falling back to the bearer header."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if bearer is None:
        scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() == "bearer" and credentials:
            bearer = credentials
    return bearer


def verify_session_token(token: Optional[str]) -> Optional[str]:
    """Token verifier handed to the session middleware and the RPC context."""
    return sessions.verify(token, settings.session_secret)


def get_current_user_id(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
) -> Optional[str]:
    """User id of the caller's session, or None when there is no valid session."""
    return verify_session_token(extract_token(request, bearer))


def get_user(db: Session, user_id: Optional[str]) -> User:
    if user_id is None:
        raise AuthenticationError("User not authenticated")
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_current_user(
    user_id: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_session),
) -> User:
    return get_user(db, user_id)
