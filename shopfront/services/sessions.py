"""Functions for working with signed, stateless session tokens."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

SESSION_MAX_AGE = timedelta(days=30)
ALGORITHM = "HS256"


class InvalidToken(ValueError):
    """Token is malformed, tampered with, or expired."""


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    issued_at: datetime
    expires_at: datetime


def issue(user_id: str, secret: str, now: Optional[datetime] = None) -> str:
    """Encode a session for ``user_id`` as a signed JWT."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + SESSION_MAX_AGE).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode(token: str, secret: str) -> SessionClaims:
    """Decode a session token, checking signature and expiry."""
    try:
        data: dict = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.InvalidTokenError as e:
        raise InvalidToken("Not a valid session token") from e

    return SessionClaims(
        user_id=data["sub"],
        issued_at=datetime.fromtimestamp(data["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
    )


def verify(token: Optional[str], secret: str) -> Optional[str]:
    """Return the user id carried by ``token``, or None if it is not valid."""
    if not token:
        return None
    try:
        return decode(token, secret).user_id
    except InvalidToken:
        return None
