import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


"""
Process-wide settings, read once from the environment.

Required:
    - SESSION_SECRET: signs session tokens
    - DATABASE_URL: SQLAlchemy URL (optional when ENV=test)
"""

TEST_DATABASE_URL = "sqlite:///:memory:"
ENVIRONMENTS = ("test", "local", "prod")


class ConfigurationError(RuntimeError):
    """Raised when the process cannot start with the given environment."""


@dataclass(frozen=True)
class Settings:
    env: str
    session_secret: str
    database_url: str
    session_cookie_name: str = "session_token"
    session_cookie_secure: bool = False
    db_connect_timeout: int = 10
    db_pool_timeout: int = 30
    log_level: str = "INFO"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from ``environ`` (defaults to ``os.environ`` after
    loading a ``.env`` file). Missing required values are fatal.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    env = environ.get("ENV", "local")
    if env not in ENVIRONMENTS:
        raise ConfigurationError(f"ENV must be one of {', '.join(ENVIRONMENTS)}, got {env!r}")

    session_secret = environ.get("SESSION_SECRET")
    if not session_secret:
        raise ConfigurationError("SESSION_SECRET is not set")

    database_url = environ.get("DATABASE_URL")
    if not database_url:
        if env != "test":
            raise ConfigurationError("DATABASE_URL is not set")
        database_url = TEST_DATABASE_URL

    secure_default = "true" if env == "prod" else "false"

    return Settings(
        env=env,
        session_secret=session_secret,
        database_url=database_url,
        session_cookie_secure=_as_bool(environ.get("SESSION_COOKIE_SECURE", secure_default)),
        db_connect_timeout=_as_int(environ, "DB_CONNECT_TIMEOUT", 10),
        db_pool_timeout=_as_int(environ, "DB_POOL_TIMEOUT", 30),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )


settings = load_settings()
