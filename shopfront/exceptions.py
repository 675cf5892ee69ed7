"""Error taxonomy shared by the services and both HTTP transports.

Every service failure carries a machine-readable kind, a stable error code,
the HTTP status the transports map it to, and a human-readable message.
"""

from typing import Any, Dict, Optional


class ShopfrontError(Exception):
    """Base exception for Shopfront service errors."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize exception.

        Args:
            message: Human-readable error message, safe to show to callers
            details: Additional machine-readable context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ShopfrontError):
    """Raised when input is missing or malformed."""

    code = "BAD_REQUEST"
    status_code = 400


class ConflictError(ShopfrontError):
    """Raised when a write would break a uniqueness rule."""

    code = "CONFLICT"
    status_code = 409


class AuthenticationError(ShopfrontError):
    """Raised on bad credentials or a missing/invalid session."""

    code = "UNAUTHORIZED"
    status_code = 401


class NotFoundError(ShopfrontError):
    """Raised when a referenced entity does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class InternalError(ShopfrontError):
    """Raised when the store or infrastructure fails unexpectedly."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str = "Something went wrong", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
