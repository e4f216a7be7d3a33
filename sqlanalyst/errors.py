"""Error taxonomy for authentication and query submission."""

from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    INVALID_EMAIL = "invalid_email"
    USER_DISABLED = "user_disabled"
    USER_NOT_FOUND = "user_not_found"
    WRONG_PASSWORD = "wrong_password"
    EMAIL_IN_USE = "email_in_use"
    WEAK_PASSWORD = "weak_password"
    TOO_MANY_REQUESTS = "too_many_requests"
    UNKNOWN = "unknown"


# Provider (web SDK style) error codes.
PROVIDER_ERROR_CODES = {
    "auth/invalid-email": AuthErrorKind.INVALID_EMAIL,
    "auth/user-disabled": AuthErrorKind.USER_DISABLED,
    "auth/user-not-found": AuthErrorKind.USER_NOT_FOUND,
    "auth/wrong-password": AuthErrorKind.WRONG_PASSWORD,
    "auth/email-already-in-use": AuthErrorKind.EMAIL_IN_USE,
    "auth/weak-password": AuthErrorKind.WEAK_PASSWORD,
    "auth/too-many-requests": AuthErrorKind.TOO_MANY_REQUESTS,
}

AUTH_ERROR_MESSAGES = {
    AuthErrorKind.INVALID_EMAIL: "Invalid email address",
    AuthErrorKind.USER_DISABLED: "This account has been disabled",
    AuthErrorKind.USER_NOT_FOUND: "No account found with this email",
    AuthErrorKind.WRONG_PASSWORD: "Incorrect password",
    AuthErrorKind.EMAIL_IN_USE: "An account with this email already exists",
    AuthErrorKind.WEAK_PASSWORD: "Password should be at least 6 characters",
    AuthErrorKind.TOO_MANY_REQUESTS: "Too many unsuccessful login attempts. Please try again later",
    AuthErrorKind.UNKNOWN: "An error occurred. Please try again",
}


def kind_for_code(code: Optional[str]) -> AuthErrorKind:
    return PROVIDER_ERROR_CODES.get(code or "", AuthErrorKind.UNKNOWN)


def format_auth_error(code: Optional[str]) -> str:
    """Map a provider error code to the message shown on the auth page."""
    return AUTH_ERROR_MESSAGES[kind_for_code(code)]


class AuthError(Exception):
    """Raised by the identity gateway; ``str(err)`` is user-facing."""

    def __init__(self, code: Optional[str] = None):
        self.code = code
        self.kind = kind_for_code(code)
        super().__init__(AUTH_ERROR_MESSAGES[self.kind])

    @property
    def message(self) -> str:
        return str(self)


class QueryError(Exception):
    """Base class for failures reaching or reading the analysis service."""


class TransportError(QueryError):
    """Network failure reaching the remote service."""


class ResponseError(QueryError):
    """The remote service answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Request failed with status {status_code}")


class ParseError(QueryError):
    """The response body was not valid JSON."""
