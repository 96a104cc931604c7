from __future__ import annotations

from enum import Enum

from fastapi import status

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


class AuthError(Exception):
    """
    Base class for failures raised by the session core.

    Carries the HTTP status and the public detail shown to the caller; the
    exception handler in app.main renders it as a JSON error body.
    """

    status_code: int = status.HTTP_401_UNAUTHORIZED
    detail: str = "Invalid authentication credentials"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)

    @property
    def headers(self) -> dict[str, str] | None:
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            return dict(BEARER_HEADERS)
        return None


class InvalidCredentials(AuthError):
    detail = "Incorrect email or password"


class InvalidToken(AuthError):
    detail = "Invalid token"


class TokenExpired(InvalidToken):
    detail = "Token has expired"


class UnauthorizedReason(str, Enum):
    invalid_token = "invalid_token"
    no_session = "no_session"
    not_found = "not_found"
    stale = "stale"
    store_error = "store_error"
    corrupt_session = "corrupt_session"


class Unauthorized(AuthError):
    # Every reason renders the same detail; the reason is for server logs only.
    def __init__(self, reason: UnauthorizedReason) -> None:
        self.reason = reason
        super().__init__()

    def __repr__(self) -> str:
        return f"Unauthorized(reason={self.reason.value!r})"


class StoreUnavailable(AuthError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Session store unavailable"


class CorruptSessionRecord(Exception):
    """A cached session value could not be parsed."""


class EmailAlreadyRegistered(AuthError):
    status_code = status.HTTP_409_CONFLICT
    detail = "User with this email already exists"
