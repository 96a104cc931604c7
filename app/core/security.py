from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from app.core.errors import InvalidToken, TokenExpired

# NOTE: bcrypt backend has compatibility issues in this runtime.
# pbkdf2_sha256 is stable and supported directly by passlib.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash plain password using passlib context.
    """
    if not isinstance(password, str) or not password:
        raise ValueError("Password must be a non-empty string")
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify plain password against stored hash.
    """
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False


def _has_canonical_signature(token: str) -> bool:
    # jose ignores the padding bits of the last base64url character, so several
    # strings decode to the same signature. Only the canonical encoding is valid.
    segments = token.split(".")
    if len(segments) != 3:
        return False
    signature = segments[2].encode("ascii", errors="replace")
    try:
        return base64url_encode(base64url_decode(signature)) == signature
    except (TypeError, ValueError):
        return False


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    expires_at: datetime


class TokenCodec:
    """
    Signs and verifies the bearer token handed out at login.

    The claim set is just the subject id and an expiry ``ttl_seconds`` after
    issuance; the same ttl is used for the cached session entries.
    """

    def __init__(self, secret: str, *, algorithm: str = "HS256", ttl_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("Token signing secret must be configured")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = int(ttl_seconds)

    def expires_at(self, now: datetime) -> datetime:
        return now + timedelta(seconds=self.ttl_seconds)

    def issue(self, subject_id: int, now: datetime | None = None) -> str:
        if now is None:
            now = utcnow()
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "iat": int(now.timestamp()),
            "exp": int(self.expires_at(now).timestamp()),
            # Unique per issuance so two logins in the same second differ.
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        if not token:
            raise InvalidToken("Token is required")
        if not _has_canonical_signature(token):
            raise InvalidToken()

        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpired() from e
        except JWTError as e:
            raise InvalidToken() from e

        try:
            subject_id = int(payload["sub"])
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken("Token claims are malformed") from e

        return TokenClaims(subject_id=subject_id, expires_at=expires_at)
