from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from app.core.errors import (
    CorruptSessionRecord,
    InvalidCredentials,
    InvalidToken,
    StoreUnavailable,
    TokenExpired,
    Unauthorized,
    UnauthorizedReason,
)
from app.core.logging import mask_token
from app.core.security import TokenCodec, utcnow
from app.services.session_store import SessionRecord, SessionStore
from app.services.users import UserIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedSession:
    session_id: str
    token: str
    user: UserIdentity


@dataclass(frozen=True)
class AuthContext:
    """Identity established for one request by ``SessionService.validate_request``."""

    subject_id: int
    session_id: str


class SessionService:
    """
    Login, per-request validation and logout over a ``SessionStore``.

    Writes go record first, then index; deletes go the same way. A failure
    between the two steps leaves either an orphaned record that expires on its
    own or an index pointing at nothing, which validation already rejects.
    """

    def __init__(
        self,
        store: SessionStore,
        codec: TokenCodec,
        *,
        revoke_previous: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.codec = codec
        self.revoke_previous = revoke_previous
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self.codec.ttl_seconds

    def issue_session(self, user: UserIdentity | None) -> IssuedSession:
        if user is None:
            raise InvalidCredentials()

        now = self._clock()
        session_id = str(uuid4())
        token = self.codec.issue(user.id, now)
        record = SessionRecord(
            user_id=user.id,
            email=user.email,
            name=user.name,
            token=token,
            created_at=int(now.timestamp()),
            expires_at=int(self.codec.expires_at(now).timestamp()),
        )

        if self.revoke_previous:
            self._drop_current_record(user.id)

        self.store.put_session(session_id, record, self.ttl_seconds)
        try:
            self.store.put_index(user.id, session_id, self.ttl_seconds)
        except StoreUnavailable:
            logger.warning(
                "Index write failed for user %s; session %s left to expire in %ss",
                user.id,
                session_id,
                self.ttl_seconds,
            )
            raise

        logger.info("Issued session %s for user %s", session_id, user.id)
        return IssuedSession(session_id=session_id, token=token, user=user)

    def validate_request(self, token: str) -> AuthContext:
        try:
            claims = self.codec.verify(token)
        except TokenExpired as e:
            logger.warning("Rejected expired token %s", mask_token(token))
            raise Unauthorized(UnauthorizedReason.invalid_token) from e
        except InvalidToken as e:
            logger.warning("Rejected invalid token %s: %s", mask_token(token), e.detail)
            raise Unauthorized(UnauthorizedReason.invalid_token) from e

        subject_id = claims.subject_id
        try:
            session_id = self.store.get_index(subject_id)
            if session_id is None:
                logger.warning("No active session for user %s", subject_id)
                raise Unauthorized(UnauthorizedReason.no_session)
            record = self.store.get_session(session_id)
        except StoreUnavailable as e:
            logger.error("Session lookup for user %s failed on store error", subject_id)
            raise Unauthorized(UnauthorizedReason.store_error) from e
        except CorruptSessionRecord as e:
            logger.error("Session %s for user %s holds unreadable data", session_id, subject_id)
            raise Unauthorized(UnauthorizedReason.corrupt_session) from e

        if record is None:
            logger.warning("Session %s for user %s not found", session_id, subject_id)
            raise Unauthorized(UnauthorizedReason.not_found)

        if not hmac.compare_digest(record.token.encode("utf-8"), token.encode("utf-8")):
            logger.warning("Stale token %s for user %s", mask_token(token), subject_id)
            raise Unauthorized(UnauthorizedReason.stale)

        return AuthContext(subject_id=subject_id, session_id=session_id)

    def revoke_session(self, subject_id: int) -> bool:
        """
        Remove the subject's current session. Returns False when there was
        nothing to remove; repeating a logout is not an error.
        """
        session_id = self.store.get_index(subject_id)
        if session_id is None:
            logger.info("Logout for user %s with no active session", subject_id)
            return False

        self.store.delete_session(session_id)
        self.store.delete_index(subject_id)
        logger.info("Revoked session %s for user %s", session_id, subject_id)
        return True

    def _drop_current_record(self, subject_id: int) -> None:
        previous = self.store.get_index(subject_id)
        if previous is not None:
            self.store.delete_session(previous)
            logger.info("Superseded session %s for user %s", previous, subject_id)
