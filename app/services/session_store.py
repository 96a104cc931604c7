from __future__ import annotations

import logging

from pydantic import BaseModel, ValidationError
from redis import Redis
from redis.exceptions import RedisError

from app.core.errors import CorruptSessionRecord, StoreUnavailable

logger = logging.getLogger(__name__)


def session_key(session_id: str) -> str:
    return f"session:{session_id}"


def user_session_key(subject_id: int) -> str:
    return f"user_session:{subject_id}"


class SessionRecord(BaseModel):
    user_id: int
    email: str
    name: str
    token: str
    created_at: int
    expires_at: int


class SessionStore:
    """
    Key-value view of active sessions.

    Each session lives under two keys written with the same ttl:
    ``session:<session_id>`` holds the JSON record, and
    ``user_session:<subject_id>`` points at the subject's current session id.
    Any backend failure surfaces as ``StoreUnavailable``.
    """

    def __init__(self, client: Redis) -> None:
        self.client = client

    def put_session(self, session_id: str, record: SessionRecord, ttl: int) -> None:
        self._call("put_session", self.client.set, session_key(session_id), record.model_dump_json(), ex=ttl)

    def put_index(self, subject_id: int, session_id: str, ttl: int) -> None:
        self._call("put_index", self.client.set, user_session_key(subject_id), session_id, ex=ttl)

    def get_index(self, subject_id: int) -> str | None:
        value = self._call("get_index", self.client.get, user_session_key(subject_id))
        return value or None

    def get_session(self, session_id: str) -> SessionRecord | None:
        raw = self._call("get_session", self.client.get, session_key(session_id))
        if raw is None:
            return None
        try:
            return SessionRecord.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptSessionRecord(session_id) from e

    def delete_session(self, session_id: str) -> None:
        self._call("delete_session", self.client.delete, session_key(session_id))

    def delete_index(self, subject_id: int) -> None:
        self._call("delete_index", self.client.delete, user_session_key(subject_id))

    def ping(self) -> bool:
        return bool(self._call("ping", self.client.ping))

    @staticmethod
    def _call(operation: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RedisError as e:
            logger.error("Session store %s failed: %s", operation, e)
            raise StoreUnavailable() from e
