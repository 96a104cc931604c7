import string
from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api.deps import get_token_codec
from app.core.security import TokenCodec
from app.db.redis import get_redis_client
from app.db.session import get_session
from app.main import app
from app.services.session_store import SessionStore
from app.services.sessions import SessionService

TEST_SECRET = "test-signing-secret"
TEST_TTL = 3600
BASE64URL_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


class FakeRedis:
    """In-memory stand-in for the handful of redis commands the store issues."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self._failures: list[tuple[str, str]] = []

    def fail(self, command: str, key_prefix: str = "") -> None:
        self._failures.append((command, key_prefix))

    def recover(self) -> None:
        self._failures.clear()

    def _check(self, command: str, key: str = "") -> None:
        for failing_command, prefix in self._failures:
            if failing_command == command and key.startswith(prefix):
                raise RedisConnectionError(f"{command} {key}: connection refused")

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check("set", key)
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def get(self, key: str) -> str | None:
        self._check("get", key)
        return self.data.get(key)

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            self._check("delete", key)
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def ping(self) -> bool:
        self._check("ping")
        return True


@pytest.fixture
def flip_signature_char() -> Callable[[str, int], str]:
    """Swap one signature character for its neighbour in the base64url alphabet."""

    def flip(token: str, position: int) -> str:
        header, payload, signature = token.split(".")
        replacement = BASE64URL_ALPHABET[BASE64URL_ALPHABET.index(signature[position]) ^ 1]
        signature = signature[:position] + replacement + signature[position + 1 :]
        return ".".join([header, payload, signature])

    return flip


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET, ttl_seconds=TEST_TTL)


@pytest.fixture
def store(fake_redis: FakeRedis) -> SessionStore:
    return SessionStore(fake_redis)  # type: ignore[arg-type]


@pytest.fixture
def service(store: SessionStore, codec: TokenCodec) -> SessionService:
    return SessionService(store, codec)


@pytest.fixture
def client(fake_redis: FakeRedis, codec: TokenCodec) -> Iterator[TestClient]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    def get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_test_session
    app.dependency_overrides[get_redis_client] = lambda: fake_redis
    app.dependency_overrides[get_token_codec] = lambda: codec

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
