from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from redis import Redis
from sqlmodel import Session

from app.core.config import settings
from app.core.security import TokenCodec
from app.db.redis import get_redis_client
from app.db.session import get_session
from app.services.session_store import SessionStore
from app.services.sessions import AuthContext, SessionService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

DbSessionDep = Annotated[Session, Depends(get_session)]
RedisDep = Annotated[Redis, Depends(get_redis_client)]
TokenDep = Annotated[str, Depends(oauth2_scheme)]


def get_token_codec() -> TokenCodec:
    return TokenCodec(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )


def get_session_store(client: RedisDep) -> SessionStore:
    return SessionStore(client)


def get_session_service(
    store: Annotated[SessionStore, Depends(get_session_store)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> SessionService:
    return SessionService(
        store,
        codec,
        revoke_previous=settings.REVOKE_PREVIOUS_SESSION_ON_LOGIN,
    )


SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]


def get_auth_context(token: TokenDep, service: SessionServiceDep) -> AuthContext:
    """
    Bearer guard for protected routes. Handlers receive the returned context
    explicitly; nothing is stored on the request.
    """
    return service.validate_request(token)


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]
