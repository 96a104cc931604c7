import logging

from fastapi import APIRouter

from app.api.deps import RedisDep
from app.core.errors import StoreUnavailable
from app.schemas.user import HealthResponse
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(client: RedisDep) -> HealthResponse:
    try:
        SessionStore(client).ping()
    except StoreUnavailable:
        return HealthResponse(status="degraded", redis="unavailable")
    return HealthResponse(status="ok", redis="ok")
