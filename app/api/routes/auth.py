from __future__ import annotations

from fastapi import APIRouter, status

from app.api.deps import AuthContextDep, DbSessionDep, SessionServiceDep
from app.schemas.user import LoginResponse, LogoutResponse, UserCreate, UserLogin, UserRead
from app.services.users import create_user, find_and_verify_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, session: DbSessionDep) -> UserRead:
    user = create_user(session, payload)
    return UserRead(id=user.id, email=user.email, name=user.name)


@router.post("/login", response_model=LoginResponse)
def login_user(payload: UserLogin, session: DbSessionDep, sessions: SessionServiceDep) -> LoginResponse:
    user = find_and_verify_user(session, payload.email, payload.password)
    issued = sessions.issue_session(user)

    return LoginResponse(
        session_id=issued.session_id,
        token=issued.token,
        user=UserRead(id=issued.user.id, email=issued.user.email, name=issued.user.name),
    )


@router.post("/logout", response_model=LogoutResponse)
def logout(auth: AuthContextDep, sessions: SessionServiceDep) -> LogoutResponse:
    sessions.revoke_session(auth.subject_id)
    return LogoutResponse()
