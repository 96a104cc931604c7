from fastapi import APIRouter, HTTPException, status

from app.api.deps import AuthContextDep, DbSessionDep
from app.schemas.user import UserRead
from app.services.users import find_user_by_id

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserRead)
def get_profile(auth: AuthContextDep, session: DbSessionDep) -> UserRead:
    user = find_user_by_id(session, auth.subject_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead(id=user.id, email=user.email, name=user.name)
