from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func
from sqlmodel import Session, select

from app.core.errors import EmailAlreadyRegistered
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.user import UserCreate


@dataclass(frozen=True)
class UserIdentity:
    """Minimal user projection shared with the session core. Never holds the hash."""

    id: int
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "UserIdentity":
        if user.id is None:
            raise ValueError("User record has no id")
        return cls(id=user.id, email=user.email, name=user.name)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _get_user_by_email(session: Session, email: str) -> User | None:
    statement = select(User).where(func.lower(User.email) == normalize_email(email))
    return session.exec(statement).first()


def create_user(session: Session, payload: UserCreate) -> UserIdentity:
    if _get_user_by_email(session, payload.email) is not None:
        raise EmailAlreadyRegistered()

    user = User(
        email=normalize_email(payload.email),
        name=payload.name.strip(),
        password_hash=hash_password(payload.password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    return UserIdentity.from_user(user)


def find_and_verify_user(session: Session, email: str, password: str) -> UserIdentity | None:
    """
    Credential check for login.

    Returns None both for an unknown email and for a wrong password so the
    caller cannot tell the two apart.
    """
    user = _get_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return UserIdentity.from_user(user)


def find_user_by_id(session: Session, user_id: int) -> UserIdentity | None:
    user = session.get(User, user_id)
    if user is None:
        return None
    return UserIdentity.from_user(user)
