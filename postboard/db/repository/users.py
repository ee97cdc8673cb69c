"""Repository primitives for user entities."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from postboard.db.models.api_key import ApiKey
from postboard.db.models.post import Post
from postboard.db.models.session import UserSession
from postboard.db.models.user import User


def create_user(session: Session, *, user_id: UUID, email: str, username: str, password: bytes) -> User:
    """Create and return a user row."""
    user = User(id=user_id, email=email, username=username, password=password)
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def get_user_by_email(session: Session, email: str, *, case_insensitive: bool = False) -> User | None:
    """Fetch a user by email address."""
    if case_insensitive:
        stmt = select(User).where(func.lower(User.email) == email.lower())
    else:
        stmt = select(User).where(User.email == email)
    return session.scalars(stmt).first()


def update_user(
    session: Session,
    user: User,
    *,
    email: str | None = None,
    username: str | None = None,
) -> User:
    """Update mutable user fields."""
    if email is not None:
        user.email = email
    if username is not None:
        user.username = username
    session.flush()
    session.refresh(user)
    return user


def delete_user(session: Session, user: User) -> None:
    """Delete a user together with everything they own."""
    session.execute(delete(Post).where(Post.user_id == user.id))
    session.execute(delete(ApiKey).where(ApiKey.user_id == user.id))
    session.execute(delete(UserSession).where(UserSession.user_id == user.id))
    session.delete(user)
    session.flush()
