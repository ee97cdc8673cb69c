"""Repository primitives for login sessions."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy import select
from sqlalchemy.orm import Session

from postboard.db.models.session import UserSession
from postboard.db.models.user import User


def create_session(session: Session, *, user_id: UUID) -> UserSession:
    """Create and return a session row."""
    user_session = UserSession(user_id=user_id)
    session.add(user_session)
    session.flush()
    session.refresh(user_session)
    return user_session


def get_session_user(session: Session, session_id: UUID) -> User | None:
    """Fetch the user owning a session."""
    stmt = select(User).join(UserSession, UserSession.user_id == User.id).where(UserSession.id == session_id)
    return session.scalars(stmt).first()


def delete_session(session: Session, session_id: UUID) -> int:
    """Delete a session, returning the number of rows removed."""
    result = session.execute(delete(UserSession).where(UserSession.id == session_id))
    return result.rowcount
