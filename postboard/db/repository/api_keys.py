"""Repository primitives for API keys."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy import or_
from sqlalchemy import select
from sqlalchemy.orm import Session

from postboard.db.models.api_key import ApiKey
from postboard.db.models.user import User
from postboard.db.models.user import utcnow


def create_api_key(session: Session, *, user_id: UUID, expires_at: datetime | None = None) -> ApiKey:
    """Create and return an API key row."""
    api_key = ApiKey(user_id=user_id, expires_at=expires_at)
    session.add(api_key)
    session.flush()
    session.refresh(api_key)
    return api_key


def get_api_key(session: Session, key_id: UUID, *, user_id: UUID) -> ApiKey | None:
    """Fetch an API key owned by a user."""
    stmt = select(ApiKey).where(ApiKey.id == key_id, ApiKey.user_id == user_id)
    return session.scalars(stmt).first()


def list_api_keys(session: Session, *, user_id: UUID, limit: int = 10, offset: int = 0) -> list[ApiKey]:
    """List a user's API keys, newest first."""
    stmt = (
        select(ApiKey)
        .where(ApiKey.user_id == user_id)
        .order_by(ApiKey.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(session.scalars(stmt))


def get_api_key_user(session: Session, key_id: UUID, *, now: datetime | None = None) -> User | None:
    """Fetch the user owning a non-expired API key."""
    now = now or utcnow()
    stmt = (
        select(User)
        .join(ApiKey, ApiKey.user_id == User.id)
        .where(ApiKey.id == key_id)
        .where(or_(ApiKey.expires_at.is_(None), ApiKey.expires_at > now))
    )
    return session.scalars(stmt).first()


def delete_api_key(session: Session, key_id: UUID, *, user_id: UUID) -> int:
    """Delete an owned API key, returning the number of rows removed."""
    result = session.execute(delete(ApiKey).where(ApiKey.id == key_id, ApiKey.user_id == user_id))
    return result.rowcount
