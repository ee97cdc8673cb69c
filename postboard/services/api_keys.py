"""Service helpers for API key operations."""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from fastapi import status
from sqlalchemy.orm import Session

from postboard.core.config import get_settings
from postboard.core.errors import ErrorShape
from postboard.db.models.api_key import ApiKey
from postboard.db.models.user import utcnow
from postboard.db.repository.api_keys import create_api_key
from postboard.db.repository.api_keys import delete_api_key
from postboard.db.repository.api_keys import get_api_key
from postboard.db.repository.api_keys import list_api_keys
from postboard.schemas.common import Paginate
from postboard.schemas.error import Message
from postboard.services.auth import AuthSession


class ApiKeyError(ErrorShape):
    """Errors raised by the API key routes."""


class UnknownKey(ApiKeyError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "key_not_found"
    description = "The key you provided does not exist."

    def __init__(self, key_id: UUID) -> None:
        super().__init__(f"unknown key {key_id}")
        self.key_id = key_id

    def messages(self) -> list[Message]:
        return Message(code=self.code, message=self.description).with_detail("key", str(self.key_id)).into_list()


def list_keys_service(session: Session, auth: AuthSession, paginate: Paginate) -> list[ApiKey]:
    return list_api_keys(session, user_id=auth.user.id, limit=paginate.limit(), offset=paginate.offset())


def create_key_service(session: Session, auth: AuthSession) -> ApiKey:
    """Issue a new API key, expiring after the configured TTL if one is set."""
    ttl_days = get_settings().api_key_ttl_days
    expires_at = utcnow() + timedelta(days=ttl_days) if ttl_days else None
    api_key = create_api_key(session, user_id=auth.user.id, expires_at=expires_at)
    session.commit()
    return api_key


def get_key_service(session: Session, auth: AuthSession, key_id: UUID) -> ApiKey:
    api_key = get_api_key(session, key_id, user_id=auth.user.id)
    if api_key is None:
        raise UnknownKey(key_id)
    return api_key


def delete_key_service(session: Session, auth: AuthSession, key_id: UUID) -> None:
    if delete_api_key(session, key_id, user_id=auth.user.id) == 0:
        raise UnknownKey(key_id)
    session.commit()
