"""Unit tests for resolving the caller from an API key or session cookie."""

from __future__ import annotations

from datetime import timedelta
import uuid

import pytest
from sqlalchemy.orm import Session

from postboard.db.models.user import utcnow
from postboard.db.repository.api_keys import create_api_key
from postboard.db.repository.sessions import create_session
from postboard.db.repository.users import create_user
from postboard.services.auth import ApiKeyCredential
from postboard.services.auth import InvalidApiKey
from postboard.services.auth import InvalidSessionCookie
from postboard.services.auth import NoSessionCookieOrApiKey
from postboard.services.auth import SessionCredential
from postboard.services.auth import authenticate
from postboard.services.auth import hash_password


def _user(session: Session, username: str):
    user_id = uuid.uuid4()
    user = create_user(
        session,
        user_id=user_id,
        email=f"{username}@postboard.dev",
        username=username,
        password=hash_password("correct horse", user_id),
    )
    session.commit()
    return user


def test_api_key_wins_over_cookie(db_session: Session) -> None:
    key_owner = _user(db_session, "keyowner")
    cookie_owner = _user(db_session, "cookieowner")
    api_key = create_api_key(db_session, user_id=key_owner.id)
    user_session = create_session(db_session, user_id=cookie_owner.id)
    db_session.commit()

    auth = authenticate(db_session, authorization=f"Bearer {api_key.id}", cookie=str(user_session.id))

    assert auth.user.id == key_owner.id
    assert auth.credential == ApiKeyCredential(api_key.id)


def test_invalid_api_key_is_not_rescued_by_cookie(db_session: Session) -> None:
    owner = _user(db_session, "alice")
    user_session = create_session(db_session, user_id=owner.id)
    db_session.commit()

    with pytest.raises(InvalidApiKey):
        authenticate(db_session, authorization=f"Bearer {uuid.uuid4()}", cookie=str(user_session.id))


@pytest.mark.parametrize("authorization", ["Token abc", "Bearer not-a-uuid", "Bearer "])
def test_malformed_authorization_header(db_session: Session, authorization: str) -> None:
    with pytest.raises(InvalidApiKey):
        authenticate(db_session, authorization=authorization, cookie=None)


def test_expired_api_key_is_rejected(db_session: Session) -> None:
    owner = _user(db_session, "alice")
    api_key = create_api_key(db_session, user_id=owner.id, expires_at=utcnow() - timedelta(days=1))
    db_session.commit()

    with pytest.raises(InvalidApiKey):
        authenticate(db_session, authorization=f"Bearer {api_key.id}", cookie=None)


def test_session_cookie_resolves_user(db_session: Session) -> None:
    owner = _user(db_session, "alice")
    user_session = create_session(db_session, user_id=owner.id)
    db_session.commit()

    auth = authenticate(db_session, authorization=None, cookie=str(user_session.id))

    assert auth.user.id == owner.id
    assert auth.credential == SessionCredential(user_session.id)


def test_missing_credentials(db_session: Session) -> None:
    with pytest.raises(NoSessionCookieOrApiKey) as exc_info:
        authenticate(db_session, authorization=None, cookie=None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.messages()[0].code == "authentication_required"


@pytest.mark.parametrize("cookie", ["garbage", str(uuid.uuid4())])
def test_invalid_session_cookie(db_session: Session, cookie: str) -> None:
    with pytest.raises(InvalidSessionCookie):
        authenticate(db_session, authorization=None, cookie=cookie)


def test_empty_authorization_header_never_falls_back_to_cookie(db_session: Session) -> None:
    owner = _user(db_session, "alice")
    user_session = create_session(db_session, user_id=owner.id)
    db_session.commit()

    with pytest.raises(InvalidApiKey):
        authenticate(db_session, authorization="", cookie=str(user_session.id))


def test_password_hash_is_raw_argon2id_salted_by_user() -> None:
    first, second = uuid.uuid4(), uuid.uuid4()

    digest = hash_password("correct horse", first)

    assert len(digest) == 32
    assert digest == hash_password("correct horse", first)
    assert digest != hash_password("correct horse", second)
    assert digest != hash_password("wrong horse", first)
