"""Service helpers for authentication, sessions and the current user."""

from __future__ import annotations

from dataclasses import dataclass
import hmac
import logging
from typing import NoReturn
from typing import Union
from uuid import UUID
import uuid

from argon2.low_level import Type
from argon2.low_level import hash_secret_raw
from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from postboard.core.config import get_settings
from postboard.core.errors import ErrorShape
from postboard.db.base import constraint_name
from postboard.db.models.session import UserSession
from postboard.db.models.user import User
from postboard.db.repository.api_keys import get_api_key_user
from postboard.db.repository.sessions import create_session
from postboard.db.repository.sessions import delete_session
from postboard.db.repository.sessions import get_session_user
from postboard.db.repository.users import create_user
from postboard.db.repository.users import delete_user
from postboard.db.repository.users import get_user_by_email
from postboard.db.repository.users import update_user
from postboard.schemas.auth import LoginInput
from postboard.schemas.auth import RegisterInput
from postboard.schemas.auth import UpdateUserInput
from postboard.schemas.error import Message

logger = logging.getLogger(__name__)

KEY_LENGTH = 32
# Argon2id cost: 19 MiB of memory, two passes, one lane.
ARGON2_TIME_COST = 2
ARGON2_MEMORY_COST = 19 * 1024
ARGON2_PARALLELISM = 1
AUTHORIZATION_PREFIX = "Bearer "

# Used to keep login timing the same whether or not the email exists.
_DUMMY_SALT = uuid.UUID(int=0)


class AuthError(ErrorShape):
    """Authentication failure. Messages are client-visible, keep them vague."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentials(AuthError):
    code = "invalid_credentials"
    description = "Invalid email or password."


class NoSessionCookieOrApiKey(AuthError):
    code = "authentication_required"
    description = "A session cookie or API key is required."


class InvalidSessionCookie(AuthError):
    code = "invalid_session"
    description = "The session cookie is invalid or has expired."


class InvalidApiKey(AuthError):
    code = "invalid_api_key"
    description = "The API key is invalid or has expired."


class EmailTaken(AuthError):
    status_code = status.HTTP_409_CONFLICT
    code = "email_taken"
    description = "Email already taken."

    def messages(self) -> list[Message]:
        return [message.with_field("email") for message in super().messages()]


class UsernameTaken(AuthError):
    status_code = status.HTTP_409_CONFLICT
    code = "username_taken"
    description = "Username already taken."

    def messages(self) -> list[Message]:
        return [message.with_field("username") for message in super().messages()]


CONSTRAINT_ERRORS: dict[str, type[AuthError]] = {
    "user_email_key": EmailTaken,
    "user_username_key": UsernameTaken,
}


def raise_for_constraint(exc: IntegrityError, errors: dict[str, type[ErrorShape]]) -> NoReturn:
    """Raise the feature error mapped to the violated constraint, else re-raise ``exc``."""
    error = errors.get(constraint_name(exc) or "")
    if error is None:
        raise exc
    raise error() from exc


@dataclass(frozen=True)
class SessionCredential:
    """Authenticated through the session cookie."""

    id: UUID


@dataclass(frozen=True)
class ApiKeyCredential:
    """Authenticated through an API key."""

    id: UUID


Credential = Union[SessionCredential, ApiKeyCredential]


@dataclass(frozen=True)
class AuthSession:
    """The resolved identity of a request."""

    credential: Credential
    user: User


def hash_password(password: str, salt: UUID) -> bytes:
    """Hash a password with Argon2id into raw bytes, using the user's id as the salt."""
    return hash_secret_raw(
        password.encode(),
        salt.bytes,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=KEY_LENGTH,
        type=Type.ID,
    )


def _normalize(value: str) -> str:
    if get_settings().case_insensitive_identities:
        return value.lower()
    return value


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


def authenticate(session: Session, *, authorization: str | None, cookie: str | None) -> AuthSession:
    """Resolve the caller from an API key or, failing that, the session cookie.

    An ``Authorization`` header always takes precedence over the cookie.
    """
    if authorization is not None:
        if not authorization.startswith(AUTHORIZATION_PREFIX):
            raise InvalidApiKey()
        key_id = _parse_uuid(authorization[len(AUTHORIZATION_PREFIX):].strip())
        if key_id is None:
            raise InvalidApiKey()
        user = get_api_key_user(session, key_id)
        if user is None:
            raise InvalidApiKey()
        return AuthSession(credential=ApiKeyCredential(key_id), user=user)

    if cookie is None:
        raise NoSessionCookieOrApiKey()
    session_id = _parse_uuid(cookie)
    if session_id is None:
        raise InvalidSessionCookie()
    user = get_session_user(session, session_id)
    if user is None:
        raise InvalidSessionCookie()
    return AuthSession(credential=SessionCredential(session_id), user=user)


def register_service(session: Session, payload: RegisterInput) -> UserSession:
    """Create an account and log it in."""
    user_id = uuid.uuid4()
    try:
        create_user(
            session,
            user_id=user_id,
            email=_normalize(payload.email),
            username=_normalize(payload.username),
            password=hash_password(payload.password, user_id),
        )
    except IntegrityError as exc:
        session.rollback()
        raise_for_constraint(exc, CONSTRAINT_ERRORS)

    user_session = create_session(session, user_id=user_id)
    session.commit()
    logger.info("Registered user %s", user_id)
    return user_session


def login_service(session: Session, payload: LoginInput) -> UserSession:
    """Check credentials and open a new session."""
    settings = get_settings()
    user = get_user_by_email(
        session,
        _normalize(payload.email),
        case_insensitive=settings.case_insensitive_identities,
    )
    if user is None:
        hash_password(payload.password, _DUMMY_SALT)
        raise InvalidCredentials()

    if not hmac.compare_digest(user.password, hash_password(payload.password, user.id)):
        raise InvalidCredentials()

    user_session = create_session(session, user_id=user.id)
    session.commit()
    return user_session


def logout_service(session: Session, auth: AuthSession) -> bool:
    """End the current session.

    Returns False when authenticated with an API key: there is no session to
    end and the key stays valid.
    """
    if not isinstance(auth.credential, SessionCredential):
        return False
    delete_session(session, auth.credential.id)
    session.commit()
    return True


def update_me_service(session: Session, auth: AuthSession, payload: UpdateUserInput) -> User:
    """Update the authenticated user's email or username."""
    try:
        user = update_user(
            session,
            auth.user,
            email=_normalize(payload.email) if payload.email is not None else None,
            username=_normalize(payload.username) if payload.username is not None else None,
        )
    except IntegrityError as exc:
        session.rollback()
        raise_for_constraint(exc, CONSTRAINT_ERRORS)
    session.commit()
    return user


def delete_me_service(session: Session, auth: AuthSession) -> None:
    """Delete the authenticated user and everything they own."""
    delete_user(session, auth.user)
    session.commit()
    logger.info("Deleted user %s", auth.user.id)
