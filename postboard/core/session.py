"""Request dependency resolving the authenticated user."""

# Annotations are evaluated eagerly: FastAPI inspects
# ``AuthorizationHeader.__call__`` without this module's globals.

from fastapi import Depends
from fastapi import Request
from fastapi import Security
from fastapi.security import APIKeyCookie
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from postboard.core.cookies import COOKIE_NAME
from postboard.db.base import get_db_session
from postboard.services.auth import AuthSession
from postboard.services.auth import authenticate

SECURITY_SCHEME_API_KEY = "APIKey"
SECURITY_SCHEME_SESSION = "Session"


class AuthorizationHeader(APIKeyHeader):
    """``APIKeyHeader`` that reports a present but empty header as present.

    Any ``Authorization`` header, even an empty one, is an API key attempt.
    """

    async def __call__(self, request: Request) -> str | None:
        return request.headers.get(self.model.name)


api_key_header = AuthorizationHeader(
    name="Authorization",
    scheme_name=SECURITY_SCHEME_API_KEY,
    description="An API key, sent as `Bearer <key>`.",
    auto_error=False,
)
session_cookie = APIKeyCookie(
    name=COOKIE_NAME,
    scheme_name=SECURITY_SCHEME_SESSION,
    description="A session cookie.",
    auto_error=False,
)


def require_session(
    authorization: str | None = Security(api_key_header),
    cookie: str | None = Security(session_cookie),
    session: Session = Depends(get_db_session),
) -> AuthSession:
    """Resolve the caller or fail with an authentication error before the route runs."""
    return authenticate(session, authorization=authorization, cookie=cookie)
