"""Session cookie helpers."""

from __future__ import annotations

from uuid import UUID

from starlette.responses import Response

from postboard.core.config import get_settings

COOKIE_NAME = "session"


def set_session_cookie(response: Response, session_id: UUID) -> None:
    """Attach a session cookie with no expiry."""
    response.set_cookie(
        COOKIE_NAME,
        str(session_id),
        path="/",
        secure=get_settings().cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Attach an empty, already expired session cookie."""
    response.delete_cookie(
        COOKIE_NAME,
        path="/",
        secure=get_settings().cookie_secure,
        httponly=True,
        samesite="lax",
    )
