"""Authentication API routes."""

# Annotations are evaluated eagerly: the rate limit wrapper hides this
# module's globals from FastAPI's signature inspection.

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import Response
from fastapi import status
from sqlalchemy.orm import Session

from postboard.core.cookies import clear_session_cookie
from postboard.core.cookies import set_session_cookie
from postboard.core.errors import error_responses
from postboard.core.ratelimit import secure_limit
from postboard.core.session import require_session
from postboard.db.base import get_db_session
from postboard.schemas.auth import LoginInput
from postboard.schemas.auth import RegisterInput
from postboard.schemas.auth import Session as SessionSchema
from postboard.schemas.auth import UpdateUserInput
from postboard.schemas.auth import User
from postboard.services.auth import AuthSession
from postboard.services.auth import delete_me_service
from postboard.services.auth import login_service
from postboard.services.auth import logout_service
from postboard.services.auth import register_service
from postboard.services.auth import update_me_service

router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
    responses=error_responses(400, 429, 500),
)


@router.post(
    "/register",
    response_model=SessionSchema,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
@secure_limit
def register_endpoint(
    request: Request,
    response: Response,
    payload: RegisterInput,
    session: Session = Depends(get_db_session),
) -> SessionSchema:
    """Create an account and start a session for it."""
    user_session = register_service(session, payload)
    set_session_cookie(response, user_session.id)
    return SessionSchema.model_validate(user_session)


@router.post("/login", response_model=SessionSchema, responses=error_responses(401))
@secure_limit
def login_endpoint(
    request: Request,
    response: Response,
    payload: LoginInput,
    session: Session = Depends(get_db_session),
) -> SessionSchema:
    """Log in with an email and password."""
    user_session = login_service(session, payload)
    set_session_cookie(response, user_session.id)
    return SessionSchema.model_validate(user_session)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, responses=error_responses(401))
@secure_limit
def logout_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> Response:
    """End the current session. A no-op when called with an API key."""
    result = Response(status_code=status.HTTP_204_NO_CONTENT)
    if logout_service(session, auth):
        clear_session_cookie(result)
    return result


@router.get("/me", response_model=User, responses=error_responses(401))
@secure_limit
def get_me_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
) -> User:
    """Return the authenticated user."""
    return User.model_validate(auth.user)


@router.patch("/me", response_model=User, responses=error_responses(401, 409))
@secure_limit
def update_me_endpoint(
    request: Request,
    response: Response,
    payload: UpdateUserInput,
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> User:
    """Update the authenticated user's email or username."""
    return User.model_validate(update_me_service(session, auth, payload))


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, responses=error_responses(401))
@secure_limit
def delete_me_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> Response:
    """Delete the authenticated user along with their posts, keys and sessions."""
    delete_me_service(session, auth)
    result = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(result)
    return result
