"""API key routes."""

# Annotations are evaluated eagerly: the rate limit wrapper hides this
# module's globals from FastAPI's signature inspection.

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from fastapi import Response
from fastapi import status
from sqlalchemy.orm import Session

from postboard.api.params import id_path
from postboard.core.errors import error_responses
from postboard.core.ratelimit import default_limit
from postboard.core.session import require_session
from postboard.db.base import get_db_session
from postboard.schemas.common import Paginate
from postboard.schemas.key import Key
from postboard.services.api_keys import create_key_service
from postboard.services.api_keys import delete_key_service
from postboard.services.api_keys import get_key_service
from postboard.services.api_keys import list_keys_service
from postboard.services.auth import AuthSession

router = APIRouter(
    prefix="/keys",
    tags=["Key"],
    responses=error_responses(400, 401, 429, 500),
)


@router.get("", response_model=list[Key])
@default_limit
def list_keys_endpoint(
    request: Request,
    response: Response,
    paginate: Annotated[Paginate, Query()],
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> list[Key]:
    """List the authenticated user's API keys."""
    return [Key.model_validate(key) for key in list_keys_service(session, auth, paginate)]


@router.post("", response_model=Key, status_code=status.HTTP_201_CREATED)
@default_limit
def create_key_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> Key:
    """Issue a new API key for the authenticated user."""
    return Key.model_validate(create_key_service(session, auth))


@router.get("/{id}", response_model=Key, responses=error_responses(404))
@default_limit
def get_key_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
    key_id: UUID = Depends(id_path),
    session: Session = Depends(get_db_session),
) -> Key:
    return Key.model_validate(get_key_service(session, auth, key_id))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, responses=error_responses(404))
@default_limit
def delete_key_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
    key_id: UUID = Depends(id_path),
    session: Session = Depends(get_db_session),
) -> Response:
    """Revoke an API key."""
    delete_key_service(session, auth, key_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
