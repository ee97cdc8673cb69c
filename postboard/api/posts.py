"""Post API routes."""

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
from postboard.schemas.post import CreatePostInput
from postboard.schemas.post import Post
from postboard.schemas.post import UpdatePostInput
from postboard.services.auth import AuthSession
from postboard.services.posts import create_post_service
from postboard.services.posts import delete_post_service
from postboard.services.posts import get_post_service
from postboard.services.posts import list_posts_service
from postboard.services.posts import list_user_posts_service
from postboard.services.posts import update_post_service

router = APIRouter(
    prefix="/posts",
    tags=["Post"],
    responses=error_responses(400, 429, 500),
)


@router.get("", response_model=list[Post])
@default_limit
def list_posts_endpoint(
    request: Request,
    response: Response,
    paginate: Annotated[Paginate, Query()],
    session: Session = Depends(get_db_session),
) -> list[Post]:
    """List every post, newest first."""
    return [Post.model_validate(post) for post in list_posts_service(session, paginate)]


@router.get("/me", response_model=list[Post], responses=error_responses(401))
@default_limit
def list_my_posts_endpoint(
    request: Request,
    response: Response,
    paginate: Annotated[Paginate, Query()],
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> list[Post]:
    """List the authenticated user's posts, newest first."""
    return [Post.model_validate(post) for post in list_user_posts_service(session, auth, paginate)]


@router.get("/{id}", response_model=Post, responses=error_responses(404))
@default_limit
def get_post_endpoint(
    request: Request,
    response: Response,
    post_id: UUID = Depends(id_path),
    session: Session = Depends(get_db_session),
) -> Post:
    """Get a single post by id."""
    return Post.model_validate(get_post_service(session, post_id))


@router.post("", response_model=Post, status_code=status.HTTP_201_CREATED, responses=error_responses(401))
@default_limit
def create_post_endpoint(
    request: Request,
    response: Response,
    payload: CreatePostInput,
    auth: AuthSession = Depends(require_session),
    session: Session = Depends(get_db_session),
) -> Post:
    """Create a post owned by the authenticated user."""
    return Post.model_validate(create_post_service(session, auth, payload))


@router.put("/{id}", response_model=Post, responses=error_responses(401, 404))
@default_limit
def update_post_endpoint(
    request: Request,
    response: Response,
    payload: UpdatePostInput,
    auth: AuthSession = Depends(require_session),
    post_id: UUID = Depends(id_path),
    session: Session = Depends(get_db_session),
) -> Post:
    """Update one of the authenticated user's posts."""
    return Post.model_validate(update_post_service(session, auth, post_id, payload))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, responses=error_responses(401, 404))
@default_limit
def delete_post_endpoint(
    request: Request,
    response: Response,
    auth: AuthSession = Depends(require_session),
    post_id: UUID = Depends(id_path),
    session: Session = Depends(get_db_session),
) -> Response:
    """Delete one of the authenticated user's posts."""
    delete_post_service(session, auth, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
