"""Service helpers for post API operations."""

from __future__ import annotations

from uuid import UUID

from fastapi import status
from sqlalchemy.orm import Session

from postboard.core.errors import ErrorShape
from postboard.db.models.post import Post
from postboard.db.repository.posts import create_post
from postboard.db.repository.posts import delete_post
from postboard.db.repository.posts import get_post
from postboard.db.repository.posts import list_posts
from postboard.db.repository.posts import update_post
from postboard.schemas.common import Paginate
from postboard.schemas.error import Message
from postboard.schemas.post import CreatePostInput
from postboard.schemas.post import UpdatePostInput
from postboard.services.auth import AuthSession


class PostError(ErrorShape):
    """Errors raised by the post routes."""


class UnknownPost(PostError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "post_not_found"
    description = "The post you provided does not exist."

    def __init__(self, post_id: UUID) -> None:
        super().__init__(f"unknown post {post_id}")
        self.post_id = post_id

    def messages(self) -> list[Message]:
        return Message(code=self.code, message=self.description).with_detail("post", str(self.post_id)).into_list()


def list_posts_service(session: Session, paginate: Paginate) -> list[Post]:
    """List every post, newest first."""
    return list_posts(session, limit=paginate.limit(), offset=paginate.offset())


def list_user_posts_service(session: Session, auth: AuthSession, paginate: Paginate) -> list[Post]:
    """List the authenticated user's posts, newest first."""
    return list_posts(session, user_id=auth.user.id, limit=paginate.limit(), offset=paginate.offset())


def get_post_service(session: Session, post_id: UUID) -> Post:
    """Fetch a post or raise ``UnknownPost``."""
    post = get_post(session, post_id)
    if post is None:
        raise UnknownPost(post_id)
    return post


def create_post_service(session: Session, auth: AuthSession, payload: CreatePostInput) -> Post:
    """Create a post owned by the authenticated user."""
    post = create_post(session, user_id=auth.user.id, title=payload.title, content=payload.content)
    session.commit()
    return post


def update_post_service(session: Session, auth: AuthSession, post_id: UUID, payload: UpdatePostInput) -> Post:
    """Update an owned post. Posts owned by someone else are reported as unknown."""
    post = get_post(session, post_id, user_id=auth.user.id)
    if post is None:
        raise UnknownPost(post_id)
    post = update_post(session, post, title=payload.title, content=payload.content)
    session.commit()
    return post


def delete_post_service(session: Session, auth: AuthSession, post_id: UUID) -> None:
    """Delete an owned post."""
    if delete_post(session, post_id, user_id=auth.user.id) == 0:
        raise UnknownPost(post_id)
    session.commit()
