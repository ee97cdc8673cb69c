"""Repository primitives for post entities."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy import select
from sqlalchemy.orm import Session

from postboard.db.models.post import Post


def create_post(session: Session, *, user_id: UUID, title: str, content: str) -> Post:
    """Create and return a post row."""
    post = Post(user_id=user_id, title=title, content=content)
    session.add(post)
    session.flush()
    session.refresh(post)
    return post


def get_post(session: Session, post_id: UUID, *, user_id: UUID | None = None) -> Post | None:
    """Fetch a post by id, optionally restricted to one owner."""
    stmt = select(Post).where(Post.id == post_id)
    if user_id is not None:
        stmt = stmt.where(Post.user_id == user_id)
    return session.scalars(stmt).first()


def list_posts(
    session: Session,
    *,
    user_id: UUID | None = None,
    limit: int = 10,
    offset: int = 0,
) -> list[Post]:
    """List posts newest first, optionally for a single author."""
    stmt = select(Post)
    if user_id is not None:
        stmt = stmt.where(Post.user_id == user_id)
    stmt = stmt.order_by(Post.created_at.desc()).limit(limit).offset(offset)
    return list(session.scalars(stmt))


def update_post(
    session: Session,
    post: Post,
    *,
    title: str | None = None,
    content: str | None = None,
) -> Post:
    """Update mutable post fields."""
    if title is not None:
        post.title = title
    if content is not None:
        post.content = content
    session.flush()
    session.refresh(post)
    return post


def delete_post(session: Session, post_id: UUID, *, user_id: UUID) -> int:
    """Delete an owned post, returning the number of rows removed."""
    result = session.execute(delete(Post).where(Post.id == post_id, Post.user_id == user_id))
    return result.rowcount
