"""Pydantic schemas for post payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

Title = Annotated[str, Field(min_length=3, max_length=128)]


class CreatePostInput(BaseModel):
    """Payload to create a post."""

    title: Title
    content: str = Field(description="The content of the post in Markdown format.")


class UpdatePostInput(BaseModel):
    """Payload to update mutable post fields."""

    title: Title | None = None
    content: str | None = None


class Post(BaseModel):
    """Post response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    content: str
    created_at: datetime
