"""Pydantic schemas for API key payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class Key(BaseModel):
    """A single API key, used to act on behalf of its owner."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID = Field(alias="key")
    created_at: datetime
    expires_at: datetime | None = None
