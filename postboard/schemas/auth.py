"""Pydantic schemas for authentication payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from postboard.schemas.common import Email
from postboard.schemas.common import Password
from postboard.schemas.common import Username


class LoginInput(BaseModel):
    """Payload to log in with an email and password."""

    email: Email
    password: Password


class RegisterInput(BaseModel):
    """Payload to register a new account."""

    email: Email
    password: Password
    username: Username = Field(description="The username that is displayed to the public.")


class UpdateUserInput(BaseModel):
    """Payload to update the authenticated user."""

    email: Email | None = None
    username: Username | None = None


class User(BaseModel):
    """Public view of a user. The email and password hash are never returned."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    created_at: datetime


class Session(BaseModel):
    """A login session."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID = Field(alias="session_id")
    created_at: datetime
