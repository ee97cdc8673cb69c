"""Shared input schemas and field rules."""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated
from uuid import UUID

from email_validator import EmailNotValidError
from email_validator import validate_email
from pydantic import AfterValidator
from pydantic import BaseModel
from pydantic import Field
from pydantic_core import PydanticCustomError


def rule(code: str, message: str, predicate: Callable[[str], bool]) -> AfterValidator:
    """Build a field rule that reports ``code`` when ``predicate`` fails."""

    def check(value: str) -> str:
        if not predicate(value):
            raise PydanticCustomError(code, message)
        return value

    return AfterValidator(check)


def is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


Email = Annotated[str, rule("email", "value is not a valid email address", is_email)]
Password = Annotated[str, Field(min_length=8, max_length=128)]
Username = Annotated[
    str,
    Field(min_length=3, max_length=16),
    rule("alphanumeric", "username must be alphanumeric", str.isalnum),
]


class Paginate(BaseModel):
    """Page selection for list endpoints."""

    page: int = Field(default=1, ge=1, le=100, description="The page number to return (1-indexed).")
    size: int = Field(default=10, ge=1, le=100, description="The number of items to return per page.")

    def offset(self) -> int:
        return (self.page - 1) * self.size

    def limit(self) -> int:
        return self.size


class IdInput(BaseModel):
    """Path parameters addressing a single resource."""

    id: UUID
