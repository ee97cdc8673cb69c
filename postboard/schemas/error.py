"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class Message(BaseModel):
    """Single client-visible error datum.

    ``code`` is the stable identifier clients should match on; ``message`` is
    optional human text. The input field that triggered the error, when there
    is one, travels in ``details`` under ``"field"``.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str | None = None
    details: dict[str, Any] | None = None

    @property
    def field(self) -> str | None:
        if not self.details:
            return None
        return self.details.get("field")

    def with_content(self, content: str) -> Message:
        """Return a copy carrying human-readable text."""
        return self.model_copy(update={"message": content})

    def with_field(self, field: str) -> Message:
        """Return a copy naming the offending input field."""
        return self.with_detail("field", field)

    def with_detail(self, key: str, value: Any) -> Message:
        """Return a copy with one more ``details`` entry."""
        details = dict(self.details or {})
        details[key] = value
        return self.model_copy(update={"details": details})

    def into_list(self) -> list[Message]:
        return [self]


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    success: Literal[False] = False
    errors: list[Message] = Field(default_factory=list)
