"""Error taxonomy and the shared error response shape."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field as dataclass_field
import logging
from typing import Any
from typing import Generic
from typing import TypeVar

from fastapi import status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from postboard.schemas.error import ErrorResponse
from postboard.schemas.error import Message

logger = logging.getLogger(__name__)


class ErrorShape(Exception):
    """Anything that knows how to present itself as an error response.

    Subclasses set ``status_code`` and either ``code``/``description`` or
    override ``messages()``. The exception text is for operators only and is
    never sent to the client.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    description: str | None = None

    def messages(self) -> list[Message]:
        return Message(code=self.code, message=self.description).into_list()

    def headers(self) -> Mapping[str, str] | None:
        return None


class AppError(ErrorShape):
    """Cross-cutting failure shared by every route."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> AppError:
        """Classify any lower-level failure into the taxonomy."""
        if isinstance(exc, AppError):
            return exc
        if isinstance(exc, SQLAlchemyError):
            return DatabaseError(exc)
        if isinstance(exc, StarletteHTTPException):
            if _is_body_parse_failure(exc):
                code = "invalid_json" if isinstance(exc.__cause__, UnicodeDecodeError) else "invalid_body"
                return BodyDecodeError(f"{exc.detail}: {exc.__cause__}", code=code)
            return HttpError(exc.status_code, exc.detail, headers=exc.headers)
        return InternalError(exc)


@dataclass(frozen=True)
class Violation:
    """One violated rule on one input field."""

    field: str | None
    code: str
    params: dict[str, Any] = dataclass_field(default_factory=dict)

    def to_message(self) -> Message:
        message = Message(code=self.code)
        for key, value in self.params.items():
            message = message.with_detail(key, value)
        if self.field:
            message = message.with_field(self.field)
        return message


class ValidationFailed(AppError):
    """Semantic validation failed; carries every violation, not only the first."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"

    def __init__(self, violations: Sequence[Violation]) -> None:
        super().__init__(f"validation error: {len(violations)} violation(s)")
        self.violations = list(violations)

    def messages(self) -> list[Message]:
        return [violation.to_message() for violation in self.violations]


class _DecodeError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, text: str, *, location: str | None = None, code: str | None = None) -> None:
        super().__init__(text)
        self.text = text
        self.location = location
        if code is not None:
            self.code = code

    def messages(self) -> list[Message]:
        message = Message(code=self.code, message=self.text)
        if self.location:
            message = message.with_field(self.location)
        return message.into_list()


class BodyDecodeError(_DecodeError):
    """Request body is not JSON, or does not match the expected shape."""

    code = "invalid_body"


class QueryDecodeError(_DecodeError):
    """Query string does not match the expected shape."""

    code = "invalid_query"


class PathDecodeError(_DecodeError):
    """Path parameters do not match the expected shape."""

    code = "invalid_path"


class InternalError(AppError):
    """Unexpected failure. Detail is logged, never returned."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(f"internal error: {cause!r}")
        self.__cause__ = cause

    def messages(self) -> list[Message]:
        return []


class DatabaseError(InternalError):
    """Persistence-layer failure that is not a known constraint violation."""


class RateLimited(AppError):
    """Rejected by the rate limiter; status and headers come from the limiter."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "too_many_requests"

    def __init__(
        self,
        text: str = "too many requests",
        *,
        headers: Mapping[str, str] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(text)
        self.description = text
        self._headers = dict(headers) if headers else None
        if status_code is not None:
            self.status_code = status_code

    def headers(self) -> Mapping[str, str] | None:
        return self._headers


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return "unauthorized"
    if status_code == status.HTTP_403_FORBIDDEN:
        return "forbidden"
    if status_code == status.HTTP_409_CONFLICT:
        return "conflict"
    if status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        return "too_many_requests"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _is_body_parse_failure(exc: StarletteHTTPException) -> bool:
    # FastAPI reports body bytes it cannot read (e.g. invalid UTF-8 in JSON)
    # as a 400 raised from the underlying decode error.
    return exc.status_code == status.HTTP_400_BAD_REQUEST and isinstance(exc.__cause__, ValueError)


class HttpError(AppError):
    """Plain HTTP error raised by the framework itself (unknown route, bad method)."""

    def __init__(self, status_code: int, detail: Any = None, *, headers: Mapping[str, str] | None = None) -> None:
        super().__init__(str(detail))
        self.status_code = status_code
        self.code = _http_error_code(status_code)
        self.description = detail if isinstance(detail, str) and detail else None
        self._headers = dict(headers) if headers else None

    def headers(self) -> Mapping[str, str] | None:
        return self._headers


E = TypeVar("E", bound=ErrorShape)


class RouteError(ErrorShape, Generic[E]):
    """Either a cross-cutting ``AppError`` or a feature error ``E``.

    Status, messages and headers are those of the wrapped error, so every
    feature shares one response path.
    """

    def __init__(self, error: AppError | E) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error

    @classmethod
    def promote(cls, exc: BaseException) -> RouteError[E]:
        """Wrap any failure without the caller matching on its type."""
        if isinstance(exc, RouteError):
            return exc
        if isinstance(exc, ErrorShape) and not isinstance(exc, AppError):
            return cls(exc)
        return cls(AppError.from_exception(exc))

    @property
    def is_app(self) -> bool:
        return isinstance(self.error, AppError)

    @property
    def is_route(self) -> bool:
        return not self.is_app

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return self.error.status_code

    def messages(self) -> list[Message]:
        return self.error.messages()

    def headers(self) -> Mapping[str, str] | None:
        return self.error.headers()


def error_response(error: ErrorShape) -> JSONResponse:
    """Render an error into the ``{"success": false, "errors": [...]}`` envelope."""
    if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed with status %s: %s", error.status_code, error, exc_info=error)
    else:
        logger.info("Request rejected with status %s: %s", error.status_code, error)

    payload = ErrorResponse(errors=error.messages())
    return JSONResponse(
        status_code=error.status_code,
        content=payload.model_dump(mode="json", exclude_none=True),
        headers=dict(error.headers() or {}),
    )


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """OpenAPI ``responses`` entries documenting the shared error envelope."""
    return {
        status_code: {"model": ErrorResponse, "description": _http_error_code(status_code)}
        for status_code in status_codes
    }
