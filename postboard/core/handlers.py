"""Exception handlers that render every failure in the shared error envelope."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from postboard.core.errors import ErrorShape
from postboard.core.errors import RouteError
from postboard.core.errors import error_response
from postboard.core.extract import classify_request_errors
from postboard.core.ratelimit import rate_limit_exceeded_handler


async def error_shape_handler(_: Request, exc: ErrorShape) -> JSONResponse:
    """Render application and feature errors raised by routes or dependencies."""

    return error_response(RouteError.promote(exc))


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Classify FastAPI's extraction failures into decode or validation errors."""

    return error_response(RouteError.promote(classify_request_errors(exc.errors())))


async def database_exception_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Hide persistence failures behind a bare 500."""

    return error_response(RouteError.promote(exc))


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize framework HTTP errors (unknown route, bad method)."""

    return error_response(RouteError.promote(exc))


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    return error_response(RouteError.promote(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(ErrorShape, error_shape_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
