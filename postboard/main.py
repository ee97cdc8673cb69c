"""FastAPI application entrypoint for postboard."""

# Annotations are evaluated eagerly: the rate limit wrapper hides this
# module's globals from FastAPI's signature inspection.

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response

from postboard.api.auth import router as auth_router
from postboard.api.keys import router as keys_router
from postboard.api.posts import router as posts_router
from postboard.core.config import get_settings
from postboard.core.handlers import register_error_handlers
from postboard.core.logging import configure_logging
from postboard.core.middleware import RequestIDMiddleware
from postboard.core.ratelimit import default_limit
from postboard.core.ratelimit import limiter
from postboard.db import models as _models  # noqa: F401

OPENAPI_TAGS = [
    {"name": "Auth", "description": "Registration, login and the current user."},
    {"name": "Post", "description": "Create, read, update and delete posts."},
    {"name": "Key", "description": "API keys for acting on behalf of a user."},
]

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Postboard", openapi_tags=OPENAPI_TAGS)
register_error_handlers(app)
app.state.limiter = limiter
app.add_middleware(RequestIDMiddleware)

app.include_router(auth_router)
app.include_router(posts_router)
app.include_router(keys_router)

logger.info("Starting postboard with settings %s", settings.safe_for_logging())


@app.get("/health")
@default_limit
def health(request: Request, response: Response) -> dict[str, str]:
    """Health check endpoint for service readiness."""
    return {"status": "ok"}
