"""Unit tests for rate limit rejections in the shared error envelope."""

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi.testclient import TestClient
from slowapi import Limiter
from slowapi.util import get_remote_address

from postboard.core.handlers import register_error_handlers


def _build_client() -> TestClient:
    limiter = Limiter(key_func=get_remote_address, headers_enabled=True)
    app = FastAPI()
    app.state.limiter = limiter
    register_error_handlers(app)

    @app.get("/limited")
    @limiter.limit("1/minute")
    def limited(request: Request, response: Response) -> dict[str, str]:
        return {"status": "ok"}

    return TestClient(app)


def test_second_request_is_rejected_with_limiter_headers() -> None:
    client = _build_client()

    assert client.get("/limited").status_code == 200
    response = client.get("/limited")

    assert response.status_code == 429
    assert response.json() == {
        "success": False,
        "errors": [{"code": "too_many_requests", "message": "Rate limit exceeded: 1 per 1 minute"}],
    }
    assert response.headers["x-ratelimit-limit"] == "1"
    assert response.headers["x-ratelimit-remaining"] == "0"
    assert "retry-after" in response.headers
