"""Unit tests for request ID propagation."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi import Request
from fastapi.testclient import TestClient

from postboard.core.middleware import REQUEST_ID_HEADER
from postboard.core.middleware import RequestIDMiddleware
from postboard.core.middleware import get_request_id


def _build_client() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str]:
        return {"state": request.state.request_id, "context": get_request_id()}

    return TestClient(app)


def test_incoming_request_id_is_propagated() -> None:
    client = _build_client()

    response = client.get("/echo", headers={REQUEST_ID_HEADER: "abc-123"})

    assert response.headers[REQUEST_ID_HEADER] == "abc-123"
    assert response.json() == {"state": "abc-123", "context": "abc-123"}


def test_request_id_is_generated_when_absent() -> None:
    client = _build_client()

    first = client.get("/echo").headers[REQUEST_ID_HEADER]
    second = client.get("/echo").headers[REQUEST_ID_HEADER]

    assert first and second and first != second


def test_request_id_is_empty_outside_requests() -> None:
    assert get_request_id() == ""
