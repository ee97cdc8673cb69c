"""Helpers shared by the API contract suites."""

from __future__ import annotations

from datetime import datetime
import uuid

from fastapi.testclient import TestClient

PASSWORD = "correct horse battery"


def assert_uuid(value: str) -> None:
    uuid.UUID(value)


def assert_datetime(value: str) -> None:
    datetime.fromisoformat(value.replace("Z", "+00:00"))


def assert_error_envelope(payload: dict, status_code: int | None = None) -> list[dict]:
    assert payload["success"] is False
    errors = payload["errors"]
    assert isinstance(errors, list)
    for error in errors:
        assert isinstance(error.get("code"), str) and error["code"]
        assert set(error) <= {"code", "message", "details"}
        if "message" in error:
            assert isinstance(error["message"], str)
        if "details" in error:
            assert isinstance(error["details"], dict)
    return errors


def register(test_client: TestClient, username: str = "alice", email: str | None = None) -> dict:
    response = test_client.post(
        "/auth/register",
        json={"email": email or f"{username}@postboard.dev", "username": username, "password": PASSWORD},
    )
    assert response.status_code == 201, response.text
    payload = response.json()
    assert_uuid(payload["session_id"])
    assert_datetime(payload["created_at"])
    return payload


def create_key(test_client: TestClient) -> str:
    response = test_client.post("/keys")
    assert response.status_code == 201, response.text
    return response.json()["key"]


def bearer(key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {key}"}
