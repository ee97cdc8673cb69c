"""Contract tests for the API key endpoints."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from tests.contract.helpers import assert_datetime
from tests.contract.helpers import assert_error_envelope
from tests.contract.helpers import assert_uuid
from tests.contract.helpers import bearer
from tests.contract.helpers import create_key
from tests.contract.helpers import register


def test_keys_crud_contract(client: TestClient) -> None:
    register(client)
    key = create_key(client)
    assert_uuid(key)

    response = client.get("/keys")
    assert response.status_code == 200
    keys = response.json()
    assert [item["key"] for item in keys] == [key]
    assert_datetime(keys[0]["created_at"])
    assert keys[0]["expires_at"] is None

    response = client.get(f"/keys/{key}")
    assert response.status_code == 200
    assert response.json()["key"] == key

    response = client.delete(f"/keys/{key}")
    assert response.status_code == 204

    response = client.get(f"/keys/{key}")
    assert response.status_code == 404
    assert assert_error_envelope(response.json())[0]["details"] == {"key": key}


def test_api_key_authenticates_requests(client: TestClient) -> None:
    register(client)
    key = create_key(client)
    client.cookies.clear()

    response = client.post("/posts", json={"title": "Via key", "content": "..."}, headers=bearer(key))

    assert response.status_code == 201


def test_api_key_takes_precedence_over_cookie(client: TestClient) -> None:
    register(client, username="alice")
    alice_key = create_key(client)
    other = TestClient(client.app)
    register(other, username="bob")

    response = other.get("/auth/me", headers=bearer(alice_key))

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_revoked_key_is_rejected(client: TestClient) -> None:
    register(client)
    key = create_key(client)
    client.delete(f"/keys/{key}")
    client.cookies.clear()

    response = client.get("/auth/me", headers=bearer(key))

    assert response.status_code == 401
    assert assert_error_envelope(response.json())[0]["code"] == "invalid_api_key"


def test_keys_of_other_users_are_unknown(client: TestClient) -> None:
    register(client, username="alice")
    key = create_key(client)
    other = TestClient(client.app)
    register(other, username="bob")

    response = other.delete(f"/keys/{key}")

    assert response.status_code == 404
    assert assert_error_envelope(response.json())[0]["code"] == "key_not_found"


def test_unknown_key(client: TestClient) -> None:
    register(client)
    key_id = str(uuid.uuid4())

    response = client.get(f"/keys/{key_id}")

    assert response.status_code == 404
    assert assert_error_envelope(response.json()) == [
        {
            "code": "key_not_found",
            "message": "The key you provided does not exist.",
            "details": {"key": key_id},
        }
    ]


def test_authentication_is_checked_before_the_path(client: TestClient) -> None:
    for response in (client.get("/keys/not-a-uuid"), client.delete("/keys/not-a-uuid")):
        assert response.status_code == 401
        assert assert_error_envelope(response.json())[0]["code"] == "authentication_required"
