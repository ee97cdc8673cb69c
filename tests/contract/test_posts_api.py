"""Contract tests for the post API endpoints."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from tests.contract.helpers import assert_datetime
from tests.contract.helpers import assert_error_envelope
from tests.contract.helpers import assert_uuid
from tests.contract.helpers import bearer
from tests.contract.helpers import create_key
from tests.contract.helpers import register


def _assert_post_contract(payload: dict) -> None:
    for field in ("id", "user_id", "title", "content", "created_at"):
        assert field in payload

    assert_uuid(payload["id"])
    assert_uuid(payload["user_id"])
    assert isinstance(payload["title"], str)
    assert isinstance(payload["content"], str)
    assert_datetime(payload["created_at"])


def _create_post(test_client: TestClient, title: str = "Hello world", **kwargs) -> dict:
    response = test_client.post("/posts", json={"title": title, "content": "Some *markdown*"}, **kwargs)
    assert response.status_code == 201, response.text
    payload = response.json()
    _assert_post_contract(payload)
    return payload


def test_posts_crud_contract(client: TestClient) -> None:
    register(client)
    created = _create_post(client)
    post_id = created["id"]

    response = client.get(f"/posts/{post_id}")
    assert response.status_code == 200
    assert response.json() == created

    response = client.put(f"/posts/{post_id}", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert response.json()["content"] == created["content"]

    response = client.delete(f"/posts/{post_id}")
    assert response.status_code == 204

    assert client.get(f"/posts/{post_id}").status_code == 404


def test_unknown_post_names_the_id(client: TestClient) -> None:
    post_id = str(uuid.uuid4())

    response = client.get(f"/posts/{post_id}")

    assert response.status_code == 404
    errors = assert_error_envelope(response.json())
    assert len(errors) == 1
    assert errors[0]["code"] == "post_not_found"
    assert errors[0]["details"] == {"post": post_id}


def test_malformed_post_id_is_a_path_error(client: TestClient) -> None:
    response = client.get("/posts/not-a-uuid")

    assert response.status_code == 400
    errors = assert_error_envelope(response.json())
    assert len(errors) == 1
    assert errors[0]["code"] == "invalid_path"
    assert errors[0]["details"] == {"field": "id"}


def test_create_post_requires_authentication(client: TestClient) -> None:
    response = client.post("/posts", json={"title": "Hello", "content": "..."})

    assert response.status_code == 401
    assert assert_error_envelope(response.json()) == [
        {"code": "authentication_required", "message": "A session cookie or API key is required."}
    ]


def test_create_post_validates_title(client: TestClient) -> None:
    register(client)

    response = client.post("/posts", json={"title": "Hi", "content": "..."})

    assert response.status_code == 400
    assert assert_error_envelope(response.json()) == [
        {"code": "length", "details": {"min": 3, "field": "title"}}
    ]


def test_only_the_owner_can_change_a_post(client: TestClient) -> None:
    register(client, username="alice")
    post = _create_post(client)
    other = TestClient(client.app)
    register(other, username="mallory")

    response = other.put(f"/posts/{post['id']}", json={"title": "Defaced"})
    assert response.status_code == 404
    assert assert_error_envelope(response.json())[0]["details"] == {"post": post["id"]}

    assert other.delete(f"/posts/{post['id']}").status_code == 404
    assert client.get(f"/posts/{post['id']}").json()["title"] == post["title"]


def test_list_posts_paginates(client: TestClient) -> None:
    register(client)
    for index in range(3):
        _create_post(client, title=f"Post {index}")

    response = client.get("/posts", params={"page": 1, "size": 2})
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = client.get("/posts", params={"page": 2, "size": 2})
    assert len(response.json()) == 1


def test_list_posts_rejects_out_of_range_pages(client: TestClient) -> None:
    response = client.get("/posts", params={"page": 0, "size": 500})

    assert response.status_code == 400
    errors = assert_error_envelope(response.json())
    assert [(error["code"], error["details"]["field"]) for error in errors] == [
        ("range", "page"),
        ("range", "size"),
    ]


def test_list_posts_rejects_unparsable_query(client: TestClient) -> None:
    response = client.get("/posts", params={"page": "first"})

    assert response.status_code == 400
    errors = assert_error_envelope(response.json())
    assert len(errors) == 1
    assert errors[0]["code"] == "invalid_query"


def test_list_my_posts_with_api_key(client: TestClient) -> None:
    register(client, username="alice")
    mine = _create_post(client, title="Mine")
    key = create_key(client)
    other = TestClient(client.app)
    register(other, username="bob")
    _create_post(other, title="Theirs")
    client.cookies.clear()

    response = client.get("/posts/me", headers=bearer(key))

    assert response.status_code == 200
    assert [post["id"] for post in response.json()] == [mine["id"]]


def test_authentication_is_checked_before_the_path(client: TestClient) -> None:
    for response in (
        client.put("/posts/not-a-uuid", json={"title": "Renamed"}),
        client.delete("/posts/not-a-uuid"),
    ):
        assert response.status_code == 401
        assert assert_error_envelope(response.json())[0]["code"] == "authentication_required"
