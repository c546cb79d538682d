"""Tests for the /comments blueprint."""
import uuid

import pytest

COMMENTS = ["This is my first comment", "This is my second comment", "This is my third comment"]


@pytest.fixture
def post(client, user):
    response = client.post("/posts", json={"title": "Post", "content": "Body"}, headers=user.headers)
    return response.get_json()


@pytest.fixture
def comment(client, user, post):
    response = client.post("/comments", json={"post_id": post["id"], "content": COMMENTS[0]}, headers=user.headers)
    assert response.status_code == 201
    return response.get_json()


def test_initially_empty(client, user):
    response = client.get("/comments", headers=user.headers)
    assert response.status_code == 200
    assert response.get_json() == []


def test_create(client, user, post):
    response = client.post("/comments", json={"post_id": post["id"], "content": COMMENTS[0]}, headers=user.headers)
    assert response.status_code == 201
    body = response.get_json()
    assert body["content"] == COMMENTS[0]
    assert body["post_id"] == post["id"]
    assert body["sender"] == user.id


def test_create_requires_token(client, post):
    response = client.post("/comments", json={"post_id": post["id"], "content": "x"})
    assert response.status_code == 401


def test_create_on_unknown_post(client, user):
    response = client.post("/comments", json={"post_id": str(uuid.uuid4()), "content": "x"}, headers=user.headers)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Post not found"


def test_create_on_malformed_post_id(client, user):
    response = client.post("/comments", json={"post_id": "invalid-id", "content": "x"}, headers=user.headers)
    assert response.status_code == 500


def test_list_filtered_by_post(client, user, post):
    other = client.post("/posts", json={"title": "Other", "content": "Other"}, headers=user.headers).get_json()
    for text in COMMENTS:
        client.post("/comments", json={"post_id": post["id"], "content": text}, headers=user.headers)
    client.post("/comments", json={"post_id": other["id"], "content": "elsewhere"}, headers=user.headers)

    assert len(client.get("/comments", headers=user.headers).get_json()) == 4

    response = client.get(f"/comments?post_id={post['id']}", headers=user.headers)
    assert response.status_code == 200
    assert [c["content"] for c in response.get_json()] == COMMENTS


def test_get_by_id(client, user, comment):
    response = client.get(f"/comments/{comment['id']}", headers=user.headers)
    assert response.status_code == 200
    assert response.get_json()["content"] == COMMENTS[0]


def test_get_unknown(client, user):
    response = client.get(f"/comments/{uuid.uuid4()}", headers=user.headers)
    assert response.status_code == 404
    assert response.get_json()["message"] == "Comment not found"


def test_get_malformed_id(client, user):
    assert client.get("/comments/invalid-id", headers=user.headers).status_code == 500


def test_update(client, user, comment):
    response = client.put(f"/comments/{comment['id']}", json={"content": "edited"}, headers=user.headers)
    assert response.status_code == 200
    assert response.get_json()["content"] == "edited"
    assert response.get_json()["post_id"] == comment["post_id"]


def test_update_requires_content(client, user, comment):
    response = client.put(f"/comments/{comment['id']}", json={}, headers=user.headers)
    assert response.status_code == 400
    assert response.get_json()["details"]["content"] == ["Content is required"]


def test_update_unknown(client, user):
    response = client.put(f"/comments/{uuid.uuid4()}", json={"content": "x"}, headers=user.headers)
    assert response.status_code == 404


def test_non_owner_cannot_update(client, other_user, comment):
    response = client.put(f"/comments/{comment['id']}", json={"content": "hijack"}, headers=other_user.headers)
    assert response.status_code == 403


def test_non_owner_cannot_delete(client, other_user, comment):
    response = client.delete(f"/comments/{comment['id']}", headers=other_user.headers)
    assert response.status_code == 403


def test_delete(client, user, comment):
    response = client.delete(f"/comments/{comment['id']}", headers=user.headers)
    assert response.status_code == 200
    assert response.get_json()["message"] == "Comment deleted successfully"
    assert client.get(f"/comments/{comment['id']}", headers=user.headers).status_code == 404


def test_delete_unknown(client, user):
    assert client.delete(f"/comments/{uuid.uuid4()}", headers=user.headers).status_code == 404


def test_post_owner_cannot_delete_someone_elses_comment(client, user, other_user, post):
    theirs = client.post("/comments", json={"post_id": post["id"], "content": "mine"}, headers=other_user.headers).get_json()
    response = client.delete(f"/comments/{theirs['id']}", headers=user.headers)
    assert response.status_code == 403
