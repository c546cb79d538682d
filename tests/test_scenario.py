"""End-to-end walk through register, login, post lifecycle."""


def test_register_login_post_lifecycle(client):
    register = client.post("/auth/register", json={"email": "a@x.com", "username": "a", "password": "pw"})
    assert register.status_code == 201
    assert register.get_json()["access_token"]
    assert register.get_json()["refresh_token"]

    login = client.post("/auth/login", json={"email": "a@x.com", "password": "pw"})
    assert login.status_code == 200
    body = login.get_json()
    user_id = body["user"]["id"]
    headers = {"Authorization": f"Bearer {body['access_token']}"}

    created = client.post("/posts", json={"title": "T", "content": "C"}, headers=headers)
    assert created.status_code == 201
    assert created.get_json()["sender"] == user_id
    post_id = created.get_json()["id"]

    listed = client.get(f"/posts?sender={user_id}", headers=headers)
    assert listed.status_code == 200
    assert len(listed.get_json()) == 1

    assert client.delete(f"/posts/{post_id}", headers=headers).status_code == 200
    assert client.get(f"/posts/{post_id}", headers=headers).status_code == 404
