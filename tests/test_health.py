"""Smoke tests for the application shell."""


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json()["docs"] == "/apidocs/"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.get_json() == {"error": "NOT_FOUND", "message": "Resource not found", "status": 404}


def test_wrong_method_maps_to_validation_error(client):
    response = client.put("/health")
    assert response.status_code == 405
    body = response.get_json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["status"] == 405


def test_swagger_spec(client):
    response = client.get("/swagger.json")
    assert response.status_code == 200
    assert "/auth/refresh" in response.get_json()["paths"]


def test_purge_tokens_command(app, user):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["purge-tokens"])
    assert result.exit_code == 0
    assert "Removed 0 expired refresh token(s)" in result.output
