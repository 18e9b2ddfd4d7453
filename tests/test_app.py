import logging

from fastapi.testclient import TestClient

from config import VERSION, Config
from main import create_app


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.text == "ok"


def test_cors_allows_configured_origin(client):
    response = client.get("/healthz", headers={"Origin": "https://site.example"})

    assert response.headers["access-control-allow-origin"] == "https://site.example"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_allows_wildcard_origin(client):
    response = client.get("/healthz", headers={"Origin": "https://cms.example.org"})

    assert response.headers["access-control-allow-origin"] == "https://cms.example.org"


def test_cors_ignores_other_origins(client):
    response = client.get("/healthz", headers={"Origin": "https://evil.example"})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


def test_cors_preflight(client):
    allowed = client.options(
        "/healthz",
        headers={"Origin": "https://site.example", "Access-Control-Request-Method": "GET"},
    )
    denied = client.options(
        "/healthz",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
    )

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == "https://site.example"
    assert denied.status_code == 400
    assert "access-control-allow-origin" not in denied.headers


def test_requests_without_origin_pass(client):
    response = client.get("/healthz")

    assert "access-control-allow-origin" not in response.headers


def test_missing_configuration_is_logged_not_fatal(caplog):
    with caplog.at_level(logging.INFO):
        app = create_app(Config())

    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert errors == [
        "[STARTUP] Missing env. Required: OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET, REDIRECT_URL, ORIGINS"
    ]
    assert TestClient(app).get("/healthz").text == "ok"


def test_unconfigured_app_rejects_every_origin():
    client = TestClient(create_app(Config()), base_url="https://testserver")

    response = client.get("/auth", params={"origin": "https://site.example"}, follow_redirects=False)

    assert response.status_code == 400
    assert response.text == "Origin not allowed"


def test_app_reports_shared_version(app):
    assert app.version == VERSION


def test_complete_configuration_logs_no_error(config, caplog):
    assert config.is_valid()
    with caplog.at_level(logging.INFO):
        create_app(config)

    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
