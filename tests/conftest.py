import pytest
from fastapi.testclient import TestClient

from config import Config
from main import create_app
from oauth.state import FlowState, encode_state, new_csrf

SITE_ORIGIN = "https://site.example"
REDIRECT_URL = "https://oauth.example.net/callback"


@pytest.fixture()
def config():
    return Config(
        client_id="client-123",
        client_secret="secret-456",
        redirect_url=REDIRECT_URL,
        origins=("site.example", "*.example.org"),
        scopes="public_repo",
        token_timeout=2.0,
    )


@pytest.fixture()
def app(config):
    return create_app(config)


@pytest.fixture()
def client(app):
    # https so the Secure state cookie is stored and sent back
    return TestClient(app, base_url="https://testserver")


def make_state(origin: str = SITE_ORIGIN) -> str:
    return encode_state(FlowState(csrf=new_csrf(), origin=origin))


@pytest.fixture()
def state_for():
    """Factory for encoded state values bound to an origin."""
    return make_state
