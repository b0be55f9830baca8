import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.database import InMemoryStore
from app.main import create_app
from app.services.token_service import TokenService

TEST_SECRET = "test-secret-key-0123456789abcdef-0123456789abcdef-0123456789abcdef"
DEFAULT_PASSWORD = "secret1"


def make_settings(**overrides):
    values = dict(SECRET_KEY=TEST_SECRET, BCRYPT_ROUNDS=4, LOG_LEVEL="WARNING")
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def token_service(settings):
    return TokenService.from_settings(settings)


@pytest.fixture
def api_app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(api_app):
    with TestClient(api_app) as c:
        yield c


@pytest.fixture
def signup(client):
    """Registers a user and returns the response body."""
    def _signup(email, password=DEFAULT_PASSWORD):
        response = client.post("/signup", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        return response.json()
    return _signup


@pytest.fixture
def auth_headers(signup):
    """Registers a user and returns Authorization headers carrying its token."""
    def _headers(email):
        body = signup(email)
        return {"Authorization": f"Bearer {body['token']}"}
    return _headers
