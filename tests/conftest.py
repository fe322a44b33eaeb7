import os

# Point storage at a private in-memory database before anything imports `models`.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402

from api import create_app, detach_query_observers  # noqa: E402
from api.config import TestingConfig  # noqa: E402
from models import storage  # noqa: E402
from models.user import UserRole  # noqa: E402
from services import build_services  # noqa: E402

DEFAULT_PASSWORD = "Password123!"


@pytest.fixture(scope="session")
def app():
    app = create_app("testing")
    yield app
    detach_query_observers(app)


@pytest.fixture
def build_app(monkeypatch):
    """Build a separate app with TestingConfig overrides; its observers are detached afterwards."""
    built = []

    def _build(**overrides):
        for key, value in overrides.items():
            monkeypatch.setattr(TestingConfig, key, value)
        app = create_app("testing")
        built.append(app)
        return app

    yield _build
    for app in built:
        detach_query_observers(app)


@pytest.fixture(autouse=True)
def clean_database():
    storage.clean()
    yield
    storage.rollback()
    storage.clean()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return build_services(storage, app.config)


@pytest.fixture
def make_user(services):
    """Create a user through the service layer; extra attributes are set afterwards."""
    counter = {"n": 0}

    def _make(email=None, password=DEFAULT_PASSWORD, role=UserRole.USER, **attrs):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        user = services.users.create(
            {
                "email": email,
                "password": password,
                "first_name": attrs.pop("first_name", "Test"),
                "last_name": attrs.pop("last_name", f"User{counter['n']}"),
                "role": role,
            }
        )
        if attrs:
            for key, value in attrs.items():
                setattr(user, key, value)
            services.accounts.save(user)
        return user

    return _make


@pytest.fixture
def login(client):
    """Log in over HTTP and return the response payload's data."""
    def _login(email, password=DEFAULT_PASSWORD):
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        return response.get_json()["data"]

    return _login


@pytest.fixture
def auth_headers(login):
    def _headers(email, password=DEFAULT_PASSWORD):
        return {"Authorization": f"Bearer {login(email, password)['accessToken']}"}

    return _headers
