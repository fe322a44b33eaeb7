import pytest

from api import create_app, detach_query_observers
from api.errors import KIND_STATUS
from utils.errors import (
    AppError,
    BadRequest,
    Conflict,
    ErrorKind,
    Forbidden,
    InvalidCredential,
    NotFound,
    StorageError,
    Unauthorized,
)


def test_every_kind_has_a_status():
    assert set(KIND_STATUS) == set(ErrorKind)


@pytest.mark.parametrize(
    "error_cls, status",
    [
        (BadRequest, 400),
        (Unauthorized, 401),
        (InvalidCredential, 401),
        (Forbidden, 403),
        (NotFound, 404),
        (Conflict, 409),
        (StorageError, 500),
    ],
)
def test_subclass_kinds(error_cls, status):
    assert KIND_STATUS[error_cls().kind] == status


def test_code_defaults_to_kind():
    assert NotFound("User not found").code == "NOT_FOUND"
    assert StorageError(code="REFRESH_TOKEN_CONFLICT").code == "REFRESH_TOKEN_CONFLICT"
    assert AppError(kind=ErrorKind.CONFLICT).kind is ErrorKind.CONFLICT


@pytest.fixture
def raising_app():
    app = create_app("testing")

    @app.route("/boom/<kind>")
    def boom(kind):
        if kind == "storage":
            raise StorageError("disk on fire", reason="sqlite exploded")
        if kind == "conflict":
            raise Conflict("Email already in use", details={"field": "email"})
        if kind == "unauthorized":
            raise Unauthorized("Invalid credentials", reason="not_found")
        raise RuntimeError("unexpected")

    yield app
    detach_query_observers(app)


def test_error_envelope_shape(raising_app):
    response = raising_app.test_client().get("/boom/conflict", headers={"X-Request-Id": "req-42"})
    body = response.get_json()

    assert response.status_code == 409
    assert body["success"] is False
    assert body["error"] == {
        "message": "Email already in use",
        "code": "CONFLICT",
        "type": "HTTP_409",
        "details": {"field": "email"},
    }
    context = body["context"]
    assert context["requestId"] == "req-42"
    assert context["path"] == "/boom/conflict"
    assert context["method"] == "GET"
    assert context["status"] == 409
    assert context["timestamp"].endswith("Z")
    assert response.headers["X-Request-Id"] == "req-42"


def test_storage_errors_are_opaque(raising_app):
    response = raising_app.test_client().get("/boom/storage")
    body = response.get_json()

    assert response.status_code == 500
    assert body["error"]["message"] == "An unexpected error occurred"
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "sqlite" not in response.get_data(as_text=True)


def test_unhandled_exceptions_become_500(raising_app):
    response = raising_app.test_client().get("/boom/other")

    assert response.status_code == 500
    assert response.get_json()["error"]["code"] == "INTERNAL_ERROR"


def test_unauthorized_hides_reason_and_sets_challenge(raising_app):
    response = raising_app.test_client().get("/boom/unauthorized")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert "not_found" not in response.get_data(as_text=True)


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/v1/does-not-exist")
    body = response.get_json()

    assert response.status_code == 404
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["context"]["path"] == "/api/v1/does-not-exist"
    # generated when the client sends none
    assert body["context"]["requestId"]
