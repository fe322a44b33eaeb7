import uuid

import pytest

from models.user import UserRole

from conftest import DEFAULT_PASSWORD

PREFIX = "/api/v1/users"


@pytest.fixture
def viewer(make_user, auth_headers):
    """A logged-in regular user and their headers."""
    user = make_user("viewer@example.com", first_name="Viewer", last_name="Person")
    return user, auth_headers("viewer@example.com")


def test_create_user_is_public(client):
    response = client.post(PREFIX, json={"email": "public@example.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 201
    assert response.get_json()["data"]["email"] == "public@example.com"


def test_list_requires_authentication(client):
    response = client.get(PREFIX)
    assert response.status_code == 401


def test_list_paginates(client, make_user, viewer):
    _, headers = viewer
    for i in range(4):
        make_user(f"member{i}@example.com")

    response = client.get(f"{PREFIX}?page=2&limit=2&sort=email&order=asc", headers=headers)
    body = response.get_json()

    assert response.status_code == 200
    assert [u["email"] for u in body["data"]] == ["member2@example.com", "member3@example.com"]
    assert body["meta"] == {
        "mode": "page",
        "page": 2,
        "limit": 2,
        "total": 5,
        "pageCount": 3,
        "hasPrev": True,
        "hasNext": True,
    }


def test_list_page_past_the_end(client, viewer):
    _, headers = viewer

    body = client.get(f"{PREFIX}?page=9", headers=headers).get_json()

    assert body["data"] == []
    assert body["meta"]["total"] == 1
    assert body["meta"]["pageCount"] == 1
    assert body["meta"]["hasNext"] is False


def test_list_search_and_inactive_filter(client, make_user, viewer):
    _, headers = viewer
    make_user("jsmith@example.com", first_name="John", last_name="Smith")
    make_user("other@example.com", first_name="Johnny", last_name="Idle", is_active=False)
    make_user("jane@example.com", first_name="Jane", last_name="Doe")

    body = client.get(f"{PREFIX}?search=JOHN", headers=headers).get_json()

    assert [u["email"] for u in body["data"]] == ["jsmith@example.com"]
    assert body["meta"]["total"] == 1


def test_list_hides_deleted_users(client, make_user, viewer, services):
    _, headers = viewer
    gone = make_user("gone@example.com")
    services.users.remove(gone.id)

    emails = [u["email"] for u in client.get(PREFIX, headers=headers).get_json()["data"]]
    assert "gone@example.com" not in emails


@pytest.mark.parametrize("query", ["limit=101", "limit=0", "page=0", "sort=password", "order=up", "page=abc"])
def test_list_rejects_bad_query(client, viewer, query):
    _, headers = viewer

    response = client.get(f"{PREFIX}?{query}", headers=headers)

    assert response.status_code == 422
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_get_user(client, viewer):
    user, headers = viewer

    response = client.get(f"{PREFIX}/{user.id}", headers=headers)

    assert response.status_code == 200
    assert response.get_json()["data"]["id"] == user.id


def test_get_user_bad_uuid(client, viewer):
    _, headers = viewer

    response = client.get(f"{PREFIX}/not-a-uuid", headers=headers)

    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Validation failed (uuid is expected)"


def test_get_user_unknown(client, viewer):
    _, headers = viewer

    response = client.get(f"{PREFIX}/{uuid.uuid4()}", headers=headers)

    assert response.status_code == 404
    assert response.get_json()["error"]["message"] == "User not found"


def test_update_user(client, viewer):
    user, headers = viewer

    response = client.patch(f"{PREFIX}/{user.id}", json={"firstName": "Renamed"}, headers=headers)

    assert response.status_code == 200
    assert response.get_json()["data"]["firstName"] == "Renamed"
    assert response.get_json()["data"]["lastName"] == "Person"


def test_update_email_conflict(client, make_user, viewer):
    user, headers = viewer
    make_user("taken@example.com")

    response = client.patch(f"{PREFIX}/{user.id}", json={"email": "taken@example.com"}, headers=headers)

    assert response.status_code == 409


def test_password_change_revokes_refresh_tokens(client, make_user, login, auth_headers):
    user = make_user("alice@example.com")
    session = login("alice@example.com")

    response = client.patch(
        f"{PREFIX}/{user.id}",
        json={"password": "BrandNewPass1!"},
        headers={"Authorization": f"Bearer {session['accessToken']}"},
    )

    assert response.status_code == 200
    assert client.post("/api/v1/auth/refresh", json={"refreshToken": session["refreshToken"]}).status_code == 401
    assert login("alice@example.com", "BrandNewPass1!")["accessToken"]


def test_delete_user(client, make_user, login, viewer):
    _, headers = viewer
    target = make_user("target@example.com")
    session = login("target@example.com")

    response = client.delete(f"{PREFIX}/{target.id}", headers=headers)

    assert response.status_code == 204
    assert client.get(f"{PREFIX}/{target.id}", headers=headers).status_code == 404
    assert client.delete(f"{PREFIX}/{target.id}", headers=headers).status_code == 404
    failed_login = client.post(
        "/api/v1/auth/login", json={"email": "target@example.com", "password": DEFAULT_PASSWORD}
    )
    assert failed_login.status_code == 401
    assert client.post("/api/v1/auth/refresh", json={"refreshToken": session["refreshToken"]}).status_code == 401


def test_deleted_email_stays_reserved(client, make_user, services):
    gone = make_user("reserved@example.com")
    services.users.remove(gone.id)

    response = client.post(PREFIX, json={"email": "reserved@example.com", "password": DEFAULT_PASSWORD})
    assert response.status_code == 409


def test_revoke_sessions_requires_admin(client, make_user, viewer):
    _, headers = viewer
    target = make_user("target@example.com")

    response = client.post(f"{PREFIX}/{target.id}/revoke-sessions", headers=headers)

    assert response.status_code == 403
    assert response.get_json()["error"]["message"] == "Insufficient role"


def test_admin_revokes_sessions(client, make_user, login, auth_headers):
    make_user("admin@example.com", role=UserRole.ADMIN)
    target = make_user("target@example.com")
    session = login("target@example.com")

    response = client.post(
        f"{PREFIX}/{target.id}/revoke-sessions", headers=auth_headers("admin@example.com")
    )

    assert response.status_code == 204
    assert client.post("/api/v1/auth/refresh", json={"refreshToken": session["refreshToken"]}).status_code == 401


def test_admin_revoke_sessions_unknown_user(client, make_user, auth_headers):
    make_user("admin@example.com", role=UserRole.ADMIN)

    response = client.post(
        f"{PREFIX}/{uuid.uuid4()}/revoke-sessions", headers=auth_headers("admin@example.com")
    )
    assert response.status_code == 404


@pytest.mark.parametrize("term", ["%", "_", "\\"])
def test_search_wildcards_match_literally(client, make_user, viewer, term):
    _, headers = viewer
    make_user("alice@example.com", first_name="Alice")
    make_user("bob@example.com", first_name="Bob")

    response = client.get(PREFIX, query_string={"search": term}, headers=headers)

    assert response.status_code == 200
    assert response.get_json()["meta"]["total"] == 0


def test_search_finds_literal_underscore(client, make_user, viewer):
    _, headers = viewer
    make_user("first_last@example.com")
    make_user("firstxlast@example.com")

    body = client.get(PREFIX, query_string={"search": "first_last"}, headers=headers).get_json()

    assert [u["email"] for u in body["data"]] == ["first_last@example.com"]
