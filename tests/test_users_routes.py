import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from app.main import FRONTEND_MISSING_HINT, create_app


def test_users_endpoints_require_session(client):
    for method, path in [("get", "/v1/users"), ("get", "/v1/users/1"), ("post", "/v1/users")]:
        r = getattr(client, method)(path)
        assert r.status_code == 401, path
        assert r.json()["code"] == 401


def test_get_user_by_id(client, make_user, login):
    me = make_user()
    other = make_user("linus@example.com", "Linus")
    login(me)

    r = client.get(f"/v1/users/{other.id}")

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["id"] == other.id
    assert data["email"] == "linus@example.com"
    assert set(data) == {"id", "email", "name", "created_at", "updated_at"}


def test_get_unknown_user_is_404(client, make_user, login):
    login(make_user())

    r = client.get("/v1/users/987654")

    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "User not found", "code": 404}


def test_get_user_with_non_numeric_id_is_400(client, make_user, login):
    login(make_user())

    r = client.get("/v1/users/abc")

    assert r.status_code == 400
    assert r.json()["success"] is False


def test_create_user_endpoint(client, make_user, login):
    login(make_user())

    r = client.post("/v1/users", json={"email": "new@example.com", "name": " Newbie "})

    assert r.status_code == 201
    assert r.json()["data"]["name"] == "Newbie"

    dup = client.post("/v1/users", json={"email": "new@example.com", "name": "Again"})
    assert dup.status_code == 409
    assert dup.json()["code"] == 409


def test_create_user_rejects_bad_payload(client, make_user, login):
    login(make_user())

    for payload in ({"email": "new@example.com", "name": "   "}, {"email": "nope", "name": "x"}, {}):
        r = client.post("/v1/users", json=payload)
        assert r.status_code == 400, payload
        assert r.json()["success"] is False


def test_list_users_is_paginated_and_clamped(client, make_user, login):
    login(make_user())
    for i in range(3):
        make_user(f"user{i}@example.com", f"User {i}")

    r = client.get("/v1/users", params={"page": 0, "limit": 500})

    body = r.json()
    assert r.status_code == 200
    assert body["pagination"] == {"page": 1, "limit": 100, "total": 4, "total_pages": 1}
    assert len(body["data"]) == 4

    page2 = client.get("/v1/users", params={"page": 2, "limit": 3}).json()
    assert [u["email"] for u in page2["data"]] == ["user2@example.com"]
    assert page2["pagination"]["total_pages"] == 2


def test_update_profile(client, make_user, login, session):
    user = make_user()
    login(user)

    r = client.patch("/v1/profile", json={"name": "Rear Admiral"})
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Rear Admiral"

    untouched = client.patch("/v1/profile", json={})
    assert untouched.json()["data"]["name"] == "Rear Admiral"

    empty = client.patch("/v1/profile", json={"name": ""})
    assert empty.status_code == 400

    session.expire_all()
    assert session.get(type(user), user.id).name == "Rear Admiral"


def test_unbuilt_frontend_returns_hint(client):
    r = client.get("/some/spa/route")

    assert r.status_code == 404
    assert "npm run build" in r.text


@pytest.mark.parametrize("method", ["post", "put", "patch", "delete"])
def test_unbuilt_frontend_hint_for_any_method(client, method):
    r = getattr(client, method)("/v1/nope")

    assert r.status_code == 404
    assert r.text == FRONTEND_MISSING_HINT


def test_storage_failure_is_500_without_driver_details(client, make_user, login, monkeypatch):
    login(make_user())

    def boom(self, *args, **kwargs):
        raise OperationalError("SELECT users", {}, Exception("server closed the connection"))

    # Session lookup uses Session.get; the listing goes through Session.exec.
    monkeypatch.setattr(Session, "exec", boom)

    r = client.get("/v1/users")

    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Internal Server Error", "code": 500}
    assert "server closed" not in r.text


def test_built_frontend_is_served(settings, engine, oauth_client, tmp_path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text("<h1>Chronotes</h1>")
    app = create_app(
        settings.model_copy(update={"FRONTEND_PATH": str(dist)}),
        engine,
        oauth_client,
    )

    with TestClient(app) as client:
        assert "Chronotes" in client.get("/").text
        assert client.get("/v1/health").json() == {"status": "ok"}
