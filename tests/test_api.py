"""
HTTP-level tests for the users and memos endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from core.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path / "data",
        jwt_secret="api-test-secret",
        password_hash_iterations=1000,
        storage_backend="file",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


def register(client, username, password):
    return client.post(
        "/users/register",
        json={"username": username, "password": password},
        follow_redirects=False,
    )


def login(client, username, password):
    """Log in and return the session token; the client's cookie jar is left empty."""
    response = client.post(
        "/users/login",
        json={"username": username, "password": password},
        follow_redirects=False,
    )
    assert response.status_code == 303
    token = response.cookies["token"]
    client.cookies.clear()
    return token


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def add_memo(client, token, title="t", content="c"):
    response = client.post(
        "/memos/add",
        json={"title": title, "content": content},
        headers=auth(token),
    )
    assert response.status_code == 201
    return response.json()


# =========================================
# Startup and misc
# =========================================


def test_startup_bootstraps_collections(client, settings):
    assert settings.users_path.read_text() == "[]"
    assert settings.memos_path.read_text() == "[]"


def test_health_and_ready(client):
    assert client.get("/health").json()["status"] == "healthy"
    ready = client.get("/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"] == {"users": "ok", "memos": "ok"}


def test_root_redirects_to_memos(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/memos"


def test_unknown_path_is_404(client):
    assert client.get("/nowhere").status_code == 404


def test_forms(client):
    assert client.get("/users/login").json()["form"] == "login"
    assert client.get("/users/register").json()["form"] == "register"
    assert client.get("/memos/add").json() == {
        "form": "memo_add",
        "fields": ["title", "content"],
        "error": None,
        "memo": None,
    }


# =========================================
# Users
# =========================================


def test_register_then_login_sets_http_only_cookie(client):
    response = register(client, "alice", "pw1")
    assert response.status_code == 303
    assert response.headers["location"] == "/users/login"

    response = client.post(
        "/users/login",
        json={"username": "alice", "password": "pw1"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/memos"
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("token=")
    assert "httponly" in set_cookie.lower()


def test_duplicate_registration_shows_form_with_error(client):
    register(client, "alice", "pw1")

    response = register(client, "alice", "pw2")

    assert response.status_code == 200
    assert response.json()["form"] == "register"
    assert response.json()["error"] == "User already exists"


def test_bad_login_shows_form_with_error(client):
    register(client, "alice", "pw1")

    wrong_password = client.post("/users/login", json={"username": "alice", "password": "x"})
    unknown_user = client.post("/users/login", json={"username": "nobody", "password": "x"})

    assert wrong_password.status_code == 200
    assert wrong_password.json()["error"] == "Invalid username or password"
    assert unknown_user.json() == wrong_password.json()
    assert "set-cookie" not in wrong_password.headers


def test_empty_credentials_are_rejected(client):
    response = client.post("/users/register", json={"username": "", "password": "pw"})

    assert response.status_code == 422


def test_browser_form_posts_are_accepted(client):
    response = client.post(
        "/users/register",
        data={"username": "alice", "password": "pw1"},
        follow_redirects=False,
    )
    assert response.status_code == 303

    response = client.post(
        "/users/login",
        data={"username": "alice", "password": "pw1"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.cookies["token"]

    response = client.post("/memos/add", data={"title": "Groceries", "content": "milk"})
    assert response.status_code == 201
    memo = response.json()
    assert memo["title"] == "Groceries"

    response = client.post(f"/memos/edit/{memo['id']}", data={"title": "t2", "content": "c2"})
    assert response.status_code == 200
    assert response.json()["content"] == "c2"


def test_malformed_bodies_are_rejected(client):
    empty_form = client.post("/users/login", data={"username": "", "password": "pw"})
    broken_json = client.post(
        "/users/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert empty_form.status_code == 422
    assert empty_form.json()["detail"][0]["loc"] == ["body", "username"]
    assert broken_json.status_code == 422


def test_logout_clears_cookie(client):
    response = client.post("/users/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/users/login"
    assert response.headers["set-cookie"].startswith('token=""')


def test_users_home_redirects_by_cookie(client):
    anonymous = client.get("/users", follow_redirects=False)
    assert anonymous.headers["location"] == "/users/login"

    client.cookies.set("token", "anything")
    logged_in = client.get("/users", follow_redirects=False)
    assert logged_in.headers["location"] == "/memos"


# =========================================
# Memos
# =========================================


def test_create_requires_authentication(client):
    response = client.post("/memos/add", json={"title": "t", "content": "c"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Permission denied"


def test_create_with_invalid_token(client):
    response = client.post(
        "/memos/add",
        json={"title": "t", "content": "c"},
        headers=auth("forged.token.value"),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Permission denied"


def test_session_cookie_authenticates(client):
    register(client, "alice", "pw1")
    token = login(client, "alice", "pw1")

    client.cookies.set("token", token)
    response = client.post("/memos/add", json={"title": "t", "content": "c"})

    assert response.status_code == 201


def test_list_and_search(client):
    register(client, "alice", "pw1")
    token = login(client, "alice", "pw1")
    add_memo(client, token, "Shopping", "milk")
    add_memo(client, token, "Work", "finish the REPORT")

    everything = client.get("/memos").json()
    assert everything["total"] == 2
    assert everything["auth_error"] is False

    found = client.get("/memos", params={"search": "report"}).json()
    assert [memo["title"] for memo in found["memos"]] == ["Work"]
    assert found["search"] == "report"

    flagged = client.get("/memos", params={"authError": "true"}).json()
    assert flagged["auth_error"] is True


def test_edit_form_for_owner_and_others(client):
    register(client, "alice", "pw1")
    register(client, "bob", "pw2")
    alice = login(client, "alice", "pw1")
    bob = login(client, "bob", "pw2")
    memo = add_memo(client, alice)

    own = client.get(f"/memos/edit/{memo['id']}", headers=auth(alice))
    assert own.status_code == 200
    assert own.json()["memo"]["id"] == memo["id"]

    foreign = client.get(f"/memos/edit/{memo['id']}", headers=auth(bob), follow_redirects=False)
    assert foreign.status_code == 303
    assert foreign.headers["location"] == "/memos?authError=true"

    missing = client.get("/memos/edit/missing", headers=auth(alice))
    assert missing.status_code == 404


def test_scenario_alice_and_bob(client, settings):
    register(client, "alice", "pw1")
    register(client, "bob", "pw2")
    alice = login(client, "alice", "pw1")
    memo = add_memo(client, alice, "t", "c")
    bob = login(client, "bob", "pw2")
    stored_before = settings.memos_path.read_bytes()

    response = client.post(
        f"/memos/edit/{memo['id']}",
        json={"title": "hacked", "content": "hacked"},
        headers=auth(bob),
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/memos?authError=true"
    assert settings.memos_path.read_bytes() == stored_before

    response = client.post(
        f"/memos/delete/{memo['id']}",
        headers=auth(bob),
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert client.get("/memos").json()["total"] == 1

    response = client.post(
        f"/memos/edit/{memo['id']}",
        json={"title": "t2", "content": "c2"},
        headers=auth(alice),
    )
    assert response.status_code == 200
    assert response.json()["title"] == "t2"

    response = client.post(f"/memos/delete/{memo['id']}", headers=auth(alice))
    assert response.status_code == 200
    assert client.get("/memos").json()["total"] == 0


def test_corrupt_collection_is_a_server_error(client, settings):
    settings.memos_path.write_text("{broken")

    response = client.get("/memos")

    assert response.status_code == 500
    assert response.json()["detail"] == "Storage unavailable"
    assert client.get("/ready").status_code == 503


def test_undecodable_collection_is_a_server_error(client, settings):
    settings.memos_path.write_bytes(b"[\xff]")

    response = client.get("/memos")

    assert response.status_code == 500
    assert response.json()["detail"] == "Storage unavailable"
    assert client.get("/ready").status_code == 503
