"""
Token verification, auth service and the login/signup flows.
"""

import pytest

from microblog.core.auth import decode_token, user_from_claims
from microblog.services.auth_service import AuthService

from tests.conftest import make_token
from tests.fakes import FakeSupabase


def test_valid_token_decodes_to_user():
    token = make_token()
    payload = decode_token(token)
    user = user_from_claims(payload, token)
    assert user["user_id"] == "alice-id"
    assert user["username"] == "alice"
    assert user["access_token"] == token


def test_expired_or_garbage_tokens_are_rejected():
    assert decode_token(make_token(expires_in=-60)) is None
    assert decode_token("not-a-token") is None


def test_me_with_header_and_cookie(client):
    token = make_token()
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["username"] == "alice"
    client.cookies.set("access_token", token)
    assert client.get("/api/auth/me").json()["user_id"] == "alice-id"


def test_me_without_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401


# ============================================================
# SERVICE
# ============================================================

@pytest.fixture
def db():
    return FakeSupabase(users=[{"id": "alice-id", "username": "alice"}])


def test_sign_up_rejects_spaces_and_taken_usernames(db):
    service = AuthService(db, auth_client=db)
    with pytest.raises(ValueError, match="spaces"):
        service.sign_up("new@example.com", "secret1", "new user", "New")
    with pytest.raises(ValueError, match="taken"):
        service.sign_up("new@example.com", "secret1", "alice", "New")
    assert db.auth.accounts == {}


def test_failed_username_check_does_not_block_sign_up(db):
    db.fail_tables.add("users")
    result = AuthService(db, auth_client=db).sign_up("new@example.com", "secret1", "newbie", "New")
    assert result["access_token"] == "token-auth-1"
    assert db.auth.accounts["new@example.com"][2] == {"username": "newbie", "name": "New"}


def test_sign_in(db):
    service = AuthService(db, auth_client=db)
    service.sign_up("new@example.com", "secret1", "newbie", "New")
    assert service.sign_in("new@example.com", "secret1")["username"] == "newbie"
    with pytest.raises(Exception):
        service.sign_in("new@example.com", "wrong")


def test_sign_up_awaiting_confirmation(db):
    db.auth.confirm_email = True
    result = AuthService(db, auth_client=db).sign_up("new@example.com", "secret1", "newbie", "New")
    assert result["access_token"] is None
    assert result["user_id"] == "auth-1"


# ============================================================
# API / PAGES
# ============================================================

def test_signup_and_login_endpoints(client):
    response = client.post("/api/auth/signup", json={
        "email": "carol@example.com", "password": "secret1", "username": "carol", "name": "Carol",
    })
    assert response.status_code == 201
    assert response.json()["message"] == "Account created"
    assert "access_token" in response.cookies

    assert client.post("/api/auth/login", json={"email": "carol@example.com", "password": "nope"}).status_code == 401
    body = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "secret1"}).json()
    assert body["access_token"] == "token-auth-1"
    assert body["username"] == "carol"


def test_signup_endpoint_validates_username(client):
    response = client.post("/api/auth/signup", json={
        "email": "carol@example.com", "password": "secret1", "username": "carol c", "name": "Carol",
    })
    assert response.status_code == 400


def test_login_page_sets_cookie_and_redirects(client, db):
    db.auth.accounts["alice@example.com"] = ("secret1", "alice-id", {"username": "alice"})
    response = client.post("/login", data={"email": "alice@example.com", "password": "secret1"},
                           follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert "httponly" in response.headers["set-cookie"].lower()


def test_login_page_shows_error(client):
    response = client.post("/login", data={"email": "x@example.com", "password": "bad"})
    assert response.status_code == 400
    assert "Invalid email or password" in response.text


def test_logout_revokes_session_and_clears_cookie(client, db):
    token = make_token()
    client.cookies.set("access_token", token)
    response = client.get("/logout", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert db.auth.admin.revoked == [token]
    assert "access_token=" in response.headers["set-cookie"]


def test_logout_without_session_skips_revocation(client, db):
    response = client.get("/logout", follow_redirects=False)
    assert response.status_code == 303
    assert db.auth.admin.revoked == []


def test_api_logout_revokes_bearer_token(client, db, alice_headers):
    response = client.post("/api/auth/logout", headers=alice_headers)
    assert response.json()["message"] == "Signed out"
    assert db.auth.admin.revoked == [alice_headers["Authorization"].split(" ", 1)[1]]


def test_sign_out_uses_admin_revocation():
    db = FakeSupabase()
    AuthService(db, auth_client=db).sign_out("some-token")
    assert db.auth.admin.revoked == ["some-token"]


def test_session_is_confirmed_until_logout(client, db, alice_headers):
    response = client.get("/api/auth/session", headers=alice_headers)
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    client.post("/api/auth/logout", headers=alice_headers)
    assert client.get("/api/auth/session", headers=alice_headers).status_code == 401
