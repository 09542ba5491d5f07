import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from microblog.core.config import get_settings
from microblog.db.supabase import get_db
from microblog.main import app
from microblog.services.auth_service import AuthService, get_auth_service

from tests.fakes import FakeSupabase

settings = get_settings()

ALICE = {"id": "alice-id", "username": "alice", "name": "Alice", "avatar_url": None,
         "followers_count": 0, "following_count": 0}
BOB = {"id": "bob-id", "username": "bob", "name": "Bob", "avatar_url": None,
       "followers_count": 0, "following_count": 0}


def make_token(user_id="alice-id", username="alice", name="Alice", email="alice@example.com", expires_in=3600):
    now = int(time.time())
    return jwt.encode(
        {
            "sub": user_id,
            "email": email,
            "aud": settings.supabase_jwt_audience,
            "iat": now,
            "exp": now + expires_in,
            "user_metadata": {"username": username, "name": name},
        },
        settings.supabase_jwt_secret,
        algorithm="HS256",
    )


@pytest.fixture
def db():
    return FakeSupabase(users=[ALICE, BOB])


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_auth_service] = lambda: AuthService(db, auth_client=db)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def alice_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def bob_headers():
    return {"Authorization": f"Bearer {make_token('bob-id', 'bob', 'Bob', 'bob@example.com')}"}
