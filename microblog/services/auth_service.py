"""
Auth Service - sign-in, sign-up and sign-out through Supabase Auth.

Every call runs on its own non-persisting client so one user's session
never leaks into the shared database client.
"""

import logging
from typing import Optional

from fastapi import Depends
from supabase import Client

from microblog.db.supabase import TABLES, create_auth_client, get_db
from microblog.services.user_service import validate_username

logger = logging.getLogger(__name__)


def session_payload(response) -> dict:
    """Flatten an auth response into token + identity."""
    session = response.session
    user = response.user
    metadata = (user.user_metadata or {}) if user else {}
    return {
        "access_token": session.access_token if session else None,
        "user_id": user.id if user else None,
        "username": metadata.get("username"),
    }


class AuthService:

    def __init__(self, db: Client, auth_client: Optional[Client] = None):
        self.db = db
        self._auth_client = auth_client

    def _auth(self):
        client = self._auth_client or create_auth_client()
        return client.auth

    def sign_in(self, email: str, password: str) -> dict:
        try:
            response = self._auth().sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.error("Error signing in: %s", e)
            raise
        if response.session is None:
            raise PermissionError("Invalid login credentials")
        return session_payload(response)

    def sign_up(self, email: str, password: str, username: str, name: str) -> dict:
        """
        Create an account; the profile row is created by a database trigger
        from the username/name metadata.

        The session is None when email confirmation is required.
        """
        validate_username(username)

        # A failed uniqueness lookup does not block sign-up
        try:
            taken = self.db.table(TABLES["users"]).select("id").eq("username", username).limit(1).execute()
            if taken.data:
                raise ValueError("Username is already taken")
        except ValueError:
            raise
        except Exception as e:
            logger.error("Error checking username availability: %s", e)

        try:
            response = self._auth().sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"username": username, "name": name}},
            })
        except Exception as e:
            logger.error("Error signing up: %s", e)
            raise
        return session_payload(response)

    def sign_out(self, access_token: str) -> None:
        """Revoke the refresh tokens behind this access token."""
        try:
            self._auth().admin.sign_out(access_token)
        except Exception as e:
            logger.error("Error signing out: %s", e)
            raise

    def get_session(self, access_token: str) -> Optional[dict]:
        """
        Ask Supabase Auth who owns this access token.

        Unlike local JWT verification this notices revoked sessions: the
        call fails once the user has signed out.
        """
        try:
            response = self._auth().get_user(access_token)
        except Exception as e:
            logger.error("Error getting session: %s", e)
            raise
        user = response.user if response else None
        if user is None:
            return None
        metadata = user.user_metadata or {}
        return {
            "access_token": access_token,
            "user_id": user.id,
            "email": user.email,
            "username": metadata.get("username"),
            "name": metadata.get("name"),
        }


def get_auth_service(db: Client = Depends(get_db)) -> AuthService:
    """FastAPI dependency; tests override it to inject a fake auth client."""
    return AuthService(db)
