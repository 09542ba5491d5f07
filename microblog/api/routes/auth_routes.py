"""
Authentication Routes

POST /auth/signup - Create account (Supabase Auth)
POST /auth/login - Login and get access token
POST /auth/logout - Sign out and drop the session cookie
GET /auth/me - Get current user info
GET /auth/session - Current user, confirmed by Supabase Auth
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from microblog.core.auth import clear_session_cookie, get_current_user, get_optional_user, set_session_cookie
from microblog.core.errors import http_error
from microblog.schemas.schemas import (
    ActionResponse, LoginRequest, SessionUser, SignupRequest, TokenResponse
)
from microblog.services.auth_service import AuthService, get_auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=ActionResponse, status_code=201)
async def signup(request: SignupRequest, response: Response, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new account.

    When the project requires email confirmation no session comes back and
    the user has to confirm before logging in.
    """
    try:
        result = auth.sign_up(request.email, request.password, request.username, request.name)
    except Exception as e:
        raise http_error(e, "Sign up")

    if not result["access_token"]:
        return ActionResponse(message="Check your email to confirm your account", id=result["user_id"])

    set_session_cookie(response, result["access_token"])
    return ActionResponse(message="Account created", id=result["user_id"])


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, response: Response, auth: AuthService = Depends(get_auth_service)):
    """
    Login and receive the Supabase access token.

    Include token in requests: Authorization: Bearer <token>
    """
    try:
        result = auth.sign_in(request.email, request.password)
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    set_session_cookie(response, result["access_token"])
    return TokenResponse(
        access_token=result["access_token"],
        user_id=result["user_id"],
        username=result["username"],
    )


@router.post("/logout", response_model=ActionResponse)
async def logout(
    response: Response,
    user: Optional[dict] = Depends(get_optional_user),
    auth: AuthService = Depends(get_auth_service),
):
    # The cookie goes regardless; a failed remote sign-out only leaves a token to expire
    if user:
        try:
            auth.sign_out(user["access_token"])
        except Exception as e:
            logger.warning("Remote sign out failed: %s", e)
    clear_session_cookie(response)
    return ActionResponse(message="Signed out")


@router.get("/me", response_model=SessionUser)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current user info from the verified token."""
    return SessionUser(**user)


@router.get("/session", response_model=SessionUser)
async def get_session(user: dict = Depends(get_current_user), auth: AuthService = Depends(get_auth_service)):
    """Check the token with Supabase Auth; 401 once the session is revoked."""
    try:
        session = auth.get_session(user["access_token"])
    except Exception:
        session = None
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session is no longer valid")
    return SessionUser(**session)
