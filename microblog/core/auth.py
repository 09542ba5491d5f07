"""
Authentication Utility - Supabase session tokens.

Supabase Auth issues the access tokens (sign-in/sign-up happen there);
this module only verifies them and exposes FastAPI dependencies:
- Token verification with python-jose (HS256, project JWT secret)
- get_current_user for protected routes
- get_optional_user for pages that render for guests too
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from microblog.core.config import get_settings

settings = get_settings()

# Bearer token extractor (cookie is the fallback, so no auto error)
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a Supabase access token."""
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=settings.supabase_jwt_audience,
        )
    except JWTError:
        return None


def user_from_claims(payload: dict, token: str) -> Optional[dict]:
    """Build the request user dict from verified token claims."""
    user_id = payload.get("sub")
    if not user_id:
        return None
    metadata = payload.get("user_metadata") or {}
    return {
        "user_id": user_id,
        "email": payload.get("email"),
        "username": metadata.get("username"),
        "name": metadata.get("name"),
        "access_token": token,
    }


def resolve_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Header token wins over the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[dict]:
    """
    FastAPI dependency - current user or None.

    Invalid or expired tokens are treated like no token at all.
    """
    token = resolve_token(request, credentials)
    if not token:
        return None
    payload = decode_token(token)
    if not payload:
        return None
    return user_from_claims(payload, token)


async def get_current_user(user: Optional[dict] = Depends(get_optional_user)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def set_session_cookie(response: Response, token: str) -> None:
    """Keep the access token in an HTTP-only cookie for the server-rendered pages."""
    response.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
        max_age=60 * 60,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name)
