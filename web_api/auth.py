"""
JWT session authentication for the web API.

Sessions are issued by the platform's login flow as an HttpOnly "session"
cookie holding an HS256 JWT whose subject is the numeric user id. This module
only verifies them and gates admin-only endpoints.
"""

import os

import jwt
from fastapi import Depends, HTTPException, Request

JWT_ALGORITHM = "HS256"


def _get_jwt_secret() -> str:
    secret = os.environ.get("JWT_SECRET")
    if not secret:
        raise ValueError("JWT_SECRET environment variable not set")
    return secret


def verify_jwt(token: str) -> dict | None:
    """
    Verify and decode a session JWT.

    Returns:
        Decoded payload dict if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, _get_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


async def get_current_user(request: Request) -> dict:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        HTTPException: 401 if not authenticated or invalid token
    """
    token = request.cookies.get("session")
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = verify_jwt(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return payload


async def require_admin(payload: dict = Depends(get_current_user)) -> dict:
    """
    FastAPI dependency for admin-only endpoints.

    Admin status is read from the database on every request, so revoking it
    takes effect immediately.

    Returns:
        The user's database record

    Raises:
        HTTPException: 401 if the user no longer exists, 403 if not an admin
    """
    from course_export.database import get_connection
    from course_export.queries.users import get_user_by_id, is_admin

    try:
        user_id = int(payload.get("sub", ""))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    async with get_connection() as conn:
        user = await get_user_by_id(conn, user_id)
        if not user:
            raise HTTPException(status_code=401, detail="User not found")
        if not await is_admin(conn, user_id):
            raise HTTPException(status_code=403, detail="Admin access required")

    return user
