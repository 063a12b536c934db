"""Bearer-token handling for the quiz API.

Accounts and logins belong to the external account service; it issues HS256
tokens signed with the shared JWT_SECRET. This module only verifies them.
"""

import jwt
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, HTTPException, Request
from app.config import settings

router = APIRouter(prefix="/api/auth", tags=["auth"])

JWT_ALGORITHM = "HS256"
JWT_EXPIRY_HOURS = 72

ROLES = ("student", "teacher", "admin")


def create_token(user_id: int, role: str = "student", expiry_hours: int = JWT_EXPIRY_HOURS) -> str:
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=expiry_hours),
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


async def get_current_user(request: Request) -> dict:
    """Extract and validate the current user from the JWT token."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Empty token")

    payload = decode_token(token)
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token subject")

    role = payload.get("role") or "student"
    if role not in ROLES:
        raise HTTPException(status_code=401, detail="Invalid token role")
    return {"id": user_id, "role": role}


def require_role(*allowed_roles: str):
    """Return a dependency that checks the user has one of the allowed roles.

    Usage in a route:
        user = await require_role("student")(request)
    """
    async def _check(request: Request) -> dict:
        user = await get_current_user(request)
        if user["role"] not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Access denied. Required role: {', '.join(allowed_roles)}",
            )
        return user

    return _check


@router.get("/me")
async def me(request: Request):
    """Identity carried by the bearer token."""
    return await get_current_user(request)
