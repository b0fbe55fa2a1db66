"""Password hashing and JWT access tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from timesheet_tracker.config import Settings
from timesheet_tracker.errors import UnauthenticatedError


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    settings: Settings,
    user_id: UUID,
    role: str,
    name: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT carrying identity and role."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": str(user_id), "role": role, "name": name, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """Verify a JWT and return its claims.

    Raises UnauthenticatedError if the token is invalid, expired or lacks a
    usable subject.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise UnauthenticatedError("Token is not valid")

    subject = payload.get("sub")
    try:
        payload["sub"] = UUID(str(subject))
    except ValueError:
        raise UnauthenticatedError("Token is not valid")
    return payload
