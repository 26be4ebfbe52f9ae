# security.py
"""Password hashing and signed session tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from fastapi import Response

from config import Settings, get_settings

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def create_session_token(user_id: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(seconds=settings.SESSION_MAX_AGE),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def resolve_session(token: Optional[str], settings: Optional[Settings] = None) -> Optional[str]:
    """Return the user id carried by a valid token, else None."""
    if not token:
        return None
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError:
        return None
    user_id = payload.get("sub")
    return user_id if isinstance(user_id, str) and user_id else None


def create_session(response: Response, user_id: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    token = create_session_token(user_id, settings)
    response.set_cookie(
        key=settings.SESSION_COOKIE,
        value=token,
        max_age=settings.SESSION_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=not settings.DEV_MODE,
    )
    return token


def destroy_session(response: Response, settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    response.delete_cookie(key=settings.SESSION_COOKIE, path="/")
