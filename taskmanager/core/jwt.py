# taskmanager/core/jwt.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import UUID

from jose import JWTError, jwt

from taskmanager.core.config import settings


def create_access_token(user_id: UUID | str, expires_delta: timedelta | None = None) -> str:
    """
    Issue a signed session token for ``user_id``. Default lifetime is
    ACCESS_TOKEN_EXPIRE_MINUTES (one day).
    """
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "typ": "access",
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Return the payload of a valid session token.
    Raises JWTError on bad signature, expiry or wrong token type.
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("typ") != "access":
        raise JWTError("Invalid token type")
    return payload


def decode_access_token(token: str):
    """verify_access_token, but returns None instead of raising."""
    try:
        return verify_access_token(token)
    except JWTError:
        return None
