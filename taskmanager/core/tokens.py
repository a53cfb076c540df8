from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Tuple

from taskmanager.core import clock
from taskmanager.core.config import settings


def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


# ---- Password reset token ----
def new_reset_token() -> Tuple[str, str, datetime]:
    """
    Returns (raw token, digest to store, expiry).
    Only the digest is persisted; the raw token goes into the reset link.
    """
    raw = secrets.token_hex(32)
    expires = clock.utcnow() + timedelta(minutes=settings.reset_token_expire_minutes)
    return raw, sha256_hex(raw), expires


def reset_url(raw_token: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/reset-password/{raw_token}"
