# taskmanager/core/security.py
import base64
import hashlib

import bcrypt

from taskmanager.core.config import settings


def _pw_prehash(pw: str) -> bytes:
    """Pre-hash to avoid bcrypt's 72-byte input limit (base64 keeps NUL bytes out)."""
    return base64.b64encode(hashlib.sha256(pw.encode("utf-8")).digest())


def hash_password(pw: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_pw_prehash(pw), salt).decode("utf-8")


def verify_password(pw: str, pw_hash: str | None) -> bool:
    if not pw or not pw_hash:
        return False
    try:
        return bcrypt.checkpw(_pw_prehash(pw), pw_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
