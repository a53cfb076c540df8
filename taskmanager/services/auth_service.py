from __future__ import annotations

import logging
from typing import Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from taskmanager.core import clock
from taskmanager.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidOrExpiredTokenError,
    TransportError,
    ValidationError,
)
from taskmanager.core.jwt import create_access_token, decode_access_token
from taskmanager.core.security import hash_password, verify_password
from taskmanager.core.tokens import new_reset_token, reset_url
from taskmanager.models.user import User
from taskmanager.schemas.user import RegisterRequest, UpdatePasswordRequest, UpdateProfileRequest
from taskmanager.services import credential_store, mailer

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "User with this email already exists"
FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent."


def _start_session(db: Session, user: User) -> str:
    """Issue a session token and stamp last_login."""
    token = create_access_token(user.user_id)
    user.last_login = clock.utcnow()
    credential_store.save(db, user)
    return token


def register(db: Session, payload: RegisterRequest) -> Tuple[User, str]:
    if credential_store.email_exists(db, payload.email):
        raise ConflictError(EMAIL_TAKEN)

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    try:
        credential_store.add(db, user)
    except IntegrityError:
        # lost a race with a concurrent registration
        db.rollback()
        raise ConflictError(EMAIL_TAKEN)

    log.info("User registered user_id=%s", user.user_id)
    return user, _start_session(db, user)


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Resolve credentials to an active user.
    Every failure gets the same message so callers cannot probe which part was wrong.
    """
    user = credential_store.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        log.info("Login failed")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.is_active:
        log.info("Login refused for deactivated user_id=%s", user.user_id)
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def login(db: Session, email: str, password: str) -> Tuple[User, str]:
    user = authenticate(db, email, password)
    return user, _start_session(db, user)


def resolve_session_user(db: Session, token: str) -> User:
    """Token -> active user. Expiry is enforced here, at verification time."""
    payload = decode_access_token(token)
    if payload is None or "sub" not in payload:
        raise AuthenticationError()
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError()

    user = credential_store.get_user(db, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError()
    return user


def refresh_session(user: User) -> str:
    return create_access_token(user.user_id)


# ---- password reset ----
def forgot_password(db: Session, email: str) -> str:
    """
    Start a reset for ``email``. The returned message is identical whether or not
    the account exists.
    """
    user = credential_store.get_user_by_email(db, email)
    if user is None:
        log.info("Password reset requested for unknown email")
        return FORGOT_PASSWORD_MESSAGE

    raw, digest, expires = new_reset_token()
    credential_store.set_reset_token(db, user, digest, expires)

    try:
        mailer.send_password_reset(user.email, reset_url(raw))
    except TransportError as exc:
        log.error("Password reset email failed user_id=%s: %s", user.user_id, exc)
        credential_store.clear_reset_token(db, user)
        raise TransportError("Email could not be sent")

    log.info("Password reset requested user_id=%s", user.user_id)
    return FORGOT_PASSWORD_MESSAGE


def verify_reset_token(db: Session, token: str) -> User:
    user = credential_store.get_user_by_reset_token(db, token, clock.utcnow())
    if user is None:
        raise InvalidOrExpiredTokenError()
    return user


def reset_password(db: Session, token: str, new_password: str) -> User:
    user = verify_reset_token(db, token)
    user.password_hash = hash_password(new_password)
    credential_store.clear_reset_token(db, user)
    log.info("Password reset completed user_id=%s", user.user_id)
    return user


# ---- profile ----
def update_profile(db: Session, user: User, payload: UpdateProfileRequest) -> User:
    for field in ("name", "avatar"):
        if field in payload.model_fields_set:
            setattr(user, field, getattr(payload, field))
    return credential_store.save(db, user)


def update_password(db: Session, user: User, payload: UpdatePasswordRequest) -> User:
    if not verify_password(payload.current_password, user.password_hash):
        raise ValidationError("Current password is incorrect", field="current_password")
    user.password_hash = hash_password(payload.new_password)
    return credential_store.save(db, user)
