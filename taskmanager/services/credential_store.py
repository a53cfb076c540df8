# taskmanager/services/credential_store.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

from taskmanager.core import clock
from taskmanager.core.tokens import sha256_hex
from taskmanager.models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.exec(select(User).where(User.email == normalize_email(email))).first()


def email_exists(db: Session, email: str) -> bool:
    return get_user_by_email(db, email) is not None


def get_user_by_reset_token(db: Session, raw_token: str, now: datetime) -> Optional[User]:
    """Match on the stored digest; expired tokens never match."""
    stmt = select(User).where(
        User.reset_password_token == sha256_hex(raw_token),
        User.reset_password_expires > now,
    )
    return db.exec(stmt).first()


def add(db: Session, user: User) -> User:
    user.email = normalize_email(user.email)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def save(db: Session, user: User) -> User:
    user.updated_at = clock.utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_reset_token(db: Session, user: User, digest: str, expires: datetime) -> User:
    # one active token per user; a new request replaces the old one
    user.reset_password_token = digest
    user.reset_password_expires = expires
    return save(db, user)


def clear_reset_token(db: Session, user: User) -> User:
    user.reset_password_token = None
    user.reset_password_expires = None
    return save(db, user)
