from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime
from typing import Optional

from taskmanager.core import clock


class User(SQLModel, table=True):
    __tablename__ = "user"

    user_id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=50)
    # always stored lower-cased; see credential_store.normalize_email
    email: str = Field(index=True, unique=True, max_length=254)
    password_hash: str
    avatar: Optional[str] = None

    is_active: bool = True
    last_login: Optional[datetime] = None

    # sha256 digest of the emailed token, never the token itself
    reset_password_token: Optional[str] = Field(default=None, index=True)
    reset_password_expires: Optional[datetime] = None

    created_at: datetime = Field(default_factory=clock.utcnow)
    updated_at: datetime = Field(default_factory=clock.utcnow)
