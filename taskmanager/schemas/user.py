# taskmanager/schemas/user.py
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

_NAME_RE = re.compile(r"^[a-zA-Z\s]+$")
_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
_HTTP_URL = TypeAdapter(AnyHttpUrl)

NAME_LENGTH_MSG = "Name must be between 2 and 50 characters"
NAME_CHARS_MSG = "Name can only contain letters and spaces"
EMAIL_MSG = "Please provide a valid email address"


# ===== shared field checks =====

def check_name(value):
    if not isinstance(value, str):
        raise ValueError(NAME_LENGTH_MSG)
    value = value.strip()
    if not 2 <= len(value) <= 50:
        raise ValueError(NAME_LENGTH_MSG)
    if not _NAME_RE.match(value):
        raise ValueError(NAME_CHARS_MSG)
    return value


def check_email(value):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(EMAIL_MSG)
    try:
        info = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(EMAIL_MSG)
    return info.normalized.lower()


def check_password(value, label: str = "Password"):
    if not isinstance(value, str) or len(value) < 6:
        raise ValueError(f"{label} must be at least 6 characters long")
    if not _PASSWORD_RE.match(value):
        raise ValueError(
            f"{label} must contain at least one lowercase letter, "
            "one uppercase letter, and one number"
        )
    return value


def check_required(value, message: str):
    if not isinstance(value, str) or not value:
        raise ValueError(message)
    return value


# ===== requests =====

class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return check_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return check_required(v, "Password is required")


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return check_email(v)


class ResetPasswordRequest(BaseModel):
    token: str
    password: str

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, v):
        return check_required(v, "Reset token is required")

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return check_name(v)

    @field_validator("avatar", mode="before")
    @classmethod
    def validate_avatar(cls, v):
        if not isinstance(v, str):
            raise ValueError("Avatar must be a valid URL")
        try:
            _HTTP_URL.validate_python(v.strip())
        except PydanticValidationError:
            raise ValueError("Avatar must be a valid URL")
        return v.strip()

    @model_validator(mode="after")
    def require_some_field(self):
        if not self.model_fields_set & {"name", "avatar"}:
            raise ValueError("No valid fields to update")
        return self


class UpdatePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("current_password", mode="before")
    @classmethod
    def validate_current_password(cls, v):
        return check_required(v, "Current password is required")

    @field_validator("new_password", mode="before")
    @classmethod
    def validate_new_password(cls, v):
        return check_password(v, label="New password")


# ===== responses =====

class UserPublic(BaseModel):
    """Profile as returned to clients. No password hash, no reset fields."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    name: str
    email: str
    avatar: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime


class AuthData(BaseModel):
    user: UserPublic
    token: str


class UserData(BaseModel):
    user: UserPublic


class TokenData(BaseModel):
    token: str


class AccessTokenResponse(BaseModel):
    """OAuth2 password-flow response used by the interactive docs."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserPublic
