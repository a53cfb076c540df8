# taskmanager/routers/auth.py
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from taskmanager.core.config import settings
from taskmanager.db.session import get_session
from taskmanager.dependencies.auth import get_current_user
from taskmanager.dependencies.validation import validated_body
from taskmanager.models.user import User
from taskmanager.schemas.common import Envelope
from taskmanager.schemas.user import (
    AccessTokenResponse,
    AuthData,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenData,
    UpdatePasswordRequest,
    UpdateProfileRequest,
    UserData,
    UserPublic,
)
from taskmanager.services import auth_service

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_data(user: User, token: str) -> AuthData:
    return AuthData(user=UserPublic.model_validate(user), token=token)


def _user_data(user: User) -> UserData:
    return UserData(user=UserPublic.model_validate(user))


# ──────────────────────────────────────────────────────────────────────────────
# Register / login
# ──────────────────────────────────────────────────────────────────────────────
@auth_router.post("/register", response_model=Envelope[AuthData], status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest = Depends(validated_body(RegisterRequest)),
    db: Session = Depends(get_session),
):
    user, token = auth_service.register(db, payload)
    return Envelope(message="User registered successfully", data=_auth_data(user, token))


@auth_router.post("/login", response_model=Envelope[AuthData])
def login(
    payload: LoginRequest = Depends(validated_body(LoginRequest)),
    db: Session = Depends(get_session),
):
    user, token = auth_service.login(db, payload.email, payload.password)
    return Envelope(message="Login successful", data=_auth_data(user, token))


@auth_router.post("/token", response_model=AccessTokenResponse)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_session),
):
    """OAuth2 password flow for the interactive docs (username = email)."""
    user, token = auth_service.login(db, form_data.username, form_data.password)
    return AccessTokenResponse(
        access_token=token,
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserPublic.model_validate(user),
    )


@auth_router.get("/me", response_model=Envelope[UserData])
def me(user: User = Depends(get_current_user)):
    return Envelope(data=_user_data(user))


@auth_router.post("/logout", response_model=Envelope[None])
def logout():
    """
    Tokens are stateless, so there is nothing to revoke server-side;
    the client drops its token.
    """
    return Envelope(message="Logged out successfully")


@auth_router.post("/refresh", response_model=Envelope[TokenData])
def refresh(user: User = Depends(get_current_user)):
    return Envelope(data=TokenData(token=auth_service.refresh_session(user)))


# ──────────────────────────────────────────────────────────────────────────────
# Password reset
# ──────────────────────────────────────────────────────────────────────────────
@auth_router.post("/forgot-password", response_model=Envelope[None])
def forgot_password(
    payload: ForgotPasswordRequest = Depends(validated_body(ForgotPasswordRequest)),
    db: Session = Depends(get_session),
):
    message = auth_service.forgot_password(db, payload.email)
    return Envelope(message=message)


@auth_router.get("/reset-password/{token}", response_model=Envelope[None])
def verify_reset_token(token: str, db: Session = Depends(get_session)):
    auth_service.verify_reset_token(db, token)
    return Envelope(message="Reset token is valid")


@auth_router.post("/reset-password", response_model=Envelope[None])
def reset_password(
    payload: ResetPasswordRequest = Depends(validated_body(ResetPasswordRequest)),
    db: Session = Depends(get_session),
):
    auth_service.reset_password(db, payload.token, payload.password)
    return Envelope(message="Password has been reset successfully")


# ──────────────────────────────────────────────────────────────────────────────
# Profile
# ──────────────────────────────────────────────────────────────────────────────
@auth_router.get("/profile", response_model=Envelope[UserData])
def get_profile(user: User = Depends(get_current_user)):
    return Envelope(data=_user_data(user))


@auth_router.put("/profile", response_model=Envelope[UserData])
def update_profile(
    user: User = Depends(get_current_user),
    payload: UpdateProfileRequest = Depends(validated_body(UpdateProfileRequest)),
    db: Session = Depends(get_session),
):
    user = auth_service.update_profile(db, user, payload)
    return Envelope(message="Profile updated successfully", data=_user_data(user))


@auth_router.put("/password", response_model=Envelope[None])
def update_password(
    user: User = Depends(get_current_user),
    payload: UpdatePasswordRequest = Depends(validated_body(UpdatePasswordRequest)),
    db: Session = Depends(get_session),
):
    auth_service.update_password(db, user, payload)
    return Envelope(message="Password updated successfully")
