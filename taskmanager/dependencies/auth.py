from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from taskmanager.core.errors import AuthenticationError
from taskmanager.db.session import get_session
from taskmanager.models.user import User
from taskmanager.services import auth_service

# auto_error=False so a missing header gets the same 401 envelope as a bad token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_session),
) -> User:
    """Strict auth dependency; raises when no/invalid token or inactive user."""
    if not token:
        raise AuthenticationError()
    return auth_service.resolve_session_user(db, token)
