# dependencies.py
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from placement_portal.config import settings
from placement_portal.database import get_db
from placement_portal.models.user import User
from placement_portal.services import identity_service
from placement_portal.services.access_control import Operation, authorize_operation
from placement_portal.services.session_store import SessionStore
from placement_portal.services.storage import Storage


bearer_scheme = HTTPBearer(auto_error=False)


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return Storage(db)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    # An explicit Authorization header wins over the cookie.
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


def get_current_user(
    storage: Storage = Depends(get_storage),
    store: SessionStore = Depends(get_session_store),
    token: str | None = Depends(get_session_token),
) -> User:
    return identity_service.current_user(storage, store, token)


def require(operation: Operation) -> Callable[..., User]:
    """Dependency that resolves the current user and checks it may perform ``operation``."""

    def _require(current_user: User = Depends(get_current_user)) -> User:
        authorize_operation(current_user, operation)
        return current_user

    return _require
