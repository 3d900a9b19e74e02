# auth.py
from fastapi import APIRouter, Depends, Response, status

from placement_portal.config import settings
from placement_portal.models.user import User
from placement_portal.routers.dependencies import get_current_user, get_session_store, get_session_token, get_storage
from placement_portal.schemas.auth import LoginRequest, MessageResponse, RegisterRequest
from placement_portal.schemas.user import UserRead
from placement_portal.services import identity_service
from placement_portal.services.session_store import SessionStore
from placement_portal.services.storage import Storage


router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: RegisterRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    store: SessionStore = Depends(get_session_store),
) -> UserRead:
    user, token = identity_service.register(storage, store, payload)
    _set_session_cookie(response, token)
    return UserRead.model_validate(user)


@router.post("/login", response_model=UserRead)
def login_user(
    payload: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    store: SessionStore = Depends(get_session_store),
) -> UserRead:
    user, token = identity_service.login(storage, store, payload.username, payload.password)
    _set_session_cookie(response, token)
    return UserRead.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
def logout_user(
    response: Response,
    store: SessionStore = Depends(get_session_store),
    token: str | None = Depends(get_session_token),
) -> MessageResponse:
    identity_service.logout(store, token)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
