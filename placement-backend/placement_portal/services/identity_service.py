# identity_service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from placement_portal.config import settings
from placement_portal.errors import DuplicateUsername, Forbidden, InvalidCredentials, NotAuthenticated
from placement_portal.models.user import Role, User
from placement_portal.schemas.auth import RegisterRequest
from placement_portal.services.session_store import SessionEntry, SessionStore
from placement_portal.services.storage import Storage
from placement_portal.utils.password_hash import hash_password, verify_password
from placement_portal.utils.session_token import decode_session_token, encode_session_token


logger = logging.getLogger(__name__)

STAFF_ROLES = frozenset({Role.OFFICER, Role.ADMIN})

# Checked when the username is unknown so both login failures cost one scrypt.
_DUMMY_CREDENTIAL = hash_password("placement-portal-unknown-user")


def issue_token(entry: SessionEntry) -> str:
    return encode_session_token(entry.session_id, entry.expires_at)


def register(storage: Storage, store: SessionStore, payload: RegisterRequest) -> tuple[User, str]:
    if payload.role in STAFF_ROLES and not settings.allow_staff_registration:
        raise Forbidden("Officer and admin accounts cannot be self-registered")

    if storage.get_user_by_username(payload.username) is not None:
        raise DuplicateUsername()

    try:
        user = storage.create_user(
            username=payload.username,
            password=hash_password(payload.password),
            role=payload.role,
            name=payload.name,
            email=payload.email,
            commit=False,
        )
        if payload.role == Role.STUDENT:
            storage.create_student(user_id=user.id, commit=False, **payload.student_details.model_dump())
        elif payload.role == Role.EMPLOYER:
            storage.create_employer(
                user_id=user.id,
                commit=False,
                is_approved=settings.employer_auto_approve,
                **payload.employer_details.model_dump(),
            )
        storage.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same username.
        storage.rollback()
        raise DuplicateUsername() from exc

    logger.info("auth.register user_id=%s role=%s", user.id, user.role.value)
    return user, issue_token(store.create(user.id))


def login(storage: Storage, store: SessionStore, username: str, password: str) -> tuple[User, str]:
    user = storage.get_user_by_username(username)
    if user is None:
        verify_password(password, _DUMMY_CREDENTIAL)
        logger.info("auth.login username=%s ok=%s", username, False)
        raise InvalidCredentials()
    if not verify_password(password, user.password):
        logger.info("auth.login username=%s ok=%s", username, False)
        raise InvalidCredentials()
    logger.info("auth.login username=%s ok=%s", username, True)
    return user, issue_token(store.create(user.id))


def resolve_session_id(token: str | None) -> str:
    if not token:
        raise NotAuthenticated()
    return decode_session_token(token)


def logout(store: SessionStore, token: str | None) -> None:
    if not token:
        return
    try:
        session_id = decode_session_token(token)
    except NotAuthenticated:
        return
    store.revoke(session_id)


def current_user(storage: Storage, store: SessionStore, token: str | None) -> User:
    session_id = resolve_session_id(token)
    entry = store.get(session_id)
    if entry is None:
        raise NotAuthenticated()
    user = storage.get_user(entry.user_id)
    if user is None:
        store.revoke(session_id)
        raise NotAuthenticated("User not found")
    return user
