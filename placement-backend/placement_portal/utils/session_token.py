# session_token.py
from datetime import datetime

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from placement_portal.config import settings
from placement_portal.errors import NotAuthenticated


def encode_session_token(session_id: str, expires_at: datetime) -> str:
    """Wrap an opaque session id in a signed token handed to the client."""
    claims = {"sid": session_id, "exp": expires_at}
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> str:
    try:
        claims = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except ExpiredSignatureError as exc:
        raise NotAuthenticated("Session expired") from exc
    except JWTError as exc:
        raise NotAuthenticated("Invalid session") from exc
    session_id = claims.get("sid")
    if not isinstance(session_id, str) or not session_id:
        raise NotAuthenticated("Invalid session")
    return session_id
