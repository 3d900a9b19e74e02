"""Server-side session storage.

A session maps an opaque random id to a user id with a fixed expiry measured
from creation. Stores are created once per application (see ``main.create_app``),
started in the lifespan hook and closed on shutdown.
"""
from __future__ import annotations

import logging
import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session, sessionmaker

from placement_portal.config import Settings
from placement_portal.models.session_record import SessionRecord


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class SessionEntry:
    session_id: str
    user_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore(ABC):
    def __init__(self, ttl_seconds: int, clock: Clock = utc_now):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def _new_entry(self, user_id: int) -> SessionEntry:
        now = self._clock()
        return SessionEntry(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.ttl,
        )

    def start(self) -> None:
        self.purge_expired()

    @abstractmethod
    def create(self, user_id: int) -> SessionEntry:
        ...

    @abstractmethod
    def get(self, session_id: str) -> SessionEntry | None:
        """Return the live session for ``session_id``, or None if unknown or expired."""

    @abstractmethod
    def revoke(self, session_id: str) -> None:
        ...

    @abstractmethod
    def purge_expired(self) -> int:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class InMemorySessionStore(SessionStore):
    def __init__(self, ttl_seconds: int, clock: Clock = utc_now):
        super().__init__(ttl_seconds, clock)
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def create(self, user_id: int) -> SessionEntry:
        entry = self._new_entry(user_id)
        with self._lock:
            self._entries[entry.session_id] = entry
        return entry

    def get(self, session_id: str) -> SessionEntry | None:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[session_id]
                return None
            return entry

    def revoke(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, entry in self._entries.items() if entry.is_expired(now)]
            for sid in expired:
                del self._entries[sid]
        return len(expired)

    def close(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("session_store.closed backend=memory cleared=%s", count)


class DatabaseSessionStore(SessionStore):
    """Sessions kept in the ``sessions`` table so several app instances can share them."""

    def __init__(self, session_factory: sessionmaker, ttl_seconds: int, clock: Clock = utc_now):
        super().__init__(ttl_seconds, clock)
        self._session_factory = session_factory

    def _db(self) -> Session:
        return self._session_factory()

    def create(self, user_id: int) -> SessionEntry:
        entry = self._new_entry(user_id)
        with self._db() as db:
            db.add(
                SessionRecord(
                    session_id=entry.session_id,
                    user_id=entry.user_id,
                    created_at=entry.created_at,
                    expires_at=entry.expires_at,
                )
            )
            db.commit()
        return entry

    def get(self, session_id: str) -> SessionEntry | None:
        with self._db() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                return None
            entry = SessionEntry(
                session_id=record.session_id,
                user_id=record.user_id,
                created_at=_as_utc(record.created_at),
                expires_at=_as_utc(record.expires_at),
            )
            if entry.is_expired(self._clock()):
                db.delete(record)
                db.commit()
                return None
            return entry

    def revoke(self, session_id: str) -> None:
        with self._db() as db:
            db.query(SessionRecord).filter(SessionRecord.session_id == session_id).delete(synchronize_session=False)
            db.commit()

    def purge_expired(self) -> int:
        with self._db() as db:
            deleted = (
                db.query(SessionRecord)
                .filter(SessionRecord.expires_at <= self._clock())
                .delete(synchronize_session=False)
            )
            db.commit()
        return int(deleted or 0)

    def close(self) -> None:
        # Other instances may still be serving these sessions; only drop dead rows.
        purged = self.purge_expired()
        logger.info("session_store.closed backend=database purged=%s", purged)


def build_session_store(settings: Settings, session_factory: sessionmaker) -> SessionStore:
    if settings.session_backend == "database":
        return DatabaseSessionStore(session_factory, ttl_seconds=settings.session_ttl_seconds)
    return InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
