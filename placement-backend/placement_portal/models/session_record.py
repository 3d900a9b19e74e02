from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from placement_portal.database import Base


class SessionRecord(Base):
    """Server-side session row used by the database session backend."""

    __tablename__ = "sessions"

    session_id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
