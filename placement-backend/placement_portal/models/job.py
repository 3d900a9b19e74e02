# job.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from placement_portal.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # Comma-delimited tags, e.g. "React, Node.js, TypeScript".
    requirements = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    salary = Column(String(100), nullable=True)
    posted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def requirement_tags(self) -> list[str]:
        return [tag.strip() for tag in (self.requirements or "").split(",") if tag.strip()]
