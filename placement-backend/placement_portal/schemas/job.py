from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    requirements: str = Field(default="")
    location: str = Field(min_length=1, max_length=255)
    salary: str | None = Field(default=None, max_length=100)


class JobRead(BaseModel):
    id: int
    employer_id: int
    title: str
    description: str
    requirements: str
    location: str
    salary: str | None = None
    requirement_tags: list[str] = Field(default_factory=list)
    posted_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
