from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from placement_portal.database import MAX_ROW_ID
from placement_portal.models.application import ApplicationStatus


class ApplicationCreate(BaseModel):
    job_id: int = Field(gt=0, le=MAX_ROW_ID)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationRead(BaseModel):
    id: int
    job_id: int
    student_id: int
    status: ApplicationStatus
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
