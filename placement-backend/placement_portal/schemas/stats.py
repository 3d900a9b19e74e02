from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class StatsResponse(BaseModel):
    generated_at: datetime
    total_jobs: int
    total_applications: int
    applications_by_status: dict[str, int]
    total_students: int
    total_employers: int
