# user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from placement_portal.models.user import Role


def validate_email_like(v: str) -> str:
    value = (v or "").strip()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    left, right = value.split("@", 1)
    if not left or not right:
        raise ValueError("email must have text before and after '@'")
    return value


class StudentDetails(BaseModel):
    department: str = Field(min_length=1, max_length=255)
    cgpa: str = Field(min_length=1, max_length=20)
    graduation_year: int = Field(ge=1900, le=2200)
    resume_url: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("resume_url")
    @classmethod
    def _validate_resume_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        value = v.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("resume_url must be an http(s) URL")
        return value


class EmployerDetails(BaseModel):
    company_name: str = Field(min_length=1, max_length=255)
    industry: str = Field(min_length=1, max_length=255)
    website: Optional[str] = Field(default=None, max_length=1000)


class EmployerProfileRead(EmployerDetails):
    user_id: int
    is_approved: bool

    model_config = ConfigDict(from_attributes=True)


class EmployerApprovalUpdate(BaseModel):
    is_approved: bool


class UserRead(BaseModel):
    id: int
    username: str
    role: Role
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
