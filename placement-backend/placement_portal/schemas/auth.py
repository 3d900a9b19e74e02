# auth.py
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from placement_portal.models.user import Role
from placement_portal.schemas.user import EmployerDetails, StudentDetails, validate_email_like


def _normalize_username(v: str) -> str:
    return (v or "").strip().lower()


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=120)
    password: str = Field(min_length=6, max_length=256)
    role: Role
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)
    student_details: Optional[StudentDetails] = None
    employer_details: Optional[EmployerDetails] = None

    @field_validator("username")
    @classmethod
    def _validate_username(cls, v: str) -> str:
        value = _normalize_username(v)
        if len(value) < 3:
            raise ValueError("username must be at least 3 characters")
        return value

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return validate_email_like(v)

    @model_validator(mode="after")
    def _require_role_details(self) -> "RegisterRequest":
        if self.role == Role.STUDENT and self.student_details is None:
            raise ValueError("student_details are required when registering as a student")
        if self.role == Role.EMPLOYER and self.employer_details is None:
            raise ValueError("employer_details are required when registering as an employer")
        return self


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=1, max_length=256)

    @field_validator("username")
    @classmethod
    def _validate_username(cls, v: str) -> str:
        return _normalize_username(v)


class MessageResponse(BaseModel):
    message: str
