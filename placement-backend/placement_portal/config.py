from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load the backend .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the backend root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


SESSION_BACKENDS = ("memory", "database")


def _parse_origins(raw: Any) -> list[str]:
    if raw is None:
        return []

    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []

        # Support JSON array string or comma-separated string.
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                items = parsed if isinstance(parsed, list) else [parsed]
            except ValueError:
                items = [p.strip() for p in s.split(",")]
        else:
            items = [p.strip() for p in s.split(",")]
    else:
        items = [raw]

    return [str(item).strip() for item in items if item is not None and str(item).strip()]


class Settings(BaseSettings):
    app_name: str = Field(default="Campus Placement Portal")
    api_prefix: str = Field(default="/api")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    # Database configuration
    # DB_URL / ORM_DB_URL take precedence; otherwise development uses sqlite and
    # every other environment builds a MySQL URL from the discrete DB_* values.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="placement_portal", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5000", "http://127.0.0.1:5000"],
        validation_alias="CORS_ORIGINS",
    )

    # Sessions
    session_secret: str = Field(default="placement-system-secret", validation_alias="SESSION_SECRET")
    session_algorithm: str = Field(default="HS256", validation_alias="SESSION_ALGORITHM")
    session_ttl_seconds: int = Field(default=60 * 60 * 24, gt=0, validation_alias="SESSION_TTL_SECONDS")
    session_cookie_name: str = Field(default="placement_session", validation_alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, validation_alias="SESSION_COOKIE_SECURE")
    session_backend: str = Field(default="memory", validation_alias="SESSION_BACKEND")

    # Access policy
    # New employer accounts are approved on registration unless this is turned off,
    # in which case an officer or admin approves them with PATCH /employers/{user_id}/approval.
    employer_auto_approve: bool = Field(default=True, validation_alias="EMPLOYER_AUTO_APPROVE")
    # When false, officer/admin accounts can only be created with scripts/create_staff.py.
    allow_staff_registration: bool = Field(default=True, validation_alias="ALLOW_STAFF_REGISTRATION")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_origins(v)

    @field_validator("session_backend")
    @classmethod
    def _validate_session_backend(cls, v: str) -> str:
        value = (v or "").strip().lower()
        if value not in SESSION_BACKENDS:
            raise ValueError(f"session_backend must be one of {', '.join(SESSION_BACKENDS)}")
        return value

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    # Prefer a dedicated ORM URL if provided.
    if settings.orm_db_url:
        return settings.orm_db_url

    if settings.db_url:
        return settings.db_url

    if settings.environment.lower() in ("development", "test"):
        return "sqlite:///./dev.db"

    # NOTE: password may include special chars; safest is to rely on DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )
