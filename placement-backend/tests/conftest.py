from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["SESSION_SECRET"] = "test-session-secret"
    os.environ["SESSION_BACKEND"] = "memory"

    # Ensure local .env cannot leak into tests.
    os.environ["ENVIRONMENT"] = "test"


def reset_database() -> None:
    from placement_portal.database import Base, engine
    import placement_portal.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def client() -> Any:
    from placement_portal.main import create_app

    reset_database()
    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db() -> Any:
    from placement_portal.database import SessionLocal

    reset_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
