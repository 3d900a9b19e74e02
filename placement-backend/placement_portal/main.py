# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from placement_portal.api.routes.health import router as health_router
from placement_portal.config import build_sqlalchemy_db_url, settings
from placement_portal.database import Base, SessionLocal, engine
from placement_portal.errors import register_exception_handlers
from placement_portal.models import Application, EmployerProfile, Job, SessionRecord, StudentProfile, User  # noqa: F401
from placement_portal.routers import applications, auth, employers, jobs, stats
from placement_portal.services.session_store import build_session_store


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = app.state.session_store
        store.start()
        logger.info("app.startup session_backend=%s", settings.session_backend)
        yield
        store.close()

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.state.session_store = build_session_store(settings, SessionLocal)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    application.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
    application.include_router(jobs.router, prefix=settings.api_prefix)
    application.include_router(applications.router, prefix=settings.api_prefix)
    application.include_router(stats.router, prefix=settings.api_prefix)
    application.include_router(employers.router, prefix=settings.api_prefix)

    # Avoid accidental schema changes in shared MySQL databases.
    # For local/test sqlite usage, auto-create ORM tables is still convenient.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
