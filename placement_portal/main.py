"""
Campus Placement Portal - Main Application

FastAPI backend with:
- PostgreSQL (or SQLite) for users, profiles, jobs and applications
- Server-side sessions (in-memory or MongoDB) behind a signed cookie
- Role-gated JSON API under /api

Run: uvicorn placement_portal.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from placement_portal import __version__
from placement_portal.api import api_router
from placement_portal.core.auth import SessionManager
from placement_portal.core.config import Settings, get_settings
from placement_portal.core.errors import register_exception_handlers
from placement_portal.core.sessions import SessionStore, build_session_store
from placement_portal.db.database import Database
from placement_portal.services.seed_service import seed_database
from placement_portal.services.storage import DatabaseStorage
from placement_portal.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    session_store: Optional[SessionStore] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    `database` and `session_store` default to what settings describe;
    tests pass their own.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("starting_api", environment=settings.environment, version=__version__)
        db = database if database is not None else Database(settings.sqlalchemy_url, echo=settings.debug)
        db.create_all()

        storage = DatabaseStorage(db)
        app.state.database = db
        app.state.storage = storage
        app.state.sessions = SessionManager(
            session_store if session_store is not None else build_session_store(settings), settings
        )

        if settings.seed_demo_data:
            try:
                seed_database(storage, log_credentials=not settings.is_production)
            except Exception as e:
                logger.error("seeding_failed", error=str(e), exc_info=e)

        yield

        logger.info("stopping_api")
        if database is None:
            db.dispose()

    app = FastAPI(
        title="Campus Placement Portal",
        description="""
        Campus placement backend.

        ## Features
        - **Authentication**: session cookies for students, employers, officers and admins
        - **Jobs**: employers post openings, everyone signed in can browse
        - **Applications**: students apply, employers shortlist and select
        - **Administration**: placement stats, employer approval
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware (credentials require explicit origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Detailed health check."""
        db_ok = request.app.state.database.test_connection()
        sessions_ok = request.app.state.sessions.store.ping()
        return {
            "status": "healthy" if db_ok and sessions_ok else "degraded",
            "database": "connected" if db_ok else "disconnected",
            "sessions": "connected" if sessions_ok else "disconnected",
        }

    return app


app = create_app()
