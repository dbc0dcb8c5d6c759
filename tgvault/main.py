"""Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import __version__
from .database import engine, Base, get_db, DATABASE_URL
from .api import (
    collections_router,
    folders_router,
    notes_router,
    attributes_router,
    attachments_router,
)
from .core.config import settings, ConfigurationError, Environment
from .core.logging_config import mask_secrets, setup_logging
from .middleware.exception_handler import (
    tgvault_exception_handler,
    request_validation_handler,
    sqlalchemy_exception_handler,
)
from .middleware.request_context import RequestContextMiddleware
from .exceptions import TgVaultException
from . import models  # noqa: F401  registers tables on Base.metadata

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Startup validation: verify database connectivity before creating tables.
# ---------------------------------------------------------------------------

def _validate_database_connection() -> None:
    """Test that the database is reachable. Exits with a one-line hint on failure."""
    masked = mask_secrets(DATABASE_URL)
    logger.info(f"Connecting to database: {masked}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        hint = (
            "Check that the directory exists and is writable."
            if DATABASE_URL.startswith("sqlite")
            else "Check that the server is up and DATABASE_URL credentials are right."
        )
        logger.critical(f"Database unreachable at {masked}. {hint} Error: {e}")
        raise SystemExit(1) from e
    logger.info("Database connection verified")


_validate_database_connection()

# Tables are owner-scoped and static; create any that are missing.
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the tgvault API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.environment == Environment.DEVELOPMENT:
        logger.warning(
            "SECURITY: owner tokens are unsigned and trivially forgeable. "
            "Do not expose this service beyond the Mini App's trusted network."
        )
        origins = settings.get_cors_origins()
        localhost_origins = [o for o in origins if "localhost" in o or "127.0.0.1" in o]
        if localhost_origins:
            logger.warning(
                "CORS allows localhost origins: %s. Remove these for production.",
                localhost_origins,
            )

    yield  # App runs here


# Create FastAPI app
app = FastAPI(
    title="tgvault API",
    description=(
        "Backend for a Telegram Mini App: per-user vector collection registry "
        "organised in a folder tree, a hierarchical notes wiki with attributes, "
        "and note attachments.\n\n"
        "**Owners:** collection and folder routes take the owner from the URL; "
        "note, attribute and attachment routes take it from a `Bearer` owner token."
    ),
    version=__version__,
    lifespan=lifespan,
)

# Middleware stack (outermost first: CORS wraps request context).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(RequestContextMiddleware)

# Register exception handlers
app.add_exception_handler(TgVaultException, tgvault_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)

db_type = "PostgreSQL" if DATABASE_URL.startswith("postgresql") else "SQLite"
logger.info(
    "tgvault API started | env=%s | db=%s | cors=%s",
    settings.environment.value,
    db_type,
    ",".join(settings.get_cors_origins()),
)

# Include routers
app.include_router(collections_router)
app.include_router(folders_router)
app.include_router(notes_router)
app.include_router(attributes_router)
app.include_router(attachments_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "tgvault API",
        "version": __version__,
        "status": "running"
    }


@app.get("/api/test")
def smoke_test():
    """Liveness probe for the Mini App frontend; touches nothing."""
    return {
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint returning database status, uptime, and note count.

    Never raises; returns degraded status on DB failure so load balancers
    can still probe without receiving 5xx.
    """
    db_status = "ok"
    note_count = 0
    try:
        db.execute(text("SELECT 1"))
        row = db.execute(text("SELECT COUNT(*) FROM notes WHERE is_deleted = :deleted"), {"deleted": False}).scalar()
        note_count = row or 0
    except SQLAlchemyError:
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": __version__,
        "note_count": note_count,
    }
