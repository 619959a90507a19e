"""Main FastAPI application."""

import logging
import re
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .api import documents_router, reports_router
from .core.config import settings, ConfigurationError
from .core.logging_config import setup_logging
from .database import engine, Base, get_db, DATABASE_URL, is_postgresql
from .exceptions import PortfolioDocsError
from .middleware.exception_handler import portfolio_docs_exception_handler
from .middleware.request_context import RequestContextMiddleware

VERSION = "1.0.0"

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


def _mask_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r'://([^:]+):([^@]+)@', r'://\1:***@', url)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the portfolio-docs API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    logger.info(f"Connecting to database: {_mask_url(DATABASE_URL)}")
    Base.metadata.create_all(bind=engine)

    yield  # App runs here


app = FastAPI(
    title="portfolio-docs API",
    description=(
        "Document space of portfolio companies: folders, files and report "
        "syntheses arranged as a navigable tree."
    ),
    version=VERSION,
    lifespan=lifespan,
)

# Middleware stack, outermost first: CORS wraps request context.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(PortfolioDocsError, portfolio_docs_exception_handler)

logger.info(
    "portfolio-docs API started | env=%s | db=%s",
    settings.environment.value,
    "PostgreSQL" if is_postgresql() else "SQLite",
)

app.include_router(documents_router)
app.include_router(reports_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "portfolio-docs API",
        "version": VERSION,
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint returning database status, uptime, and document count.

    Never raises. Returns degraded status on DB failure so load balancers
    can still probe without receiving 5xx.
    """
    db_status = "ok"
    document_count = 0
    try:
        row = db.execute(text("SELECT COUNT(*) FROM portfolio_documents")).scalar()
        document_count = row or 0
    except Exception:
        logger.exception("Health check query failed")
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": VERSION,
        "document_count": document_count,
    }
