"""API routes."""

from .documents import router as documents_router
from .reports import router as reports_router

__all__ = ["documents_router", "reports_router"]
