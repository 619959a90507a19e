"""Data access repositories."""

from .base import BaseRepository
from .document_repository import DocumentRepository
from .report_repository import ReportRepository

__all__ = [
    "BaseRepository",
    "DocumentRepository",
    "ReportRepository",
]
