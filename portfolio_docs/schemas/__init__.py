"""Pydantic schemas for request/response validation."""

from .document import (
    DocumentRecord,
    DocumentTreeNode,
    SourceItem,
    FolderCreate,
    FileRegister,
    TextDocumentCreate,
    RenameRequest,
    MoveRequest,
    ContentUpdate,
    ContentResponse,
    DeleteResult,
)
from .report import ReportCreate, ReportFileCreate, ReportResponse, ReportFileResponse

__all__ = [
    "DocumentRecord",
    "DocumentTreeNode",
    "SourceItem",
    "FolderCreate",
    "FileRegister",
    "TextDocumentCreate",
    "RenameRequest",
    "MoveRequest",
    "ContentUpdate",
    "ContentResponse",
    "DeleteResult",
    "ReportCreate",
    "ReportFileCreate",
    "ReportResponse",
    "ReportFileResponse",
]
