"""Custom exception hierarchy for portfolio-docs."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Document errors
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    INVALID_PARENT = "INVALID_PARENT"

    # Report errors
    REPORT_NOT_FOUND = "REPORT_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"


class PortfolioDocsError(Exception):
    """
    Base exception for all portfolio-docs errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class DocumentNotFoundError(PortfolioDocsError):
    """Document (or virtual node) not found in the company's document space."""

    def __init__(self, document_id: str):
        super().__init__(
            f"Document not found: {document_id}",
            ErrorCode.DOCUMENT_NOT_FOUND,
            status_code=404,
            details={"document_id": document_id}
        )


class FolderNotFoundError(PortfolioDocsError):
    """Target folder not found in the company's document space."""

    def __init__(self, folder_id: str):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class ReportNotFoundError(PortfolioDocsError):
    """Company report not found."""

    def __init__(self, report_id: str):
        super().__init__(
            f"Report not found: {report_id}",
            ErrorCode.REPORT_NOT_FOUND,
            status_code=404,
            details={"report_id": report_id}
        )


class InvalidParentError(PortfolioDocsError):
    """Requested parent cannot hold the document (not a folder, or inside its own subtree)."""

    def __init__(self, document_id: str, parent_id: str, reason: str):
        super().__init__(
            f"Cannot place {document_id} under {parent_id}: {reason}",
            ErrorCode.INVALID_PARENT,
            status_code=400,
            details={"document_id": document_id, "parent_id": parent_id}
        )


class ValidationError(PortfolioDocsError):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DatabaseError(PortfolioDocsError):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )
