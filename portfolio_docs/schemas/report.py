"""Company report schemas."""

from pydantic import BaseModel
from datetime import date, datetime
from typing import Optional, List


class ReportFileCreate(BaseModel):
    file_name: str
    storage_path: str
    mime_type: Optional[str] = None
    file_type: Optional[str] = "report"


class ReportCreate(BaseModel):
    """Register a report produced by the external reporting pipeline."""
    report_period: Optional[str] = None
    report_date: Optional[date] = None
    report_type: Optional[str] = None
    processing_status: Optional[str] = None
    headline: Optional[str] = None
    cleaned_content: Optional[str] = None
    files: List[ReportFileCreate] = []


class ReportFileResponse(BaseModel):
    id: str
    file_name: str
    storage_path: str
    mime_type: Optional[str] = None
    file_type: Optional[str] = None

    class Config:
        from_attributes = True


class ReportResponse(BaseModel):
    id: str
    company_id: str
    report_period: Optional[str] = None
    report_date: Optional[date] = None
    report_type: Optional[str] = None
    processing_status: Optional[str] = None
    headline: Optional[str] = None
    cleaned_content: Optional[str] = None
    created_at: Optional[datetime] = None
    files: List[ReportFileResponse] = []

    class Config:
        from_attributes = True
