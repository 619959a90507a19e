"""Repository for company reports and their files."""

import uuid
from typing import List, Optional

from sqlalchemy.orm import selectinload

from ..models import CompanyReport, ReportFile
from ..schemas.report import ReportCreate
from .base import BaseRepository


class ReportRepository(BaseRepository[CompanyReport]):
    """Data access layer for company reports."""

    model_class = CompanyReport

    def list_by_company(self, company_id: str) -> List[CompanyReport]:
        return (
            self.db.query(CompanyReport)
            .options(selectinload(CompanyReport.files))
            .filter(CompanyReport.company_id == company_id)
            .order_by(CompanyReport.created_at, CompanyReport.id)
            .all()
        )

    def create(self, company_id: str, data: ReportCreate) -> CompanyReport:
        report = CompanyReport(
            id=str(uuid.uuid4()),
            company_id=company_id,
            report_period=data.report_period,
            report_date=data.report_date,
            report_type=data.report_type,
            processing_status=data.processing_status,
            headline=data.headline,
            cleaned_content=data.cleaned_content,
        )
        for file in data.files:
            report.files.append(ReportFile(
                id=str(uuid.uuid4()),
                file_name=file.file_name,
                storage_path=file.storage_path,
                mime_type=file.mime_type,
                file_type=file.file_type,
            ))
        self.db.add(report)
        self.db.flush()
        self.db.refresh(report)
        return report

    def update_cleaned_content(
        self, company_id: str, report_id: str, content: str
    ) -> Optional[CompanyReport]:
        report = self.get_in_company(company_id, report_id)
        if not report:
            return None
        report.cleaned_content = content
        self.db.flush()
        return report
