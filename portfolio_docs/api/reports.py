"""Report API: intake point for the external reporting pipeline."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..repositories import ReportRepository
from ..schemas.report import ReportCreate, ReportResponse
from ..services.document_service import DocumentService

router = APIRouter(prefix="/api/companies/{company_id}/reports", tags=["reports"])


@router.post("", response_model=ReportResponse, status_code=201)
def register_report(company_id: str, data: ReportCreate, db: Session = Depends(get_db)):
    return DocumentService(db).register_report(company_id, data)


@router.get("", response_model=List[ReportResponse])
def list_reports(company_id: str, db: Session = Depends(get_db)):
    return ReportRepository(db).list_by_company(company_id)


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(company_id: str, report_id: str, db: Session = Depends(get_db)):
    return DocumentService(db).get_report(company_id, report_id)
