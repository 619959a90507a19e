"""Company report models — the secondary source behind virtual tree nodes."""

from sqlalchemy import Column, Index, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class CompanyReport(Base):
    """A periodic report received from a portfolio company."""

    __tablename__ = "company_reports"
    __table_args__ = (
        Index("ix_company_reports_company_id", "company_id"),
    )

    id = Column(String(50), primary_key=True)
    company_id = Column(String(50), nullable=False)
    report_period = Column(String(100), nullable=True)  # "Q1 2024", "March 2024"
    report_date = Column(Date, nullable=True)
    report_type = Column(String(50), nullable=True)
    processing_status = Column(String(50), nullable=True)
    headline = Column(Text, nullable=True)

    # AI synthesis of the report; surfaces in the tree as a virtual node
    cleaned_content = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    files = relationship("ReportFile", back_populates="report", cascade="all, delete-orphan")


class ReportFile(Base):
    """An original file attached to a company report."""

    __tablename__ = "report_files"
    __table_args__ = (
        Index("ix_report_files_report_id", "report_id"),
    )

    id = Column(String(50), primary_key=True)
    report_id = Column(String(50), ForeignKey("company_reports.id", ondelete="CASCADE"), nullable=False)
    file_name = Column(String(255), nullable=False)
    storage_path = Column(Text, nullable=False)
    mime_type = Column(String(255), nullable=True)
    file_type = Column(String(50), nullable=True)

    report = relationship("CompanyReport", back_populates="files")
