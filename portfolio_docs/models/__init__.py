"""Database models."""

from .document import PortfolioDocument
from .report import CompanyReport, ReportFile

__all__ = ["PortfolioDocument", "CompanyReport", "ReportFile"]
