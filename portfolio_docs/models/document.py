"""Portfolio document model — folders, files and synthesis notes in one table."""

from sqlalchemy import Column, Index, String, Text, BigInteger, DateTime
from sqlalchemy.sql import func
from ..database import Base


class PortfolioDocument(Base):
    """One entry of a company's document space.

    The hierarchy is a forest expressed through ``parent_id``. There is no
    foreign key on ``parent_id``: the tree builder tolerates dangling parents,
    and cascading deletes are done by the service through the same traversal.
    """

    __tablename__ = "portfolio_documents"
    __table_args__ = (
        Index("ix_portfolio_documents_company_id", "company_id"),
        Index("ix_portfolio_documents_parent_id", "parent_id"),
        Index("ix_portfolio_documents_source_report_id", "source_report_id"),
    )

    id = Column(String(50), primary_key=True)
    company_id = Column(String(50), nullable=False)

    # 'folder' | 'file' | 'synthesis'
    type = Column(String(20), nullable=False)
    name = Column(String(255), nullable=False)
    parent_id = Column(String(50), nullable=True)

    # Storage (files only)
    storage_path = Column(Text, nullable=True)
    mime_type = Column(String(255), nullable=True)
    file_size_bytes = Column(BigInteger, nullable=True)
    original_file_name = Column(String(255), nullable=True)

    # Inline content (syntheses, notes)
    text_content = Column(Text, nullable=True)

    # Back-references to the reporting pipeline
    source_report_id = Column(String(50), nullable=True)
    report_file_id = Column(String(50), nullable=True)

    created_by = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
