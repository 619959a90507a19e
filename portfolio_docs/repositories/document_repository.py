"""Repository for portfolio document database operations."""

import uuid
from typing import Iterable, List, Optional

from ..models import PortfolioDocument
from ..schemas.document import FOLDER
from .base import BaseRepository


class DocumentRepository(BaseRepository[PortfolioDocument]):
    """Data access layer for portfolio documents.

    Every query is scoped by company; the repository never mixes document
    spaces.
    """

    model_class = PortfolioDocument

    def list_by_company(self, company_id: str, limit: Optional[int] = None) -> List[PortfolioDocument]:
        """All records of a company, folders first, then by type, name and id.

        Folders lead so that a truncated list keeps the structure its files
        hang from.
        """
        query = self._scoped(company_id).order_by(
            PortfolioDocument.type != FOLDER,
            PortfolioDocument.type,
            PortfolioDocument.name,
            PortfolioDocument.id,
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def create(self, company_id: str, **fields) -> PortfolioDocument:
        document = PortfolioDocument(
            id=fields.pop("id", None) or str(uuid.uuid4()),
            company_id=company_id,
            **fields,
        )
        self.db.add(document)
        self.db.flush()
        self.db.refresh(document)
        return document

    def update(self, document: PortfolioDocument, **fields) -> PortfolioDocument:
        for key, value in fields.items():
            setattr(document, key, value)
        self.db.flush()
        self.db.refresh(document)
        return document

    def delete_many(self, company_id: str, document_ids: Iterable[str]) -> int:
        ids = list(document_ids)
        if not ids:
            return 0
        count = (
            self._scoped(company_id)
            .filter(PortfolioDocument.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return count
